from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from app.utils.chat_id import normalize_chat_id


class Settings(BaseSettings):
    # Telegram
    telegram_bot_token: str = Field(
        validation_alias=AliasChoices("telegram_bot_token", "bot_token"),
    )
    telegram_chat_id: str = Field(
        validation_alias=AliasChoices("telegram_chat_id", "chat_id"),
    )
    telegram_webhook_secret: str = ""  # empty = header check disabled

    # Firestore credentials: either the full service account JSON blob
    # or the three decomposed fields below
    firebase_service_account_json: str | None = None
    firebase_project_id: str | None = None
    firebase_client_email: str | None = None
    firebase_private_key: str | None = None
    users_collection: str = "users"

    # New-user poller
    poll_interval_seconds: float = 30.0

    # App
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("telegram_chat_id", mode="before")
    @classmethod
    def _normalize_chat_id(cls, value):
        normalized = normalize_chat_id(value)
        if normalized is None:
            raise ValueError("telegram_chat_id must not be empty")
        return normalized
