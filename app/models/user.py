from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class UserRecord(BaseModel):
    """One document from the users collection. Read-only here.

    Documents are written by other systems, so a field holding a value of the
    wrong type reads as missing instead of failing the whole record.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    email: str | None = None
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    is_subscribed: bool | None = Field(None, alias="isSubscribed")
    trial_start_date: datetime | None = Field(None, alias="trialStartDate")
    last_activity_date: datetime | None = Field(None, alias="lastActivityDate")

    @field_validator(
        "email",
        "first_name",
        "last_name",
        "is_subscribed",
        "trial_start_date",
        "last_activity_date",
        mode="wrap",
    )
    @classmethod
    def _invalid_as_missing(cls, value, handler):
        try:
            return handler(value)
        except ValidationError:
            return None

    @classmethod
    def from_document(cls, doc_id: str | None, data: dict[str, Any] | None) -> "UserRecord":
        return cls.model_validate({**(data or {}), "id": doc_id})

    def get(self, field: str, default: Any = None) -> Any:
        """Look up a field by its document name; missing fields give ``default``."""
        for name, info in type(self).model_fields.items():
            if field in (name, info.alias):
                value = getattr(self, name)
                return default if value is None else value
        extra = self.model_extra or {}
        value = extra.get(field)
        return default if value is None else value

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
