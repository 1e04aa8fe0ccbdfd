import pytest
from pydantic import ValidationError

from app.config import Settings
from app.utils.chat_id import normalize_chat_id


def test_defaults(settings):
    assert settings.users_collection == "users"
    assert settings.poll_interval_seconds == 30.0
    assert settings.port == 3000
    assert settings.firebase_service_account_json is None


def test_numeric_chat_id_is_normalized(settings):
    assert settings.telegram_chat_id == "123456789"


def test_short_env_names(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)
    monkeypatch.setenv("BOT_TOKEN", "999:short")
    monkeypatch.setenv("CHAT_ID", " 42 ")
    monkeypatch.setenv("PORT", "8080")

    s = Settings(_env_file=None)
    assert s.telegram_bot_token == "999:short"
    assert s.telegram_chat_id == "42"
    assert s.port == 8080


def test_prefixed_env_names(monkeypatch):
    monkeypatch.delenv("BOT_TOKEN", raising=False)
    monkeypatch.delenv("CHAT_ID", raising=False)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "999:long")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100200300")

    s = Settings(_env_file=None)
    assert s.telegram_bot_token == "999:long"
    assert s.telegram_chat_id == "-100200300"


def test_empty_chat_id_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, telegram_bot_token="x", telegram_chat_id="  ")


@pytest.mark.parametrize(
    "value, expected",
    [
        (5298733898, "5298733898"),
        ("5298733898", "5298733898"),
        (" 42\n", "42"),
        (-100200300, "-100200300"),
        (42.0, "42"),
        ("", None),
        (None, None),
        (True, None),
    ],
)
def test_normalize_chat_id(value, expected):
    assert normalize_chat_id(value) == expected
