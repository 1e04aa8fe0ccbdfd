"""Canonical string form for Telegram chat ids.

Telegram sends chat ids as JSON numbers while configuration supplies them as
strings, so both sides go through here before being compared.
"""


def normalize_chat_id(value) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None
