"""Phone number identity: users are keyed by the digits of their phone number."""

import re

_NON_DIGIT = re.compile(r"\D")


def normalize_phone(raw: str | None) -> str:
    """Strip every non-digit character. ``'+95 9-123 456'`` -> ``'959123456'``."""
    if raw is None:
        return ""
    return _NON_DIGIT.sub("", str(raw))
