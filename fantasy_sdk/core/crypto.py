from __future__ import annotations

from functools import lru_cache

from cryptography.fernet import Fernet

from fantasy_sdk.core.config import settings
from fantasy_sdk.core.errors import ConfigurationError


@lru_cache(maxsize=1)
def _fernet() -> Fernet:
    if not settings.ENCRYPTION_KEY:
        raise ConfigurationError("ENCRYPTION_KEY is not set; cannot encrypt OAuth tokens.")
    return Fernet(settings.ENCRYPTION_KEY)

def encrypt_value(value: str | None) -> str | None:
    if value is None:
        return None
    return _fernet().encrypt(value.encode()).decode()

def decrypt_value(value: str | None) -> str | None:
    if value is None:
        return None
    return _fernet().decrypt(value.encode()).decode()
