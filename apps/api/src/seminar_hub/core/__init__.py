"""
Core module - Configuration, database, errors, security, and utilities.
"""

from seminar_hub.core.config import get_settings, settings
from seminar_hub.core.database import Base, close_db, get_db, init_db, store_errors
from seminar_hub.core.errors import (
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
    RecoverableProfileError,
    ServiceError,
    TransientError,
    ValidationFailedError,
)
from seminar_hub.core.redis import close_redis, get_redis_client, init_redis
from seminar_hub.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    "store_errors",
    # Errors
    "ServiceError",
    "PermissionDeniedError",
    "NotFoundError",
    "ValidationFailedError",
    "InvalidStatusTransitionError",
    "ConflictError",
    "TransientError",
    "RecoverableProfileError",
    # Redis
    "get_redis_client",
    "init_redis",
    "close_redis",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
