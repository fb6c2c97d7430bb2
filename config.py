"""
Configuration module for the record store.

Settings are read from environment variables into a type-safe
configuration object. A ``Config`` can also be built directly and passed
to ``RecordStore``; nothing here touches process-wide SDK state.
"""
import os
from dataclasses import dataclass
from typing import Optional

MISSING_TABLE_POLICIES = {"create", "wait"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")
    if value < 1:
        raise ValueError(f"{name} must be positive, got: {value}")
    return value


def _flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got: {raw}")


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    dynamodb_table: str
    main_key_attribute: str = "userId"
    aws_region: str = "us-east-1"
    # Explicit keys only; AWS_* environment credentials (and their session
    # token) are left to boto3's default chain
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    endpoint_url: Optional[str] = None
    read_capacity_units: int = 5
    write_capacity_units: int = 5
    missing_table_policy: str = "create"
    optimistic_locking: bool = False
    secret_name: Optional[str] = None
    log_level: str = "INFO"

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Raises:
            ValueError: If required environment variables are missing or invalid.
        """
        dynamodb_table = os.environ.get("DYNAMODB_TABLE")
        if not dynamodb_table:
            raise ValueError(
                "DYNAMODB_TABLE environment variable is required"
            )

        missing_table_policy = os.environ.get(
            "MISSING_TABLE_POLICY", "create"
        ).lower()
        if missing_table_policy not in MISSING_TABLE_POLICIES:
            raise ValueError(
                f"MISSING_TABLE_POLICY must be one of {MISSING_TABLE_POLICIES}, "
                f"got: {missing_table_policy}"
            )

        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}, got: {log_level}"
            )

        return cls(
            dynamodb_table=dynamodb_table,
            main_key_attribute=os.environ.get("MAIN_KEY_ATTRIBUTE") or "userId",
            aws_region=os.environ.get("AWS_REGION", "us-east-1"),
            endpoint_url=os.environ.get("DYNAMODB_ENDPOINT_URL") or None,
            read_capacity_units=_positive_int("READ_CAPACITY_UNITS", 5),
            write_capacity_units=_positive_int("WRITE_CAPACITY_UNITS", 5),
            missing_table_policy=missing_table_policy,
            optimistic_locking=_flag("OPTIMISTIC_LOCKING"),
            secret_name=os.environ.get("RECORD_STORE_SECRET_NAME") or None,
            log_level=log_level,
        )


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The validated configuration object

    Raises:
        ValueError: If required environment variables are missing or invalid.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config
