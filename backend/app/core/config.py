"""Configuration loading and validation (fail-fast for critical env)."""

from __future__ import annotations

import json
import math
import os
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .exceptions import ConfigError, MissingConfigError
from ..utils.redaction import REDACTED, is_sensitive_key


class Environment(str, Enum):
    """Deployment environments"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


LOG_LEVELS = ("error", "warn", "info", "debug")
LOG_FORMATS = ("json", "plain")

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([kmg]?)b?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"": 1, "k": 1024, "m": 1024 ** 2, "g": 1024 ** 3}


DEFAULTS: Dict[str, Any] = {
    "APP_ENV": Environment.DEVELOPMENT.value,
    "HOST": "0.0.0.0",
    "PORT": 3000,
    "LOG_LEVEL": "info",
    "LOG_FORMAT": "json",
    "LOG_FILE": None,
    "LOG_MAX_SIZE": "10m",
    "LOG_MAX_FILES": 5,
    "API_TIMEOUT": 30000,
    "RATE_LIMIT_WINDOW": 900000,  # 15 minutes
    "RATE_LIMIT_MAX": 100,
    "CORS_ORIGIN": "*",
    "CORS_CREDENTIALS": "true",
    "DATABASE_URL": None,
    "DB_RETRY_ATTEMPTS": 3,
    "DB_POOL_SIZE": 10,
    "JWT_SECRET": None,
    "JWT_EXPIRES_IN": "24h",
    "JWT_ISSUER": "app",
    "JWT_AUDIENCE": "users",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _positive_int(value: Any) -> bool:
    return _is_int(value) and value > 0


def _one_of(*choices: str) -> Callable[[Any], bool]:
    return lambda value: value in choices


def parse_size(value: Any) -> Optional[int]:
    """Parse sizes such as ``10m`` or ``512k`` into bytes."""

    if _is_int(value):
        return value if value >= 0 else None
    if not isinstance(value, str):
        return None
    match = _SIZE_RE.match(value)
    if not match:
        return None
    return int(match.group(1)) * _SIZE_UNITS[match.group(2).lower()]


VALIDATION_RULES: Dict[str, Callable[[Any], bool]] = {
    "APP_ENV": _one_of(*(env.value for env in Environment)),
    "PORT": lambda value: _is_int(value) and 0 < value <= 65535,
    "LOG_LEVEL": _one_of(*LOG_LEVELS),
    "LOG_FORMAT": _one_of(*LOG_FORMATS),
    "LOG_MAX_SIZE": lambda value: parse_size(value) is not None,
    "LOG_MAX_FILES": _positive_int,
    "API_TIMEOUT": _positive_int,
    "RATE_LIMIT_WINDOW": _positive_int,
    "RATE_LIMIT_MAX": _positive_int,
    "CORS_CREDENTIALS": _one_of("true", "false"),
    "DB_RETRY_ATTEMPTS": lambda value: _is_int(value) and value >= 0,
    "DB_POOL_SIZE": _positive_int,
}


def _coerce_number(raw: str) -> Any:
    """Numeric parse of an env string; unparseable text is returned untouched."""

    try:
        return int(raw)
    except ValueError:
        pass
    try:
        number = float(raw)
    except ValueError:
        return raw
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


@dataclass(frozen=True)
class CorsConfig:
    origin: Any
    credentials: bool

    @property
    def origins(self) -> Tuple[str, ...]:
        """Allowed origins as a tuple (comma separated values are split)."""
        if not self.origin:
            return ()
        return tuple(part.strip() for part in str(self.origin).split(",") if part.strip())


@dataclass(frozen=True)
class RateLimitConfig:
    window_ms: int
    max: int


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    cors: CorsConfig
    rate_limit: RateLimitConfig


@dataclass(frozen=True)
class DatabaseConfig:
    url: Optional[str]
    timeout: int
    retry_attempts: int
    pool_size: int


@dataclass(frozen=True)
class JWTConfig:
    secret: Optional[str]
    expires_in: str
    issuer: str
    audience: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    format: str
    file: Optional[str]
    max_size: str
    max_files: int

    @property
    def max_bytes(self) -> int:
        return parse_size(self.max_size) or 0


class Config:
    """Immutable application settings built from the process environment.

    Build one with :meth:`load` at process start and hand it to whatever
    needs it; nothing mutates it afterwards.
    """

    def __init__(self, values: Mapping[str, Any]):
        self._values = MappingProxyType(dict(values))

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Read every declared key from ``environ`` (default ``os.environ``).

        Raises:
            ConfigError: the first value that fails its predicate. Nothing is
                returned in that case, so a partially loaded configuration is
                never observable.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        for key, default in DEFAULTS.items():
            raw = env.get(key)
            value = raw if raw is not None else default

            if _is_int(default) and isinstance(value, str):
                value = _coerce_number(value)

            rule = VALIDATION_RULES.get(key)
            if rule is not None and not rule(value):
                raise ConfigError(key, value)

            values[key] = value

        return cls(values)

    def get(self, key: str, fallback: Any = None) -> Any:
        """Return the stored value, or ``fallback`` for unknown keys"""
        if key in self._values:
            return self._values[key]
        return fallback

    def get_all(self) -> Dict[str, Any]:
        """Return a copy of every setting"""
        return dict(self._values)

    @property
    def environment(self) -> str:
        return self.get("APP_ENV")

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT.value

    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION.value

    def is_test(self) -> bool:
        return self.environment == Environment.TEST.value

    def validate_required(self, keys: Iterable[str] = ()) -> None:
        """Fail with every key whose value is unset or empty.

        Raises:
            MissingConfigError: lists all missing keys in one error.
        """
        missing = [key for key in keys if self.get(key) in (None, "")]
        if missing:
            raise MissingConfigError(missing)

    def get_server_config(self) -> ServerConfig:
        return ServerConfig(
            host=self.get("HOST"),
            port=self.get("PORT"),
            cors=CorsConfig(
                origin=self.get("CORS_ORIGIN"),
                credentials=self.get("CORS_CREDENTIALS", "true") == "true",
            ),
            rate_limit=RateLimitConfig(
                window_ms=self.get("RATE_LIMIT_WINDOW"),
                max=self.get("RATE_LIMIT_MAX"),
            ),
        )

    def get_database_config(self) -> DatabaseConfig:
        return DatabaseConfig(
            url=self.get("DATABASE_URL"),
            timeout=self.get("API_TIMEOUT"),
            retry_attempts=self.get("DB_RETRY_ATTEMPTS", 3),
            pool_size=self.get("DB_POOL_SIZE", 10),
        )

    def get_jwt_config(self) -> JWTConfig:
        return JWTConfig(
            secret=self.get("JWT_SECRET"),
            expires_in=self.get("JWT_EXPIRES_IN", "24h"),
            issuer=self.get("JWT_ISSUER", "app"),
            audience=self.get("JWT_AUDIENCE", "users"),
        )

    def get_logging_config(self) -> LoggingConfig:
        return LoggingConfig(
            level=self.get("LOG_LEVEL"),
            format=self.get("LOG_FORMAT", "json"),
            file=self.get("LOG_FILE"),
            max_size=self.get("LOG_MAX_SIZE", "10m"),
            max_files=self.get("LOG_MAX_FILES", 5),
        )

    def to_json(self) -> str:
        """Serialize settings with secrets masked"""
        safe = {
            key: REDACTED if is_sensitive_key(key) and value not in (None, "") else value
            for key, value in self._values.items()
        }
        return json.dumps(safe, indent=2)

    def __repr__(self) -> str:
        return f"Config(environment={self.environment!r}, port={self.get('PORT')!r})"


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration once at process start"""
    return Config.load(environ)
