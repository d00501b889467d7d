"""Service configuration from the environment.

An optional ``.env`` file is merged first; the process environment
always wins over it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from catalog.domain.exceptions import ConfigError

DEFAULT_PORT = 50051
DEFAULT_DB_DRIVER = "mysql+pymysql"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_WORKERS = 10

REQUIRED_KEYS = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")


@dataclass(frozen=True)
class Settings:
    db_user: str
    db_password: str
    db_host: str
    db_port: int
    db_name: str
    port: int = DEFAULT_PORT
    db_driver: str = DEFAULT_DB_DRIVER
    log_level: str = DEFAULT_LOG_LEVEL
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def database_url(self) -> URL:
        query = {"charset": "utf8mb4"} if self.db_driver.startswith("mysql") else {}
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query=query,
        )

    @staticmethod
    def from_env(env: Mapping[str, str]) -> Settings:
        missing = [key for key in REQUIRED_KEYS if not env.get(key)]
        if missing:
            raise ConfigError(f"missing required environment variables: {', '.join(missing)}")

        return Settings(
            db_user=env["DB_USER"],
            db_password=env["DB_PASSWORD"],
            db_host=env["DB_HOST"],
            db_port=_parse_port("DB_PORT", env["DB_PORT"]),
            db_name=env["DB_NAME"],
            port=_parse_port("PORT", env.get("PORT", str(DEFAULT_PORT))),
            db_driver=env.get("DB_DRIVER") or DEFAULT_DB_DRIVER,
            log_level=(env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
            max_workers=_parse_positive_int(
                "GRPC_MAX_WORKERS", env.get("GRPC_MAX_WORKERS", str(DEFAULT_MAX_WORKERS))
            ),
        )


def _parse_positive_int(key: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"invalid {key} value {raw!r}: not an integer") from exc
    if value <= 0:
        raise ConfigError(f"invalid {key} value {raw!r}: must be positive")
    return value


def _parse_port(key: str, raw: str) -> int:
    value = _parse_positive_int(key, raw)
    if value > 65535:
        raise ConfigError(f"invalid {key} value {raw!r}: out of range")
    return value


def load_settings(env_file: Path | None = None) -> Settings:
    """Merge ``.env`` (if present) into the environment and read Settings."""
    path = env_file or Path.cwd() / ".env"
    if path.is_file():
        load_dotenv(path, override=False)
    return Settings.from_env(os.environ)
