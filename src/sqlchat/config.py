"""
Config & connections for the SQL chat assistant.

Environment variables expected (from .env):
  OPENAI_API_KEY, OPENAI_MODEL (optional, defaults to gpt-4)
  DATABASE_URL
    or
  user, password, host, port, dbname, sslmode (optional)

Notes:
- Validation happens up front so a bad .env fails before any model or DB call.
- Use a read-only database role; statements proposed by the model run as-is.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from dotenv import load_dotenv
import psycopg2

DEFAULT_MODEL = "gpt-4"
DEFAULT_PORT = 5432


class ConfigError(ValueError):
    """Raised when required settings are missing or malformed."""


@dataclass(frozen=True)
class DatabaseSettings:
    host: str = ""
    port: int = DEFAULT_PORT
    dbname: str = ""
    user: str = ""
    password: str = ""
    sslmode: Optional[str] = None
    # When set, wins over the discrete fields
    url: Optional[str] = None


@dataclass(frozen=True)
class Settings:
    api_key: str
    model: str
    database: DatabaseSettings


def _parse_port(raw: str, problems: List[str]) -> int:
    try:
        port = int(raw)
    except ValueError:
        problems.append(f"port must be an integer, got {raw!r}")
        return DEFAULT_PORT
    if not 0 < port < 65536:
        problems.append(f"port out of range: {port}")
    return port


def load_settings(env: Optional[Mapping[str, str]] = None, model: Optional[str] = None) -> Settings:
    """
    Build validated Settings from the environment.

    `env` defaults to os.environ after loading .env; tests pass a plain dict.
    `model` overrides OPENAI_MODEL (used by the --model CLI flag).
    Raises ConfigError listing every problem found.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    problems: List[str] = []

    api_key = env.get("OPENAI_API_KEY", "").strip()
    if not api_key:
        problems.append("OPENAI_API_KEY is not set")

    model = (model or env.get("OPENAI_MODEL", "") or DEFAULT_MODEL).strip()
    if not model:
        problems.append("model identifier is empty")

    sslmode = env.get("sslmode") or None
    database_url = env.get("DATABASE_URL", "").strip()
    if database_url:
        database = DatabaseSettings(url=database_url, sslmode=sslmode)
    else:
        missing = [name for name in ("host", "dbname", "user", "password") if not env.get(name)]
        if missing:
            problems.append("missing database settings: " + ", ".join(missing))
        port = _parse_port(env.get("port") or str(DEFAULT_PORT), problems)
        database = DatabaseSettings(
            host=env.get("host", ""),
            port=port,
            dbname=env.get("dbname", ""),
            user=env.get("user", ""),
            password=env.get("password", ""),
            sslmode=sslmode,
        )

    if problems:
        raise ConfigError("; ".join(problems))
    return Settings(api_key=api_key, model=model, database=database)


def get_db_conn(settings: Settings):
    """
    Returns a psycopg2 connection for the configured database.
    Prefers DATABASE_URL when provided.
    """
    db = settings.database
    extra = {"sslmode": db.sslmode} if db.sslmode else {}
    if db.url:
        return psycopg2.connect(db.url, **extra)
    return psycopg2.connect(
        user=db.user,
        password=db.password,
        host=db.host,
        port=db.port,
        dbname=db.dbname,
        **extra,
    )
