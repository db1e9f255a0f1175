"""Environment-driven configuration for the kudos UI, API client and database.

Settings come from the process environment. A ``.env`` file at the project
root fills in anything that was not exported.
"""

import os
from pathlib import Path

from psycopg.conninfo import make_conninfo

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_GIPHY_API_URL = "https://api.giphy.com/v1/gifs"

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"
TRUTHY = {"1", "true", "yes", "on"}


def load_env_file(path: Path = ENV_FILE) -> dict:
    """Export ``KEY=VALUE`` lines from ``path`` that are not already set.

    Blank lines, ``#`` comments and lines without ``=`` are ignored; values
    may be wrapped in single or double quotes. A missing file is not an error.

    :param path: Location of the ``.env`` file.
    :type path: pathlib.Path
    :returns: The variables this call exported.
    :rtype: dict
    """
    if not path.is_file():
        return {}
    exported = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#") or key in os.environ:
            continue
        exported[key] = value.strip().strip('"').strip("'")
    os.environ.update(exported)
    return exported


load_env_file()


def _conn_info(url_var: str, prefix: str, dbname: str) -> str:
    """Connection info from ``url_var`` or from ``<prefix>HOST`` style parts.

    Host and port fall back to the plain ``DB_*`` values so an admin role only
    needs its own credentials.
    """
    url = os.getenv(url_var)
    if url:
        return url
    return make_conninfo(
        host=os.getenv(f"{prefix}HOST") or os.getenv("DB_HOST", "localhost"),
        port=os.getenv(f"{prefix}PORT") or os.getenv("DB_PORT", "5432"),
        dbname=dbname,
        user=os.getenv(f"{prefix}USER") or None,
        password=os.getenv(f"{prefix}PASSWORD") or None,
    )


def get_api_base_url() -> str:
    return os.getenv("KUDOS_API_URL", DEFAULT_API_URL).rstrip("/")


def get_api_timeout() -> float | None:
    """Backend API request timeout in seconds, or ``None`` to wait forever.

    :raises ValueError: If ``KUDOS_API_TIMEOUT`` is set but not a positive number.
    """
    raw = os.getenv("KUDOS_API_TIMEOUT", "").strip()
    if not raw:
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError(f"KUDOS_API_TIMEOUT must be positive, got {raw!r}")
    return value


def get_giphy_api_key() -> str:
    return os.getenv("GIPHY_API_KEY", "")


def get_giphy_api_url() -> str:
    return os.getenv("GIPHY_API_URL", DEFAULT_GIPHY_API_URL).rstrip("/")


def get_db_name() -> str:
    return os.getenv("DB_NAME", "kudos_board")


def get_db_conn_info() -> str:
    """Connection info for the application role (``DATABASE_URL`` wins)."""
    return _conn_info("DATABASE_URL", "DB_", get_db_name())


def get_admin_conn_info() -> str:
    """Connection info for the role that creates the database.

    :returns: ``DATABASE_ADMIN_URL`` or a conninfo built from ``DB_ADMIN_*``.
    :rtype: str
    """
    return _conn_info("DATABASE_ADMIN_URL", "DB_ADMIN_", os.getenv("DB_ADMIN_NAME", "postgres"))


def is_debug_enabled() -> bool:
    return os.getenv("FLASK_DEBUG", "0").strip().lower() in TRUTHY
