# config.py
# Role: Runtime configuration for the study cards app.
#       Reads the process environment (and a local .env file) once at startup
#       and hands an immutable Settings object to the app factory.

"""
Configuration for the study cards app.

Everything the app needs from the environment lives on ``Settings``.
Route handlers receive it through ``app.deps.get_settings`` instead of
reading ``os.environ`` themselves, so tests can build the app with
fake credentials.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite database: <project_root>/database/cards.db
DB_DIR = os.path.join(BASE_DIR, "database")
DEFAULT_DATABASE_URL = f"sqlite:///{os.path.join(DB_DIR, 'cards.db')}"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL

    # Bearer key for the reporting API. None means the API is open.
    reporting_api_key: Optional[str] = None

    # Fixed identifiers echoed in every reporting response
    project_code: str = "VLHOLDINGS"
    project_name: str = "VL Holdings"
    currency: str = "THB"

    # S3-compatible object storage (DigitalOcean Spaces in production)
    s3_bucket: Optional[str] = None
    s3_region: Optional[str] = None
    s3_endpoint: Optional[str] = None
    s3_access_key_id: Optional[str] = None
    s3_secret_access_key: Optional[str] = None
    s3_root_folder: str = ""

    log_level: str = "INFO"

    @property
    def auth_enabled(self) -> bool:
        return bool(self.reporting_api_key)

    @property
    def storage_configured(self) -> bool:
        return bool(self.s3_bucket)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    # Empty strings in .env files count as "not set"
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def load_settings() -> Settings:
    """
    Build Settings from environment variables (after loading .env).
    """
    load_dotenv()

    return Settings(
        database_url=_env("DATABASE_URL", DEFAULT_DATABASE_URL),
        reporting_api_key=_env("PRESIDENT_API_KEY"),
        project_code=_env("PROJECT_CODE", "VLHOLDINGS"),
        project_name=_env("PROJECT_NAME", "VL Holdings"),
        currency=_env("REPORT_CURRENCY", "THB"),
        s3_bucket=_env("AWS_S3_BUCKET"),
        s3_region=_env("AWS_REGION"),
        s3_endpoint=_env("AWS_ENDPOINT"),
        s3_access_key_id=_env("AWS_ACCESS_KEY_ID"),
        s3_secret_access_key=_env("AWS_SECRET_ACCESS_KEY"),
        s3_root_folder=_env("AWS_S3_ROOT_FOLDER", ""),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
