# artify/core/config.py
from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError


class Settings(BaseModel):
    # app
    app_env: str = Field(default="dev")  # dev / prod / test
    log_level: str = Field(default="INFO")

    # database
    database_url: str = Field(default="sqlite:///./artify.db")
    sql_echo: bool = Field(default=False)

    # session cookie
    session_secret: str
    session_cookie: str = Field(default="__session")
    session_https_only: bool = Field(default=False)
    session_default_days: int = Field(default=7, gt=0)
    session_remember_days: int = Field(default=30, gt=0)

    # object storage
    aws_region: str = Field(default="us-west-2")
    aws_bucket: str = Field(default="s3artifybucket")
    s3_endpoint_url: Optional[str] = None
    upload_url_expires: int = Field(default=900, gt=0)  # seconds


def _str_to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _load_settings() -> Settings:
    load_dotenv()

    app_env = os.getenv("APP_ENV", "dev")
    session_secret = os.getenv("SESSION_SECRET")
    if not session_secret:
        if app_env == "prod":
            raise RuntimeError("Missing SESSION_SECRET in environment/.env")
        session_secret = "dev-session-secret-change-me"

    data = {
        "app_env": app_env,
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "database_url": os.getenv("DATABASE_URL", "sqlite:///./artify.db"),
        "sql_echo": _str_to_bool(os.getenv("SQL_ECHO"), False),
        "session_secret": session_secret,
        "session_cookie": os.getenv("SESSION_COOKIE", "__session"),
        "session_https_only": _str_to_bool(os.getenv("SESSION_HTTPS_ONLY"), app_env == "prod"),
        "session_default_days": os.getenv("SESSION_DEFAULT_DAYS", "7"),
        "session_remember_days": os.getenv("SESSION_REMEMBER_DAYS", "30"),
        "aws_region": os.getenv("AWS_REGION", "us-west-2"),
        "aws_bucket": os.getenv("AWS_BUCKET", "s3artifybucket"),
        "s3_endpoint_url": os.getenv("S3_ENDPOINT_URL"),
        "upload_url_expires": os.getenv("UPLOAD_URL_EXPIRES", "900"),
    }

    try:
        return Settings(**data)
    except ValidationError as e:
        raise RuntimeError(f"Invalid settings: {e}") from e


settings = _load_settings()
