"""Application configuration, read from Streamlit secrets or the environment."""

import os
from dataclasses import dataclass

import streamlit as st

DEFAULT_API_BASE_URL = "http://localhost:8000/api"
DEFAULT_SESSION_DB = "session.db"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_RESEND_COOLDOWN_SECONDS = 60


def get_secret(key):
    try:
        return st.secrets.get(key)
    except FileNotFoundError:
        return None


def _lookup(key):
    return get_secret(key) or os.getenv(key)


def _positive_number(raw, default, cast=float):
    if raw is None:
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class AppConfig:
    api_base_url: str = DEFAULT_API_BASE_URL
    session_db_path: str = DEFAULT_SESSION_DB
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    resend_cooldown_seconds: int = DEFAULT_RESEND_COOLDOWN_SECONDS


def load_config() -> AppConfig:
    """Build the config once at startup; callers pass it around explicitly."""
    base_url = (_lookup("API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/")
    return AppConfig(
        api_base_url=base_url,
        session_db_path=_lookup("SESSION_DB") or DEFAULT_SESSION_DB,
        request_timeout=_positive_number(_lookup("REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT),
        resend_cooldown_seconds=_positive_number(
            _lookup("RESEND_COOLDOWN_SECONDS"), DEFAULT_RESEND_COOLDOWN_SECONDS, cast=int
        ),
    )
