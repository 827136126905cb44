"""
Centralized Observability Infrastructure.
Provides structured logging setup and Sentry SDK initialization
governed entirely by environment variables.
"""

import os
import logging
import re
from typing import Any, Dict

import sentry_sdk

log = logging.getLogger(__name__)

# Field names whose values never leave the process
SENSITIVE_KEYS = {
    "password",
    "old_password",
    "new_password",
    "confirm_password",
    "verification_code",
    "email_verification_code",
    "access_token",
    "refresh_token",
    "authorization",
}

REDACTED = "[REDACTED]"

BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.=]+")
TOKEN_PATTERN = re.compile(r"[a-zA-Z0-9_\-]{30,}")  # Catch tokens/dsn looking strings


def _mask_string(val: str) -> str:
    val = BEARER_PATTERN.sub(lambda m: m.group(1) + REDACTED, val)
    return TOKEN_PATTERN.sub(REDACTED, val)


def scrub(obj: Any) -> Any:
    """Recursively redact credential fields and token-looking strings."""
    if isinstance(obj, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else scrub(v)
            for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [scrub(i) for i in obj]
    if isinstance(obj, str):
        return _mask_string(obj)
    return obj


def _scrub_sensitive_data(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """
    Sentry before_send hook. Scrubs tokens, passwords and verification
    codes from stack frame locals and request payloads.
    """
    for exc in event.get("exception", {}).get("values", []):
        for frame in exc.get("stacktrace", {}).get("frames", []):
            if "vars" in frame:
                frame["vars"] = scrub(frame["vars"])

    request = event.get("request")
    if isinstance(request, dict):
        event["request"] = scrub(request)

    return event


def setup_observability() -> None:
    """
    Initializes global system logging and Sentry (if DSN is present).
    Should be called once at application startup.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    # [2026-02-27 15:00:00] INFO - module.name: The message
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        sentry_env = os.getenv("SENTRY_ENV", "development")
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=sentry_env,
            traces_sample_rate=1.0,
            send_default_pii=False,
            before_send=_scrub_sensitive_data
        )
        log.info(f"Sentry SDK initialized (env: {sentry_env})")
    else:
        log.info("SENTRY_DSN not provided. Running without Sentry.")

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
