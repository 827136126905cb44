"""Startup orchestration: wires config, session store and identity client."""

from dataclasses import dataclass
from typing import Literal, Tuple

import auth
from infrastructure.config import AppConfig
from infrastructure.identity_api import IdentityApi
from infrastructure.repositories.sqlite_session_store import SQLiteSessionStore

StartupStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AppServices:
    """Process-wide collaborators. Sessions are opened per browser."""

    config: AppConfig
    store: SQLiteSessionStore
    api: IdentityApi

    def client_for(self, browser_id: str) -> auth.AuthClient:
        return auth.AuthClient(self.api, self.store.for_browser(browser_id))


@dataclass(frozen=True)
class StartupResult:
    """Result contract for startup/bootstrap orchestration."""

    status: StartupStatus
    planned_steps: Tuple[str, ...]
    services: AppServices


def run_startup(config: AppConfig) -> StartupResult:
    """Build the process-wide collaborators once."""
    executed_steps = []

    store = SQLiteSessionStore(config.session_db_path)
    store.init_db()
    executed_steps.append("init_session_store")

    api = IdentityApi(config.api_base_url, timeout=config.request_timeout)
    executed_steps.append("build_identity_api")

    return StartupResult(
        status="CONTINUE",
        planned_steps=tuple(executed_steps),
        services=AppServices(config=config, store=store, api=api),
    )
