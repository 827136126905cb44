"""Session gate consulted at application start (application layer)."""

from dataclasses import dataclass
from typing import Literal, Optional

from infrastructure.repositories.sqlite_session_store import SessionStore
from use_cases.session_models import UserProfile

AuthFlowStatus = Literal["CONTINUE", "STOP"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth gate orchestration."""

    status: AuthFlowStatus
    reason: str
    user: Optional[UserProfile] = None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user is not None else None


def ensure_authenticated_session(store: SessionStore) -> AuthFlowResult:
    """Decide between the authenticated shell and the auth screens.

    An access token alone is enough; a missing profile does not log the user out.
    """
    session = store.load()
    if session is None:
        return AuthFlowResult(status="STOP", reason="auth_required")
    return AuthFlowResult(status="CONTINUE", reason="authenticated", user=session.user)
