"""Application layer contracts for orchestrating high-level flows.

Screen flows and startup wiring depend on `auth` and are imported from their
own modules (`use_cases.login_flow`, `use_cases.bootstrap`, ...).
"""

from .auth_flow import AuthFlowResult, AuthFlowStatus, ensure_authenticated_session
from .cooldown import ResendCooldown
from .results import AuthFailure, AuthResult, AuthSuccess, FailureKind
from .session_models import GithubIdentity, LoginPayload, Session, UserProfile
from .validation import ValidationError

__all__ = [
    "AuthFailure",
    "AuthFlowResult",
    "AuthFlowStatus",
    "AuthResult",
    "AuthSuccess",
    "FailureKind",
    "GithubIdentity",
    "LoginPayload",
    "ResendCooldown",
    "Session",
    "UserProfile",
    "ValidationError",
    "ensure_authenticated_session",
]
