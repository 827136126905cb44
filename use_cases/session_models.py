"""Session DTOs shared across application layers."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class UserProfile:
    id: str
    username: str
    nickname: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: int = 0
    created_at: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "UserProfile":
        """Build a profile from the service's `user` object, tolerating gaps."""
        return cls(
            id=str(raw.get("id", "")),
            username=str(raw.get("username") or ""),
            nickname=str(raw.get("nickname") or ""),
            email=raw.get("email") or None,
            phone=raw.get("phone") or None,
            avatar_url=raw.get("avatar_url") or None,
            role=_as_int(raw.get("role")),
            created_at=str(raw.get("created_at") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Session:
    """A persisted login. Only `access_token` decides whether one exists."""

    access_token: str
    refresh_token: Optional[str] = None
    user: Optional[UserProfile] = None


@dataclass(frozen=True)
class LoginPayload:
    session: Session
    is_new_user: bool = False

    @property
    def display_name(self) -> Optional[str]:
        user = self.session.user
        return user.username if user and user.username else None


@dataclass(frozen=True)
class GithubIdentity:
    """Identity handed back by the GitHub OAuth provider."""

    github_id: str
    username: str
    nickname: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def display_nickname(user: Optional[UserProfile]) -> str:
    if user is None:
        return "Traveller"
    return user.nickname or user.username or "Traveller"
