"""Tagged outcome of every identity-service operation."""

from dataclasses import dataclass
from typing import Generic, Literal, Optional, TypeVar, Union

T = TypeVar("T")

FailureKind = Literal["VALIDATION", "BUSINESS", "NETWORK", "NOT_AVAILABLE", "BUSY"]

NETWORK_ERROR_MESSAGE = "Network error, please try again later"
BUSY_MESSAGE = "A request is already in progress"


@dataclass(frozen=True)
class AuthSuccess(Generic[T]):
    data: T
    message: str = ""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class AuthFailure:
    message: str
    kind: FailureKind = "BUSINESS"
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False


AuthResult = Union[AuthSuccess[T], AuthFailure]


def network_failure() -> AuthFailure:
    return AuthFailure(message=NETWORK_ERROR_MESSAGE, kind="NETWORK")
