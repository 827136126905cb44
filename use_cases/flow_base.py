"""Plumbing shared by the screen flows: the in-flight latch and error capture."""

import threading
from dataclasses import dataclass
from typing import Callable, TypeVar

from use_cases.results import BUSY_MESSAGE, AuthFailure, AuthResult
from use_cases.validation import ValidationError

T = TypeVar("T")


@dataclass
class FlowStatus:
    loading: bool = False
    error: str = ""
    message: str = ""


class ScreenFlow:
    """Base for per-screen state machines.

    At most one identity-service call runs per instance; `loading` is raised
    before the call and always lowered afterwards.
    """

    state: FlowStatus

    def __init__(self):
        self._latch = threading.Lock()
        self.completed = False

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def error(self) -> str:
        return self.state.error

    def clear_feedback(self) -> None:
        self.state.error = ""
        self.state.message = ""

    def _fail(self, message: str, kind="VALIDATION") -> AuthFailure:
        self.state.error = message
        return AuthFailure(message=message, kind=kind)

    def _run(self, action: Callable[[], AuthResult[T]]) -> AuthResult[T]:
        with self._latch:
            if self.state.loading:
                return AuthFailure(message=BUSY_MESSAGE, kind="BUSY")
            self.state.loading = True
            self.clear_feedback()
        try:
            result = action()
        except ValidationError as e:
            return self._fail(str(e))
        finally:
            self.state.loading = False

        if isinstance(result, AuthFailure):
            self.state.error = result.message
        else:
            self.state.message = result.message
        return result
