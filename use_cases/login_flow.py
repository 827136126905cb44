"""Login screen state machine: password login, code login and password reset."""

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from auth import AuthClient
from use_cases.flow_base import FlowStatus, ScreenFlow
from use_cases.results import AuthFailure, AuthResult, AuthSuccess
from use_cases.session_models import LoginPayload
from use_cases.validation import require, validate_password

log = logging.getLogger(__name__)

LoginMode = Literal["PASSWORD", "CODE", "RESET"]

TAB_MODES = ("PASSWORD", "CODE")
CODE_LOGIN_UNAVAILABLE = "Code login is not available yet, please use password login"
CODE_ALREADY_SENT = "Verification code already sent"
RESET_DONE = "Password reset, please log in with the new password"

EDITABLE_FIELDS = {"identifier", "password", "verification_code", "new_password"}


@dataclass
class LoginFlowState(FlowStatus):
    mode: LoginMode = "PASSWORD"
    identifier: str = ""
    password: str = ""
    verification_code: str = ""
    new_password: str = ""
    code_sent: bool = False
    display_name: Optional[str] = None


class LoginFlow(ScreenFlow):
    def __init__(self, client: AuthClient):
        super().__init__()
        self.client = client
        self.state: LoginFlowState = LoginFlowState()

    @property
    def can_send_reset_code(self) -> bool:
        return not self.state.loading and not self.state.code_sent

    def update(self, **fields) -> None:
        for name, value in fields.items():
            if name not in EDITABLE_FIELDS:
                raise AttributeError(f"Unknown login field: {name}")
            setattr(self.state, name, value)
        self.state.error = ""

    def select_mode(self, mode: LoginMode) -> None:
        """Tab selection between password and code login."""
        if mode not in TAB_MODES:
            raise ValueError(f"Not a login tab: {mode}")
        self.state.mode = mode
        self.clear_feedback()

    def forgot_password(self) -> None:
        self.state.mode = "RESET"
        self.clear_feedback()

    def cancel_reset(self) -> None:
        self.state.mode = "PASSWORD"
        self.clear_feedback()

    def submit(self) -> AuthResult:
        if self.state.mode == "CODE":
            return self.submit_code_login()
        if self.state.mode == "RESET":
            return self.submit_reset()
        return self.submit_password_login()

    def submit_password_login(self) -> AuthResult[LoginPayload]:
        state = self.state

        def action():
            require(state.identifier, "Please enter your username, phone or email")
            require(state.password, "Please enter your password")
            return self.client.login_with_password(state.identifier, state.password)

        result = self._run(action)
        if isinstance(result, AuthSuccess):
            state.display_name = result.data.display_name or state.identifier
            self.completed = True
            log.info("Password login succeeded")
        return result

    def submit_code_login(self) -> AuthFailure:
        # Deliberately unavailable until the service supports one-time-code login.
        return self._fail(CODE_LOGIN_UNAVAILABLE, kind="NOT_AVAILABLE")

    def send_reset_code(self) -> AuthResult[None]:
        state = self.state
        if state.code_sent:
            return AuthFailure(message=CODE_ALREADY_SENT, kind="BUSY")

        def action():
            require(state.identifier, "Please enter your username, phone or email")
            return self.client.send_reset_code(state.identifier)

        result = self._run(action)
        if isinstance(result, AuthSuccess):
            state.code_sent = True
            state.message = result.message or "Verification code sent"
        return result

    def submit_reset(self) -> AuthResult[None]:
        state = self.state

        def action():
            require(state.identifier, "Please enter your username, phone or email")
            require(state.verification_code, "Please enter the verification code")
            validate_password(state.new_password, label="New password")
            return self.client.reset_password(state.identifier, state.verification_code, state.new_password)

        result = self._run(action)
        if isinstance(result, AuthSuccess):
            state.mode = "PASSWORD"
            state.verification_code = ""
            state.new_password = ""
            state.code_sent = False
            state.message = RESET_DONE
        return result
