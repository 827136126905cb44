"""Registration screen: one form, email verification and a resend cooldown."""

import logging
from dataclasses import dataclass
from typing import Optional

from auth import AuthClient
from use_cases.cooldown import ResendCooldown
from use_cases.flow_base import FlowStatus, ScreenFlow
from use_cases.results import AuthFailure, AuthResult, AuthSuccess
from use_cases.session_models import LoginPayload
from use_cases.validation import require, validate_email, validate_registration

log = logging.getLogger(__name__)

EDITABLE_FIELDS = {"username", "password", "nickname", "email", "phone", "email_code"}


@dataclass
class RegisterFlowState(FlowStatus):
    username: str = ""
    password: str = ""
    nickname: str = ""
    email: str = ""
    phone: str = ""
    email_code: str = ""
    email_verified: bool = False
    display_name: Optional[str] = None


class RegisterFlow(ScreenFlow):
    def __init__(self, client: AuthClient, cooldown: Optional[ResendCooldown] = None):
        super().__init__()
        self.client = client
        self.state: RegisterFlowState = RegisterFlowState()
        self.cooldown = cooldown or ResendCooldown()

    @property
    def can_send_code(self) -> bool:
        return not self.state.loading and not self.cooldown.active

    @property
    def countdown(self) -> int:
        return self.cooldown.remaining

    def update(self, **fields) -> None:
        for name, value in fields.items():
            if name not in EDITABLE_FIELDS:
                raise AttributeError(f"Unknown registration field: {name}")
            setattr(self.state, name, value)
            if name in ("email", "email_code"):
                self.state.email_verified = False
        self.state.error = ""

    def send_email_code(self) -> AuthResult[None]:
        state = self.state
        if self.cooldown.active:
            return AuthFailure(
                message=f"Please wait {self.cooldown.remaining}s before requesting another code",
                kind="BUSY",
            )

        def action():
            require(state.email, "Please enter your email address first")
            validate_email(state.email)
            return self.client.send_email_verification_code(state.email)

        result = self._run(action)
        if isinstance(result, AuthSuccess):
            self.cooldown.start()
            state.message = result.message or "Verification code sent, please check your inbox"
        return result

    def verify_email_code(self) -> AuthResult[None]:
        """Optional pre-check of the emailed code before submitting."""
        state = self.state

        def action():
            validate_email(state.email)
            require(state.email_code, "Please enter the email verification code")
            return self.client.verify_email_code(state.email, state.email_code)

        result = self._run(action)
        state.email_verified = isinstance(result, AuthSuccess)
        return result

    def submit(self) -> AuthResult[LoginPayload]:
        state = self.state

        def action():
            validate_registration(
                state.username,
                state.password,
                state.nickname,
                state.email,
                state.email_code,
                phone=state.phone,
            )
            return self.client.register(
                state.username,
                state.password,
                state.nickname,
                email=state.email,
                email_code=state.email_code,
                phone=state.phone.strip() or None,
            )

        result = self._run(action)
        if isinstance(result, AuthSuccess):
            state.display_name = result.data.display_name or state.username
            self.completed = True
            self.teardown()
            log.info("Registration succeeded")
        return result

    def teardown(self) -> None:
        """Release the cooldown timer when the screen goes away."""
        self.cooldown.cancel()
