"""Change-password form shown inside the authenticated shell."""

from dataclasses import dataclass

from auth import AuthClient
from use_cases.flow_base import FlowStatus, ScreenFlow
from use_cases.results import AuthFailure, AuthResult, AuthSuccess
from use_cases.validation import validate_password_change

EDITABLE_FIELDS = {"old_password", "new_password", "confirm_password"}
PASSWORD_CHANGED = "Password changed successfully"
USER_UNAVAILABLE = "User info unavailable, please log in again"


@dataclass
class ChangePasswordState(FlowStatus):
    old_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


class ChangePasswordFlow(ScreenFlow):
    def __init__(self, client: AuthClient):
        super().__init__()
        self.client = client
        self.state: ChangePasswordState = ChangePasswordState()

    def update(self, **fields) -> None:
        for name, value in fields.items():
            if name not in EDITABLE_FIELDS:
                raise AttributeError(f"Unknown password field: {name}")
            setattr(self.state, name, value)
        self.clear_feedback()

    def submit(self) -> AuthResult[None]:
        state = self.state

        def action():
            validate_password_change(state.old_password, state.new_password, state.confirm_password)
            user = self.client.store.get_user()
            if user is None or not user.id:
                return AuthFailure(message=USER_UNAVAILABLE)
            return self.client.change_password(user.id, state.old_password, state.new_password)

        result = self._run(action)
        if isinstance(result, AuthSuccess):
            state.message = PASSWORD_CHANGED
            state.old_password = ""
            state.new_password = ""
            state.confirm_password = ""
        return result
