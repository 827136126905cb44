import logging
from typing import Any, Dict, Optional

from infrastructure.identity_api import IdentityApi
from infrastructure.repositories.sqlite_session_store import SessionStore
from use_cases.results import AuthFailure, AuthResult, AuthSuccess, network_failure
from use_cases.session_models import GithubIdentity, LoginPayload, Session, UserProfile

log = logging.getLogger(__name__)


class AuthClient:
    """
    Identity-service operations for the application shell.

    Each call is a single exchange that returns an AuthResult. Calls that
    produce a session persist it into the store before reporting success.
    """

    def __init__(self, api: IdentityApi, store: SessionStore):
        self.api = api
        self.store = store

    def _establish_session(self, result: AuthResult[Dict[str, Any]]) -> AuthResult[LoginPayload]:
        if isinstance(result, AuthFailure):
            return result

        data = result.data
        token = data.get("access_token")
        if not token:
            log.error("Identity service reported success without an access token")
            return network_failure()

        raw_user = data.get("user")
        try:
            session = Session(
                access_token=str(token),
                refresh_token=data.get("refresh_token") or None,
                user=UserProfile.from_dict(raw_user) if isinstance(raw_user, dict) else None,
            )
        except (TypeError, ValueError) as e:
            log.error(f"Identity service returned an unreadable session: {e}")
            return network_failure()
        self.store.save(session)
        log.info(f"Session stored for user {session.user.id if session.user else '<unknown>'}")
        return AuthSuccess(
            data=LoginPayload(session=session, is_new_user=bool(data.get("is_new_user"))),
            message=result.message,
        )

    def _acknowledge(self, result: AuthResult[Dict[str, Any]]) -> AuthResult[None]:
        if isinstance(result, AuthFailure):
            return result
        return AuthSuccess(data=None, message=result.message)

    def login_with_password(self, identifier: str, password: str) -> AuthResult[LoginPayload]:
        result = self.api.call(
            "POST",
            "/auth/login",
            {"identifier": identifier, "password": password},
            fallback_message="Login failed",
        )
        return self._establish_session(result)

    def send_reset_code(self, identifier: str) -> AuthResult[None]:
        result = self.api.call(
            "POST",
            "/auth/forgot-password",
            {"identifier": identifier},
            fallback_message="Failed to send verification code",
        )
        return self._acknowledge(result)

    def reset_password(self, identifier: str, code: str, new_password: str) -> AuthResult[None]:
        result = self.api.call(
            "POST",
            "/auth/reset-password",
            {
                "identifier": identifier,
                "verification_code": code,
                "new_password": new_password,
            },
            fallback_message="Password reset failed",
        )
        return self._acknowledge(result)

    def send_email_verification_code(self, email: str) -> AuthResult[None]:
        result = self.api.call(
            "POST",
            "/auth/send-email-verification",
            {"email": email},
            fallback_message="Failed to send verification code",
        )
        return self._acknowledge(result)

    def verify_email_code(self, email: str, code: str) -> AuthResult[None]:
        result = self.api.call(
            "POST",
            "/auth/verify-email",
            {"email": email, "verification_code": code},
            fallback_message="Email verification failed",
        )
        return self._acknowledge(result)

    def register(
        self,
        username: str,
        password: str,
        nickname: str,
        email: Optional[str] = None,
        email_code: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> AuthResult[LoginPayload]:
        body: Dict[str, Any] = {
            "username": username,
            "password": password,
            "nickname": nickname,
        }
        # The code only travels with the email it verifies
        if email:
            body["email"] = email
            if email_code:
                body["email_verification_code"] = email_code
        if phone:
            body["phone"] = phone

        result = self.api.call("POST", "/auth/register", body, fallback_message="Registration failed")
        return self._establish_session(result)

    def change_password(self, user_id: str, old_password: str, new_password: str) -> AuthResult[None]:
        result = self.api.call(
            "PUT",
            "/auth/change-password",
            {
                "user_id": user_id,
                "old_password": old_password,
                "new_password": new_password,
            },
            token=self.store.get_access_token(),
            fallback_message="Password change failed",
        )
        return self._acknowledge(result)

    def oauth_exchange(self, identity: GithubIdentity) -> AuthResult[LoginPayload]:
        result = self.api.call(
            "POST",
            "/auth/github",
            identity.to_payload(),
            fallback_message="GitHub login failed",
        )
        return self._establish_session(result)

    def current_user(self) -> AuthResult[UserProfile]:
        """Profile of the stored session; answered locally, no network call."""
        session = self.store.load()
        if session is None:
            return AuthFailure(message="Not logged in")
        if session.user is None:
            return AuthFailure(message="User info not found")
        return AuthSuccess(data=session.user)

    def logout(self) -> None:
        # Local only: the service exposes no revocation endpoint.
        self.store.clear()
        log.info("Session cleared on logout")
