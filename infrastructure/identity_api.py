import logging
from typing import Any, Dict, Optional

import requests

from use_cases.results import AuthFailure, AuthResult, AuthSuccess, network_failure

log = logging.getLogger(__name__)


class IdentityApi:
    """
    Single JSON-over-HTTP exchange with the identity service.
    Every call resolves to an AuthResult; transport faults never escape.
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def call(
        self,
        method: str,
        path: str,
        payload: Dict[str, Any],
        *,
        token: Optional[str] = None,
        fallback_message: str = "Request failed",
    ) -> AuthResult[Dict[str, Any]]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = requests.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.error(f"Network error on {method} {path}: {e}")
            return network_failure()

        try:
            body = resp.json()
        except ValueError:
            log.error(f"Malformed response on {method} {path}: HTTP {resp.status_code}")
            return network_failure()
        if not isinstance(body, dict):
            log.error(f"Unexpected response shape on {method} {path}: {type(body).__name__}")
            return network_failure()

        message = body.get("message") or ""
        if resp.ok and body.get("success") is True:
            data = body.get("data")
            return AuthSuccess(data=data if isinstance(data, dict) else {}, message=message)

        log.info(f"{method} {path} rejected: HTTP {resp.status_code} {body.get('error_code') or ''}".rstrip())
        return AuthFailure(
            message=message or fallback_message,
            kind="BUSINESS",
            error_code=body.get("error_code"),
        )
