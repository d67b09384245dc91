"""Shared-secret authorization for MCP methods.

Which methods need a credential is declared once in METHOD_AUTH_POLICY and
enforced by the dispatcher for every transport. Handshake and discovery stay
open; tool execution is gated.
"""

import hmac
import logging

logger = logging.getLogger(__name__)

METHOD_AUTH_POLICY: dict[str, bool] = {
    "initialize": False,
    "notifications/initialized": False,
    "ping": False,
    "tools/list": False,
    "tools/call": True,
}


class AuthGuard:
    """Compare a presented credential with the configured shared secret."""

    def __init__(self, secret: str, policy: dict[str, bool] | None = None):
        self.secret = secret
        self.policy = METHOD_AUTH_POLICY if policy is None else policy
        if not secret:
            logger.warning("MCP_API_KEY is not set: every tools/call will be rejected")

    def requires_auth(self, method: str) -> bool:
        # Unlisted methods are not gated: they end up as "method not found"
        return self.policy.get(method, False)

    def is_authorized(self, credential: str | None) -> bool:
        if not self.secret or not credential:
            return False
        return hmac.compare_digest(credential.encode(), self.secret.encode())


def extract_credential(
    authorization: str | None = None,
    x_api_key: str | None = None,
    api_key_param: str | None = None,
) -> str | None:
    """
    Pick the credential from the places a client may send it.

    Precedence: X-API-Key header, then Authorization (the "Bearer " prefix is
    stripped), then the api_key query parameter.
    """
    if x_api_key:
        return x_api_key
    if authorization:
        return authorization[7:] if authorization.startswith("Bearer ") else authorization
    if api_key_param:
        return api_key_param
    return None
