from __future__ import annotations

from typing import Any, Protocol


class TokenProvider(Protocol):
    """Port for signing and verifying access tokens.

    Implementations own the cryptography and the registered-claim checks
    (signature, ``iss``, ``aud``, ``exp``). Claim *content* is decided by the
    caller.
    """

    def encode(self, claims: dict[str, Any]) -> str:
        """Sign ``claims`` and return the compact token.

        :raises ConfigurationError: If no signing key is configured.
        """
        ...

    def decode(self, token: str, *, verify_exp: bool = True) -> dict[str, Any]:
        """Verify ``token`` and return its claims.

        ``verify_exp=False`` skips only the expiry check; signature, issuer
        and audience are always verified.

        :raises ValidationError: If any check fails or the token is malformed.
        :raises ConfigurationError: If no signing key is configured.
        """
        ...
