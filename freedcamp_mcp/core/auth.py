"""Freedcamp request signing.

Freedcamp accepts either a bare public API key, or a "secured" key where each
request also carries a Unix timestamp and ``hex(HMAC-SHA1(secret, key + timestamp))``.
The signature binds to the timestamp, so auth material is minted per batch and
never cached.
"""

import hashlib
import hmac
import math
import time
from dataclasses import dataclass


def generate_signature(identifier: str, secret: str, issued_at: int) -> str:
    """Return the lowercase hex HMAC-SHA1 of ``identifier + issued_at`` keyed by ``secret``."""
    message = f"{identifier}{issued_at}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha1).hexdigest()


@dataclass(frozen=True)
class AuthMaterial:
    """Authentication fields attached to one outbound batch.

    Attributes:
        identifier: Public API key
        issued_at: Unix seconds the signature was computed for (signed mode only)
        signature: Hex HMAC-SHA1 signature (signed mode only)
    """

    identifier: str
    issued_at: int | None = None
    signature: str | None = None

    @property
    def signed(self) -> bool:
        return self.signature is not None

    def as_params(self) -> dict[str, str]:
        """Render as the ``api_key``/``timestamp``/``hash`` fields Freedcamp expects."""
        params = {"api_key": self.identifier}
        if self.signed:
            params["timestamp"] = str(self.issued_at)
            params["hash"] = self.signature
        return params


def sign(identifier: str, secret: str | None = None, now: float | None = None) -> AuthMaterial:
    """Build auth material for one batch of upstream calls.

    Args:
        identifier: Public API key
        secret: API secret. Without it the key is sent unsigned.
        now: Unix time to sign for (defaults to the current time)

    Returns:
        AuthMaterial carrying the key, plus timestamp and signature when signed
    """
    if not secret:
        return AuthMaterial(identifier=identifier)

    issued_at = math.floor(time.time() if now is None else now)
    return AuthMaterial(
        identifier=identifier,
        issued_at=issued_at,
        signature=generate_signature(identifier, secret, issued_at),
    )


@dataclass(frozen=True)
class Credential:
    """The single configured Freedcamp credential set."""

    identifier: str
    secret: str | None = None

    def sign(self, now: float | None = None) -> AuthMaterial:
        return sign(self.identifier, self.secret, now)

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks
        masked = "***" if self.secret else None
        return f"Credential(identifier={self.identifier!r}, secret={masked!r})"
