from __future__ import annotations

"""
MovieReview · Token verification (identity provider adapter)
============================================================
Turns an opaque bearer credential into an `Identity(subject_id, email)`.
The service never issues or stores credentials; it only verifies them.

Implementations
---------------
- `JWKSTokenVerifier`: RS256 ID tokens checked against the identity provider's
  published JWKS (fetched with httpx, cached in-process). With
  `FIREBASE_PROJECT_ID` set, issuer/audience follow the Firebase ID-token
  conventions (`https://securetoken.google.com/<project>` / `<project>`).
- `SecretTokenVerifier`: HS* tokens signed with a shared secret (dev/tests).

Errors
------
- `TokenVerificationError`: the credential itself is bad (expired, bad
  signature, wrong issuer/audience, no subject). Maps to 401.
- `KeyFetchError`: the identity provider could not be reached. This is a
  collaborator failure and maps to 500, not 401.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from jose import ExpiredSignatureError, JWTError, jwt

from moviereview.core.cache import TTLMap
from moviereview.core.config import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "Identity",
    "TokenVerifier",
    "TokenVerificationError",
    "KeyFetchError",
    "SecretTokenVerifier",
    "JWKSTokenVerifier",
    "build_token_verifier",
]


@dataclass(frozen=True)
class Identity:
    """Verified caller identity."""

    subject_id: str
    email: Optional[str] = None


class TokenVerificationError(Exception):
    """The presented credential is not acceptable."""


class KeyFetchError(Exception):
    """Verification keys could not be retrieved from the identity provider."""


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Identity: ...

    async def close(self) -> None: ...


# ─────────────────────────────────────────────────────────────
# 🔧 Shared decoding
# ─────────────────────────────────────────────────────────────
def _decode(
    token: str,
    key: Any,
    *,
    algorithms: Sequence[str],
    issuer: Optional[str],
    audience: Optional[str],
) -> Dict[str, Any]:
    """Verify signature and standard claims; enforce issuer/audience when configured."""
    options: Dict[str, Any] = {"verify_aud": bool(audience)}
    try:
        return jwt.decode(
            token,
            key,
            algorithms=list(algorithms),
            options=options,
            audience=audience if audience else None,
            issuer=issuer if issuer else None,
        )
    except ExpiredSignatureError as exc:
        raise TokenVerificationError("Token has expired") from exc
    except JWTError as exc:
        raise TokenVerificationError(f"Invalid token: {exc}") from exc


def _identity_from_claims(claims: Dict[str, Any]) -> Identity:
    subject = claims.get("sub") or claims.get("user_id")
    if not subject or not isinstance(subject, str):
        raise TokenVerificationError("Token missing subject")
    email = claims.get("email")
    return Identity(subject_id=subject, email=email if isinstance(email, str) else None)


# ─────────────────────────────────────────────────────────────
# 🔑 Shared-secret verifier
# ─────────────────────────────────────────────────────────────
class SecretTokenVerifier:
    """Verify HS*-signed tokens with a shared secret."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ) -> None:
        if not secret:
            raise ValueError("SecretTokenVerifier requires a non-empty secret")
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience

    async def verify(self, token: str) -> Identity:
        claims = _decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            issuer=self._issuer,
            audience=self._audience,
        )
        return _identity_from_claims(claims)

    async def close(self) -> None:
        return None


# ─────────────────────────────────────────────────────────────
# 🌐 JWKS verifier
# ─────────────────────────────────────────────────────────────
class JWKSTokenVerifier:
    """Verify RS256 tokens against a remote JWKS document.

    Keys are cached for `cache_ttl` seconds. An unknown `kid` forces one
    refetch so rotated keys are picked up before the cache expires.
    """

    _CACHE_KEY = "jwks"

    def __init__(
        self,
        jwks_url: str,
        *,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        cache_ttl: float = 3600,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
        algorithms: Sequence[str] = ("RS256",),
    ) -> None:
        self._jwks_url = jwks_url
        self._issuer = issuer
        self._audience = audience
        self._cache_ttl = cache_ttl
        self._algorithms = tuple(algorithms)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._cache = TTLMap(maxsize=4)

    async def _fetch_keys(self) -> List[Dict[str, Any]]:
        try:
            resp = await self._client.get(self._jwks_url)
            resp.raise_for_status()
            keys = resp.json().get("keys")
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            raise KeyFetchError(f"Failed to load JWKS from {self._jwks_url}") from exc
        if not isinstance(keys, list):
            raise KeyFetchError("JWKS document has no 'keys' list")
        logger.debug("Loaded %d verification keys from %s", len(keys), self._jwks_url)
        self._cache.set(self._CACHE_KEY, keys, self._cache_ttl)
        return keys

    async def _keys(self, *, refresh: bool = False) -> List[Dict[str, Any]]:
        if not refresh:
            cached = self._cache.get(self._CACHE_KEY)
            if cached is not None:
                return cached
        return await self._fetch_keys()

    @staticmethod
    def _find_key(keys: List[Dict[str, Any]], kid: str) -> Optional[Dict[str, Any]]:
        for k in keys:
            if k.get("kid") == kid:
                return k
        return None

    async def verify(self, token: str) -> Identity:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise TokenVerificationError("Malformed token header") from exc

        kid, alg = header.get("kid"), header.get("alg")
        if not kid:
            raise TokenVerificationError("Token header has no 'kid'")
        if alg not in self._algorithms:
            raise TokenVerificationError(f"Unsupported token algorithm: {alg}")

        key = self._find_key(await self._keys(), kid)
        if key is None:
            key = self._find_key(await self._keys(refresh=True), kid)
        if key is None:
            raise TokenVerificationError("No verification key matches token 'kid'")

        claims = _decode(
            token,
            key,
            algorithms=[alg],
            issuer=self._issuer,
            audience=self._audience,
        )
        return _identity_from_claims(claims)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


# ─────────────────────────────────────────────────────────────
# 🏭 Factory
# ─────────────────────────────────────────────────────────────
def build_token_verifier(settings: Settings) -> TokenVerifier:
    """Construct the verifier selected by `AUTH_MODE`."""
    if settings.AUTH_MODE == "secret":
        if settings.JWT_SECRET_KEY is None:
            raise ValueError("AUTH_MODE=secret requires JWT_SECRET_KEY")
        return SecretTokenVerifier(
            settings.JWT_SECRET_KEY.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            issuer=settings.token_issuer,
            audience=settings.token_audience,
        )
    if not settings.token_issuer or not settings.token_audience:
        logger.warning("JWKS verification without issuer/audience; set FIREBASE_PROJECT_ID or TOKEN_ISSUER/TOKEN_AUDIENCE")
    return JWKSTokenVerifier(
        settings.JWKS_URL,
        issuer=settings.token_issuer,
        audience=settings.token_audience,
        cache_ttl=settings.JWKS_CACHE_TTL_SECONDS,
        timeout=settings.JWKS_HTTP_TIMEOUT_SECONDS,
    )
