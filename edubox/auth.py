"""
Identity resolution for every route. The caller is whoever the auth provider's session token
says it is; userId fields in request bodies are never trusted for persistence.
"""
import hmac
import logging

from jose import JWTError, jwt
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from edubox.config import get_settings
from edubox.schemas.identity import Identity, TokenPayload

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ANONYMOUS = Identity()


def decode_token(token: str) -> TokenPayload | None:
    settings = get_settings()
    key = settings.auth_jwt_public_key or settings.auth_jwt_secret
    options = {"verify_aud": False}
    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=[settings.auth_jwt_algorithm],
            issuer=settings.auth_jwt_issuer or None,
            options=options,
        )
        return TokenPayload(
            sub=payload["sub"],
            exp=payload["exp"],
            email=payload.get("email"),
            name=payload.get("name") or payload.get("full_name"),
            phone=payload.get("phone") or payload.get("phone_number"),
        )
    except (JWTError, KeyError) as e:
        logger.debug("Rejected session token: %s", e)
        return None


def resolve_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    """Optional auth: anonymous Identity when there is no token or it does not verify."""
    if not credentials:
        return ANONYMOUS
    payload = decode_token(credentials.credentials)
    if not payload:
        return ANONYMOUS
    return Identity(
        user_id=payload.sub,
        email=payload.email,
        name=payload.name,
        phone=payload.phone,
    )


def require_identity(identity: Identity = Depends(resolve_identity)) -> Identity:
    """Caller must be signed in."""
    if not identity.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


def is_trusted_service(
    x_nuclia_persist_secret: str | None = Header(default=None),
) -> bool:
    """True for server-to-server calls carrying the shared secret header."""
    secret = get_settings().nuclia_persist_secret
    if not secret or not x_nuclia_persist_secret:
        return False
    return hmac.compare_digest(x_nuclia_persist_secret, secret)
