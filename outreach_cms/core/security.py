# File: outreach_cms/core/security.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode
from passlib.context import CryptContext

from outreach_cms.core.config import Settings, settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    role: str


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare through bcrypt's own verify; unknown hash formats count as a mismatch"""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    claims: TokenClaims,
    expires_delta: Optional[timedelta] = None,
    config: Settings = settings,
) -> str:
    secret = config.require_jwt_secret()
    issued_at = datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "userId": claims.user_id,
        "email": claims.email,
        "role": claims.role,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(to_encode, secret, algorithm=config.JWT_ALGORITHM)


def _is_canonical_segment(segment: str) -> bool:
    # base64url tolerates junk in the trailing padding bits; reject any
    # segment that does not re-encode to itself.
    try:
        raw = segment.encode("ascii")
        return base64url_encode(base64url_decode(raw)) == raw
    except (ValueError, TypeError, UnicodeError):
        return False


def decode_token(token: str, config: Settings = settings) -> Optional[TokenClaims]:
    """
    Verify signature and expiry and return the identity claims.
    Any malformed, tampered or expired token yields None.
    """
    secret = config.require_jwt_secret()

    if not isinstance(token, str) or not token:
        return None
    segments = token.split(".")
    if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
        return None

    try:
        payload = jwt.decode(token, secret, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"Token rejected: {e}")
        return None
    except (ValueError, TypeError, UnicodeError) as e:
        logger.info(f"Token rejected: malformed payload ({type(e).__name__})")
        return None

    user_id = payload.get("userId")
    email = payload.get("email")
    role = payload.get("role")
    if not all(isinstance(v, str) and v for v in (user_id, email, role)):
        return None
    if "exp" not in payload:
        return None

    return TokenClaims(user_id=user_id, email=email, role=role)
