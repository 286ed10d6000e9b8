from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID, uuid4

from jose import JWTError, jwt

from ..core.config import Config
from ..exceptions import InvalidTokenException


def create_access_token(user_id: UUID, expiry: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token for ``user_id``.

    Admin rights are not baked into the token; they are looked up on every request.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "jti": uuid4().hex,
        "iat": now,
        "exp": now + (expiry or timedelta(seconds=Config.ACCESS_TOKEN_EXPIRY)),
    }

    return jwt.encode(payload, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, Config.JWT_SECRET, algorithms=[Config.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenException(f"Invalid or expired token: {e}")

    if "sub" not in payload:
        raise InvalidTokenException("Token has no subject")

    return payload
