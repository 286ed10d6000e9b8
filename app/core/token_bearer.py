from fastapi import Request
from fastapi.security import HTTPBearer

from ..exceptions import InvalidTokenException
from ..utils.auth import decode_token


class AccessTokenBearer(HTTPBearer):
    """
    Reads ``Authorization: Bearer <token>`` and returns the verified token payload.
    The signature and expiry are always checked; identity headers set by the caller are ignored.
    """

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> dict:
        credentials = await super().__call__(request)

        if credentials is None or not credentials.credentials:
            raise InvalidTokenException("Authentication required")

        return decode_token(credentials.credentials)
