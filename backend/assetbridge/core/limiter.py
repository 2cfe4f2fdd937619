"""Rate limiter singleton, keyed per tenant when the caller sends a valid token."""
from fastapi import Request
from jose import JWTError
from slowapi import Limiter
from slowapi.util import get_remote_address

from assetbridge.core.security import decode_token


def owner_or_remote_address(request: Request) -> str:
    """Bucket authenticated calls by owner so one tenant's imports don't throttle another's."""
    auth = request.headers.get("authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            owner_id = decode_token(token).get("owner_id")
        except JWTError:
            owner_id = None
        if owner_id:
            return f"owner:{owner_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=owner_or_remote_address, headers_enabled=False)
