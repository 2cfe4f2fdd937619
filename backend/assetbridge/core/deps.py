import uuid
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from redis import asyncio as redis
from sqlalchemy.ext.asyncio import AsyncSession

from assetbridge.core.config import settings
from assetbridge.core.security import decode_token
from assetbridge.db.session import get_session
from assetbridge.services.asset_store import SqlAlchemyAssetStore
from assetbridge.services.view_cache import RedisViewCache, ViewCache, ViewCacheBackend

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=True)


@dataclass(frozen=True)
class OwnerContext:
    """Tenant scope of the calling user, read from the bearer token."""
    user_id: str
    owner_id: uuid.UUID
    owner_name: str


async def get_owner_context(
    token: Annotated[str, Depends(oauth2_scheme)],
) -> OwnerContext:
    """Validate JWT and return the caller's tenant scope."""
    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise credentials_exc
        user_id: str = payload.get("sub")
        owner_id: str = payload.get("owner_id")
        if not user_id or not owner_id:
            raise credentials_exc
        owner_uuid = uuid.UUID(str(owner_id))
    except (JWTError, ValueError):
        raise credentials_exc

    return OwnerContext(
        user_id=user_id,
        owner_id=owner_uuid,
        owner_name=payload.get("owner_name") or "",
    )


async def get_asset_store(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> SqlAlchemyAssetStore:
    return SqlAlchemyAssetStore(db)


def _build_view_cache() -> ViewCacheBackend:
    if settings.REDIS_URL:
        # from_url does not connect; the pool opens on first use.
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        return RedisViewCache(client, ttl_seconds=settings.VIEW_CACHE_TTL_SECONDS)
    return ViewCache(ttl_seconds=settings.VIEW_CACHE_TTL_SECONDS)


_view_cache = _build_view_cache()


def get_view_cache() -> ViewCacheBackend:
    return _view_cache


async def close_view_cache() -> None:
    if isinstance(_view_cache, RedisViewCache):
        await _view_cache.redis.aclose()
