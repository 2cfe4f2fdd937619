from datetime import datetime, timedelta, timezone

from jose import jwt

from assetbridge.core.config import settings


# ─── JWT ──────────────────────────────────────────────────────────────────────
# Tokens are minted by the upstream auth service; this service only verifies
# them. create_access_token exists for local tooling and tests.

def create_access_token(
    subject: str,
    owner_id: str,
    owner_name: str,
    expires_minutes: int = 60,
) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode(
        {
            "sub": subject,
            "owner_id": owner_id,
            "owner_name": owner_name,
            "exp": expire,
            "type": "access",
        },
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> dict:
    """Raises JWTError on invalid/expired token."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
