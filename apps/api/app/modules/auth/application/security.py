from datetime import datetime, timedelta
from typing import Optional
import jwt
from passlib.context import CryptContext
from app.shared.infrastructure.settings import get_settings

settings = get_settings()

TOKEN_AUDIENCE = "salon-backoffice"


def _build_pwd_context() -> CryptContext:
    argon_ctx = CryptContext(schemes=["argon2"], deprecated="auto")
    try:
        # Probe backend availability once at startup.
        argon_ctx.hash("salon-probe")
        return argon_ctx
    except Exception:
        return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


pwd_context = _build_pwd_context()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Mint the bearer token accepted by every staff route."""
    issued_at = datetime.utcnow()
    expire = issued_at + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    claims = {
        "sub": str(user_id),
        "aud": TOKEN_AUDIENCE,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=TOKEN_AUDIENCE,
        )
    except jwt.InvalidTokenError:
        return None
