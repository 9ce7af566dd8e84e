import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.shared.infrastructure.settings import get_settings
from app.shared.infrastructure.database import engine, Base, SessionLocal
from app.models import User
from app.modules.auth.application.security import hash_password
from app.modules.security.adapters.aes_cbc_cipher import credential_cipher
from app.api.v1.routes import (
    health,
    auth,
    portal,
)

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create tables
Base.metadata.create_all(bind=engine)


def _bootstrap_admin_user() -> None:
    if not settings.bootstrap_admin_enabled:
        return

    if settings.environment == "production":
        logger.error("BOOTSTRAP_ADMIN_ENABLED cannot be used in production")
        return

    if not settings.bootstrap_admin_password:
        logger.warning("BOOTSTRAP_ADMIN_ENABLED=true, but no BOOTSTRAP_ADMIN_PASSWORD was configured")
        return

    db = SessionLocal()
    try:
        admin_user = db.query(User).filter(User.email == settings.bootstrap_admin_email).first()
        if admin_user:
            return
        admin_user = User(
            email=settings.bootstrap_admin_email,
            hashed_password=hash_password(settings.bootstrap_admin_password),
            full_name="Admin User",
            is_admin=True,
            is_active=True,
        )
        db.add(admin_user)
        db.commit()
        logger.warning("Bootstrap admin user created for %s", settings.bootstrap_admin_email)
    finally:
        db.close()


def _resolve_cors_origins() -> list[str]:
    if settings.cors_origins:
        return settings.cors_origins
    if settings.environment in {"development", "test"}:
        return ["http://localhost:3000", "http://127.0.0.1:3000"]
    return []


def create_app() -> FastAPI:
    docs_enabled = settings.environment != "production"
    app = FastAPI(
        title="Salon Back Office API",
        description="Salon back-office API: staff auth and salon portal credentials",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    cors_origins = _resolve_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(portal.router)

    return app


# The cipher is built when its adapter module is imported; reaching this
# line means ENCRYPTION_KEY decoded to a valid 32-byte key.
logger.info("Credential cipher ready (%s)", type(credential_cipher).__name__)
_bootstrap_admin_user()
app = create_app()


@app.get("/")
async def root():
    return {"message": "Salon Back Office API"}

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
