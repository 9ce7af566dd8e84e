import os

# Settings are read at import time; pin them before any app module loads.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENCRYPTION_KEY"] = "00" * 32
os.environ["SECRET_KEY"] = "test-secret-key-used-only-for-jwt-in-tests"
os.environ["LOG_CREDENTIAL_EVENTS"] = "true"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, User
from app.modules.auth.application.security import hash_password
from app.modules.security import EncryptionKey
from app.modules.security.adapters.aes_cbc_cipher import AesCbcCredentialCipher
from app.modules.security.adapters.cipher_vault import CipherSecretsVaultAdapter

ZERO_KEY_HEX = "00" * 32


@pytest.fixture
def session_factory():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    """Database session for tests"""
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def staff_user(db: Session) -> User:
    user = User(
        email="staff@salon.test",
        hashed_password=hash_password("testpass"),
        full_name="Front Desk",
        is_admin=False,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def cipher() -> AesCbcCredentialCipher:
    return AesCbcCredentialCipher(EncryptionKey.from_hex(ZERO_KEY_HEX))


@pytest.fixture
def vault(cipher: AesCbcCredentialCipher) -> CipherSecretsVaultAdapter:
    return CipherSecretsVaultAdapter(cipher)
