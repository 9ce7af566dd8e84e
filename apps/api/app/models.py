from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.shared.infrastructure.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255))
    is_admin = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    last_login_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    portal_credential = relationship(
        "PortalCredential",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    portal_session = relationship(
        "PortalSession",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )


class PortalCredential(Base):
    """Login for the external salon-management portal, one row per user."""
    __tablename__ = "portal_credentials"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False)
    encrypted_password = Column(Text, nullable=False)  # hex(iv):hex(ciphertext)
    service_type = Column(String(16), nullable=True)  # "hair" | "spa"
    last_used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="portal_credential")


class PortalSession(Base):
    """Browser cookies captured after a portal login, encrypted like passwords."""
    __tablename__ = "portal_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    session_data = Column(Text, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="portal_session")
