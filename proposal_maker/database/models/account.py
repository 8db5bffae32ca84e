"""Account model.

The third-party API key is stored only as an encrypted envelope (see
``core.encryption``) and is never serialised by any read path.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from proposal_maker.core.database import Base


class Account(Base):
    """A registered user."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    api_key_encrypted = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key_encrypted)

    def __repr__(self):
        return f"<Account(id={self.id}, email='{self.email}')>"
