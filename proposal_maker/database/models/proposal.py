"""Shareable proposal models.

Views are recorded as an append-only event log (``proposal_views``); the
view count is derived from it rather than kept as a mutable counter.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from proposal_maker.core.database import Base


class Proposal(Base):
    """Static HTML document reachable through an unguessable share token."""

    __tablename__ = "proposals"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    html = Column(Text, nullable=False)
    share_token = Column(String(32), nullable=False, unique=True, index=True)

    created_by = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    views = relationship(
        "ProposalView",
        back_populates="proposal",
        cascade="all, delete-orphan",
        order_by="ProposalView.id",
    )

    def __repr__(self):
        return f"<Proposal(id={self.id}, name='{self.name}', share_token='{self.share_token}')>"


class ProposalView(Base):
    """One anonymous view of a shared proposal."""

    __tablename__ = "proposal_views"

    id = Column(Integer, primary_key=True)
    proposal_id = Column(Integer, ForeignKey("proposals.id", ondelete="CASCADE"), nullable=False, index=True)
    ip_address = Column(String(255), nullable=False, default="unknown")
    location = Column(String(255), nullable=False, default="unknown")
    viewed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    proposal = relationship("Proposal", back_populates="views")

    def __repr__(self):
        return f"<ProposalView(id={self.id}, proposal_id={self.proposal_id}, location='{self.location}')>"
