"""Prompt Template Library model.

Stores reusable instruction templates sent to the model service. Text
templates carry a single ``{text}`` placeholder where the caller's input is
inserted; design templates are sent alongside an uploaded screenshot.
"""
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text

from proposal_maker.core.database import Base

PROMPT_CATEGORIES = ("general", "presentation", "document", "custom", "design")


class PromptTemplate(Base):
    """Global library of prompt templates."""

    __tablename__ = "prompt_templates"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    prompt = Column(Text, nullable=False)
    category = Column(String(20), nullable=False, default="general")

    is_active = Column(Boolean, default=True, nullable=False)
    is_system = Column(Boolean, default=False, nullable=False)  # Seeded defaults cannot be edited/deleted
    version = Column(Integer, default=1, nullable=False)

    created_by = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "category IN ('general', 'presentation', 'document', 'custom', 'design')",
            name="check_prompt_template_category",
        ),
    )

    def __repr__(self):
        return f"<PromptTemplate(id={self.id}, name='{self.name}', category='{self.category}')>"
