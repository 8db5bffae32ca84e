"""Design Library model.

A named set of CSS variables plus a textual analysis, extracted by the
model service from an uploaded screenshot. ``css_variables`` and
``analysis_result`` are written once at creation; afterwards only the name
and description are editable.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from proposal_maker.core.database import Base


class DesignLibrary(Base):
    """Design tokens owned by one account."""

    __tablename__ = "design_libraries"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    css_variables = Column(Text, nullable=False)
    analysis_result = Column(Text, nullable=False)

    prompt_template_id = Column(
        Integer,
        ForeignKey("prompt_templates.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    prompt_template = relationship("PromptTemplate")

    def __repr__(self):
        return f"<DesignLibrary(id={self.id}, name='{self.name}')>"
