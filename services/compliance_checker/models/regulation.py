"""
Regulation Database Models
==========================

SQLAlchemy ORM models for the regulation corpus and its nested records.

Version: 0.1.0
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import relationship

from shared.database.postgres import Base
from shared.models.regulation import RegulationCategory


# Stored categories must stay within the taxonomy the scoring tables cover
CATEGORY_CHECK = "category IN ({})".format(
    ", ".join(f"'{c.value}'" for c in RegulationCategory)
)


class RegulationModel(Base):
    """
    SQLAlchemy model for a regulation.

    Penalties, requirements, exemptions and applicability tags live in child
    tables and are deleted with their regulation.
    """

    __tablename__ = "regulations"
    __table_args__ = (
        CheckConstraint(CATEGORY_CHECK, name="ck_regulations_category"),
        Index("idx_regulations_category", "category"),
        Index("idx_regulations_jurisdiction", "jurisdiction"),
        Index("idx_regulations_effective_date", "effective_date"),
        Index(
            "idx_regulations_search",
            text("to_tsvector('english', title || ' ' || description)"),
            postgresql_using="gin",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    jurisdiction = Column(String(100), nullable=False)
    authority = Column(String(200), nullable=False)

    effective_date = Column(Date, nullable=False)
    compliance_deadline = Column(Date)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    penalties = relationship(
        "PenaltyModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    requirements = relationship(
        "RequirementModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    exemptions = relationship(
        "RegulationExemptionModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    applicability = relationship(
        "RegulationApplicabilityModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Regulation(id={self.id}, title='{self.title}', jurisdiction='{self.jurisdiction}')>"


class PenaltyModel(Base):
    """Penalty for violating a regulation."""

    __tablename__ = "penalties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    regulation_id = Column(
        Integer,
        ForeignKey("regulations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2))
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RequirementModel(Base):
    """Obligation imposed by a regulation."""

    __tablename__ = "requirements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    regulation_id = Column(
        Integer,
        ForeignKey("regulations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description = Column(Text, nullable=False)
    frequency = Column(String(100))
    documentation = Column(Text)
    deadline = Column(String(100))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RegulationExemptionModel(Base):
    """Exemption text attached to a regulation."""

    __tablename__ = "regulation_exemptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    regulation_id = Column(
        Integer,
        ForeignKey("regulations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    exemption_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class RegulationApplicabilityModel(Base):
    """Free-text sector label a regulation targets."""

    __tablename__ = "regulation_applicability"

    id = Column(Integer, primary_key=True, autoincrement=True)
    regulation_id = Column(
        Integer,
        ForeignKey("regulations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    applies_to = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
