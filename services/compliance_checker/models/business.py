"""
Business Database Models
========================

SQLAlchemy ORM models for businesses and their saved compliance results.

Version: 0.1.0
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from shared.database.postgres import Base


class BusinessModel(Base):
    """
    SQLAlchemy model for a small-business profile.

    Name uniqueness is not enforced here.
    """

    __tablename__ = "businesses"
    __table_args__ = (
        Index("idx_businesses_location", "state", "county", "city"),
        Index("idx_businesses_industry", "industry"),
        Index("idx_businesses_size", "size"),
        CheckConstraint("employee_count >= 1", name="check_employee_count"),
        CheckConstraint("annual_revenue > 0", name="check_annual_revenue"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    industry = Column(String(100), nullable=False)

    # Location
    state = Column(String(2), nullable=False)
    county = Column(String(100), nullable=False)
    city = Column(String(100), nullable=False)
    zip_code = Column(String(10), nullable=False)

    # Size
    size = Column(String(50), nullable=False)
    employee_count = Column(Integer, nullable=False)
    annual_revenue = Column(Numeric(15, 2), nullable=False)
    business_type = Column(String(100), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    compliance_results = relationship(
        "ComplianceResultModel",
        back_populates="business",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    regulations = relationship(
        "BusinessRegulationModel",
        back_populates="business",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Business(id={self.id}, name='{self.name}', industry='{self.industry}')>"


class ComplianceResultModel(Base):
    """A saved compliance score for a business."""

    __tablename__ = "compliance_results"
    __table_args__ = (
        Index("idx_compliance_results_business", "business_id", "created_at"),
        CheckConstraint(
            "compliance_score >= 0 AND compliance_score <= 100",
            name="check_compliance_score",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(
        Integer,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
    )
    compliance_score = Column(Numeric(5, 2), nullable=False)
    risk_level = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    business = relationship("BusinessModel", back_populates="compliance_results")

    def __repr__(self) -> str:
        return (
            f"<ComplianceResult(id={self.id}, business_id={self.business_id}, "
            f"score={self.compliance_score})>"
        )


class BusinessRegulationModel(Base):
    """Link between a business and a regulation found applicable to it."""

    __tablename__ = "business_regulations"
    __table_args__ = (
        UniqueConstraint("business_id", "regulation_id", name="uq_business_regulation"),
        Index("idx_business_regulations_business", "business_id"),
        Index("idx_business_regulations_regulation", "regulation_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(
        Integer,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
    )
    regulation_id = Column(
        Integer,
        ForeignKey("regulations.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_applicable = Column(Boolean, default=True, server_default="true")
    compliance_status = Column(String(50), default="pending", server_default="pending")
    next_deadline = Column(Date)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    business = relationship("BusinessModel", back_populates="regulations")
    regulation = relationship("RegulationModel")
