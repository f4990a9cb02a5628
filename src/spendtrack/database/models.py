"""SQLAlchemy models for spendtrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BudgetGoal(Base):
    """Budget goal model."""

    __tablename__ = "budget_goals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    remaining_balance = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    category = Column(String(60), nullable=True)
    detail = Column(String(500), nullable=True)
    status = Column(String, default="active", nullable=False)
    priority = Column(String, default="medium", nullable=False)
    progress = Column(Integer, default=0, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_budget_goals_user_date", "user_id", "date"),
        Index("ix_budget_goals_user_status", "user_id", "status"),
    )

    # Relationships
    transactions = relationship("Transaction", back_populates="budget_goal")


class Transaction(Base):
    """Expense or payment model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    kind = Column(String, nullable=False)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=True)
    category = Column(String, nullable=True)
    detail = Column(String(500), nullable=True)
    payment_method = Column(String, nullable=True)
    budget_goal_id = Column(Integer, ForeignKey("budget_goals.id"), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (Index("ix_transactions_user_kind_date", "user_id", "kind", "date"),)

    # Relationships
    budget_goal = relationship("BudgetGoal", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
