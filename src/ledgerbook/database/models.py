"""SQLAlchemy models for the ledgerbook database."""

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
    Float,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Ledger(Base):
    """Ledger model. System ledgers have a NULL user_id."""

    __tablename__ = "ledgers"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    # Lower-cased name, used for case-insensitive uniqueness
    name_key = Column(String, nullable=False)
    category = Column(String, nullable=False)
    is_system = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name_key", name="uq_ledger_user_name"),)

    transactions = relationship("Transaction", back_populates="ledger")


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_number = Column(String, nullable=True)
    account_type = Column(String, default="savings", nullable=False)
    current_balance = Column(Numeric(14, 2), default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    currency = Column(String, default="USD", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    transactions = relationship("Transaction", back_populates="bank_account")


class Contact(Base):
    """Counterparty model."""

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    total_receivable = Column(Numeric(14, 2), default=0, nullable=False)
    total_payable = Column(Numeric(14, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    direction = Column(String, nullable=False)
    ledger_id = Column(Integer, ForeignKey("ledgers.id"), nullable=True)
    narration = Column(String, nullable=True)
    state = Column(String, default="imported", nullable=False)
    is_confirmed = Column(Boolean, default=False, nullable=False)
    is_reconciled = Column(Boolean, default=False, nullable=False)
    ai_suggested = Column(Boolean, default=False, nullable=False)
    suggestion_confidence = Column(Float, nullable=True)
    suggested_ledger_name = Column(String, nullable=True)
    suggested_category = Column(String, nullable=True)
    balance_after = Column(Numeric(14, 2), nullable=True)
    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=True)
    related_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    bank_account = relationship("BankAccount", back_populates="transactions")
    ledger = relationship("Ledger", back_populates="transactions")


class Mapping(Base):
    """Learned description -> ledger mapping."""

    __tablename__ = "mappings"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    description = Column(String, nullable=False)
    ledger_id = Column(Integer, ForeignKey("ledgers.id"), nullable=False)
    narration = Column(String, nullable=True)
    usage_count = Column(Integer, default=1, nullable=False)
    confidence_score = Column(Float, default=0.5, nullable=False)
    last_used_at = Column(DateTime, default=_now, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "description", name="uq_mapping_user_description"),)


class Reminder(Base):
    """Payment reminder model."""

    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    contact_id = Column(Integer, ForeignKey("contacts.id"), nullable=True)
    due_date = Column(Date, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    message = Column(String, nullable=False)
    reminder_type = Column(String, nullable=False)
    status = Column(String, default="pending", nullable=False)
    channel = Column(String, nullable=True)
    sent_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
