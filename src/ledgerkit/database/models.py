"""SQLAlchemy models for the ledgerkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(18, 2)


class Account(Base):
    """Chart of accounts node."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String(20), nullable=False)
    level = Column(Integer, nullable=False)
    parent_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    accepts_entries = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")
    lines = relationship("JournalEntryLine", back_populates="account")


class SequenceCounter(Base):
    """Named counter row; locked while allocating the next value."""

    __tablename__ = "sequence_counters"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    current_value = Column(BigInteger, default=0, nullable=False)


class JournalEntry(Base):
    """Journal entry header."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    entry_number = Column(Integer, unique=True, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    status = Column(String(10), nullable=False, default="DRAFT")
    is_automatic = Column(Boolean, default=False, nullable=False)
    template_code = Column(String(50), nullable=True)
    trigger_type = Column(String(30), nullable=True)
    reference = Column(String, nullable=True)
    reference_document_id = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("ix_journal_entries_date", "date"),
        Index("ix_journal_entries_trigger_document", "trigger_type", "reference_document_id"),
    )

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
    )


# At most one automatic entry per (trigger, business document)
Index(
    "uq_journal_entries_automatic_document",
    JournalEntry.trigger_type,
    JournalEntry.reference_document_id,
    unique=True,
    sqlite_where=JournalEntry.is_automatic.is_(True),
    postgresql_where=JournalEntry.is_automatic.is_(True),
)


class JournalEntryLine(Base):
    """Journal entry line."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit = Column(MONEY, nullable=False, default=0)
    credit = Column(MONEY, nullable=False, default=0)
    description = Column(String, nullable=True)

    __table_args__ = (Index("ix_journal_entry_lines_account", "account_id"),)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")


class JournalEntryTemplate(Base):
    """Auto-posting template."""

    __tablename__ = "journal_entry_templates"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    trigger_type = Column(String(30), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "TemplateLine",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateLine.line_number",
    )


class TemplateLine(Base):
    """Template line rule. Exactly one of account_code/context_key is set."""

    __tablename__ = "template_lines"

    id = Column(Integer, primary_key=True)
    template_id = Column(Integer, ForeignKey("journal_entry_templates.id"), nullable=False)
    line_number = Column(Integer, nullable=False)
    account_code = Column(String(50), nullable=True)
    context_key = Column(String(50), nullable=True)
    side = Column(String(6), nullable=False)
    amount_type = Column(String(20), nullable=False)
    fixed_amount = Column(MONEY, nullable=True)
    percentage = Column(Numeric(9, 4), nullable=True)
    custom_field = Column(String(50), nullable=True)
    description = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("template_id", "line_number", name="uq_template_line_number"),
    )

    # Relationships
    template = relationship("JournalEntryTemplate", back_populates="lines")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
