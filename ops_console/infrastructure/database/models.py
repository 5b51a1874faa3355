"""SQLAlchemy ORM models for the operations store"""

import uuid
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, Date, Time, ForeignKey, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class ProfileRow(TimestampMixin, Base):
    """Employee profile"""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    full_name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    role = Column(Text, nullable=False, default="employee")
    employment_type = Column(Text, nullable=True)  # full-time | part-time | casual
    hourly_rate = Column(Numeric(12, 2), nullable=True)
    salary = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class BankAccountRow(TimestampMixin, Base):
    """Bank account with opening balance"""

    __tablename__ = "bank_accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=True, index=True)
    bank_name = Column(Text, nullable=False, default="")
    account_number = Column(Text, nullable=False, default="")
    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)
    is_primary = Column(Boolean, nullable=False, default=False)


class BankTransactionRow(TimestampMixin, Base):
    """Deposit or withdrawal against a bank account"""

    __tablename__ = "bank_transactions"

    id = Column(String(36), primary_key=True, default=new_id)
    bank_account_id = Column(
        String(36), ForeignKey("bank_accounts.id", ondelete="CASCADE"), nullable=True, index=True
    )
    type = Column(Text, nullable=False)  # deposit | withdrawal
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    category = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    client_id = Column(String(36), nullable=True)
    project_id = Column(String(36), nullable=True)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=True)


class RosterRow(TimestampMixin, Base):
    """Scheduled shift"""

    __tablename__ = "rosters"

    id = Column(String(36), primary_key=True, default=new_id)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    client_id = Column(String(36), nullable=True)
    project_id = Column(String(36), nullable=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    total_hours = Column(Numeric(6, 2), nullable=False, default=0)
    status = Column(Text, nullable=False, default="pending")
    is_locked = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)


class WorkingHourRow(TimestampMixin, Base):
    """Logged hours awaiting or past approval"""

    __tablename__ = "working_hours"

    id = Column(String(36), primary_key=True, default=new_id)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    client_id = Column(String(36), nullable=True)
    project_id = Column(String(36), nullable=True)
    roster_id = Column(String(36), ForeignKey("rosters.id", ondelete="SET NULL"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    total_hours = Column(Numeric(6, 2), nullable=False, default=0)
    actual_hours = Column(Numeric(6, 2), nullable=True)
    payable_amount = Column(Numeric(12, 2), nullable=True)
    status = Column(Text, nullable=False, default="pending")


class PayrollRow(TimestampMixin, Base):
    """Pay record with the hourly rate snapshotted at creation"""

    __tablename__ = "payroll"

    id = Column(String(36), primary_key=True, default=new_id)
    profile_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    bank_account_id = Column(String(36), ForeignKey("bank_accounts.id"), nullable=True)
    pay_period_start = Column(Date, nullable=False)
    pay_period_end = Column(Date, nullable=False)
    total_hours = Column(Numeric(8, 2), nullable=False, default=0)
    hourly_rate = Column(Numeric(12, 2), nullable=False, default=0)
    gross_pay = Column(Numeric(12, 2), nullable=False, default=0)
    deductions = Column(Numeric(12, 2), nullable=False, default=0)
    net_pay = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(Text, nullable=False, default="pending")


TABLES = {
    "profiles": ProfileRow,
    "bank_accounts": BankAccountRow,
    "bank_transactions": BankTransactionRow,
    "rosters": RosterRow,
    "working_hours": WorkingHourRow,
    "payroll": PayrollRow,
}
