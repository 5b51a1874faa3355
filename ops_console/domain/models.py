"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Literal, Optional

Role = Literal["admin", "employee", "accountant", "operation", "sales_manager"]
TransactionType = Literal["deposit", "withdrawal"]
WorkingHourStatus = Literal["pending", "approved", "rejected"]
RosterStatus = Literal["pending", "confirmed", "cancelled"]
PayrollStatus = Literal["pending", "approved", "paid"]

ROLES = ("admin", "employee", "accountant", "operation", "sales_manager")
TRANSACTION_TYPES = ("deposit", "withdrawal")
WORKING_HOUR_STATUSES = ("pending", "approved", "rejected")
ROSTER_STATUSES = ("pending", "confirmed", "cancelled")
PAYROLL_STATUSES = ("pending", "approved", "paid")  # in advancing order


@dataclass(frozen=True)
class Profile:
    """Employee identity and compensation basis"""

    id: str
    full_name: str
    role: str  # one of ROLES
    hourly_rate: Optional[Decimal] = None
    salary: Optional[Decimal] = None
    is_active: bool = True
    email: Optional[str] = None
    employment_type: Optional[str] = None  # full-time | part-time | casual


@dataclass(frozen=True)
class BankAccount:
    """Bank account with an opening balance; may be negative"""

    id: str
    opening_balance: Decimal
    profile_id: Optional[str] = None
    bank_name: str = ""
    account_number: str = ""
    is_primary: bool = False


@dataclass(frozen=True)
class BankTransaction:
    """Deposit or withdrawal; amount is always positive, sign comes from type"""

    id: str
    bank_account_id: Optional[str]
    type: str  # "deposit" or "withdrawal"
    amount: Decimal
    date: date
    category: str = ""
    description: str = ""
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    profile_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkingHour:
    """Logged work; status is owned by the approval workflow"""

    id: str
    profile_id: str
    date: date
    total_hours: Decimal
    status: str  # pending | approved | rejected
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    roster_id: Optional[str] = None
    actual_hours: Optional[Decimal] = None
    payable_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class RosterEntry:
    """Scheduled shift, editable until locked or approved against"""

    id: str
    profile_id: str
    date: date
    start_time: time
    end_time: time
    total_hours: Decimal
    status: str = "pending"
    is_locked: bool = False
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Payroll:
    """Persisted pay record for one profile over one period"""

    id: str
    profile_id: str
    pay_period_start: date
    pay_period_end: date
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: str = "pending"
    bank_account_id: Optional[str] = None


@dataclass(frozen=True)
class PayrollResult:
    """Output of the payroll calculator for one profile"""

    profile_id: str
    pay_period_start: date
    pay_period_end: date
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    pricing: str  # "payable_amount" or "hourly_rate"
    working_hour_ids: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class TransactionSummary:
    """Income/expense totals over a set of transactions"""

    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    transaction_count: int
