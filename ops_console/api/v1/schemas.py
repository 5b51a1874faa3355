"""Pydantic schemas for API request/response validation"""

import datetime as dt
from datetime import date, time
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AccountBalanceResponse(BaseModel):
    """Response for GET /v1/accounts/{account_id}/balance"""

    account_id: str
    bank_name: str
    opening_balance: Decimal
    balance: Decimal


class TotalBalanceResponse(BaseModel):
    """Response for GET /v1/balance"""

    total_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    account_count: int
    transaction_count: int


class TransactionSchema(BaseModel):
    """Single bank transaction"""

    id: str
    bank_account_id: Optional[str] = None
    type: str
    amount: Decimal
    date: date
    category: str = ""
    description: str = ""
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    profile_id: Optional[str] = None


class TransactionListResponse(BaseModel):
    transactions: List[TransactionSchema]


class TransactionCreateRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    bank_account_id: str = Field(..., min_length=1)
    type: Literal["deposit", "withdrawal"]
    amount: Decimal = Field(
        ..., gt=0, decimal_places=2, description="Always positive, whole cents; sign comes from type"
    )
    date: date
    category: str = ""
    description: str = ""
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    profile_id: Optional[str] = None


class TransactionUpdateRequest(TransactionCreateRequest):
    """Request body for PUT /v1/transactions/{transaction_id}; replaces every field"""


class PreviewedPayroll(BaseModel):
    """Figures shown by a preview, sent back on commit"""

    profile_id: str
    gross_pay: Decimal
    working_hour_ids: List[str] = []


class PayrollRequest(BaseModel):
    """Request body for POST /v1/payroll and /v1/payroll/preview"""

    profile_ids: Optional[List[str]] = Field(
        None, min_length=1, description="Defaults to every active profile"
    )
    pay_period_start: date
    pay_period_end: date
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    deductions: Optional[Decimal] = Field(
        None, ge=0, description="Flat deduction per profile; configured policy applies when omitted"
    )
    status: Literal["pending", "approved", "paid"] = "pending"
    bank_account_id: Optional[str] = None
    expected: Optional[List[PreviewedPayroll]] = Field(
        None, description="Preview figures; commit is refused with 409 if they no longer hold"
    )

    @field_validator("profile_ids")
    @classmethod
    def reject_duplicate_profiles(cls, value):
        if value is not None and len(set(value)) != len(value):
            raise ValueError("profile_ids must not repeat")
        return value


class PayrollItem(BaseModel):
    """Computed pay for one profile"""

    profile_id: str
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    pricing: str
    working_hour_ids: List[str] = []


class PayrollPreviewResponse(BaseModel):
    pay_period_start: date
    pay_period_end: date
    items: List[PayrollItem]
    total_hours: Decimal
    total_net_pay: Decimal


class PayrollSchema(BaseModel):
    """Persisted payroll record"""

    id: str
    profile_id: str
    pay_period_start: date
    pay_period_end: date
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: str
    bank_account_id: Optional[str] = None


class PayrollCommitResponse(BaseModel):
    payrolls: List[PayrollSchema]


class PayrollCorrectionRequest(BaseModel):
    """Request body for PUT /v1/payroll/{payroll_id}; omitted fields keep their stored value"""

    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    deductions: Optional[Decimal] = Field(None, ge=0)
    bank_account_id: Optional[str] = None


class PayrollStatusRequest(BaseModel):
    status: Literal["approved", "paid"]


class MonthlyPayrollSchema(BaseModel):
    month: int
    label: str
    amount: Decimal
    count: int


class EarnerSchema(BaseModel):
    profile_id: str
    name: str
    total: Decimal
    hours: Decimal


class PayrollReportResponse(BaseModel):
    """Response for GET /v1/payroll/reports"""

    year: int
    monthly: List[MonthlyPayrollSchema]
    status_distribution: Dict[str, int]
    top_earners: List[EarnerSchema]
    total_net_pay: Decimal
    pending_hours: Decimal


class RosterSchema(BaseModel):
    id: str
    profile_id: str
    date: date
    start_time: time
    end_time: time
    total_hours: Decimal
    status: str
    is_locked: bool
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    notes: Optional[str] = None


class RosterListResponse(BaseModel):
    rosters: List[RosterSchema]
    total_hours: Decimal
    hours_by_profile: Dict[str, Decimal]


class RosterEditableResponse(BaseModel):
    roster_id: str
    editable: bool
    approved_count: int
    is_locked: bool


class RosterCreateRequest(BaseModel):
    """Request body for POST /v1/rosters; total_hours is derived from the times"""

    model_config = ConfigDict(extra="forbid")

    profile_id: str = Field(..., min_length=1)
    date: dt.date
    start_time: time
    end_time: time
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    notes: Optional[str] = None


class RosterEditRequest(BaseModel):
    """Request body for PATCH /v1/rosters/{roster_id}; only sent fields change"""

    model_config = ConfigDict(extra="forbid")

    profile_id: Optional[str] = None
    client_id: Optional[str] = None
    project_id: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None


class RosterStatusRequest(BaseModel):
    status: Literal["confirmed", "cancelled"]
