"""GET /v1/balance and /v1/accounts/{account_id}/balance - derived bank balances"""

from fastapi import APIRouter, Depends, Request

from ops_console.api.dependencies import get_request_id, get_store
from ops_console.api.errors import to_http_exception
from ops_console.api.v1.schemas import AccountBalanceResponse, TotalBalanceResponse
from ops_console.domain.balance import compute_account_balance, compute_total_balance, summarize_transactions
from ops_console.domain.exceptions import DomainException
from ops_console.domain.ledger import TransactionFilter
from ops_console.infrastructure.repositories import BankRepository
from ops_console.infrastructure.store.base import RecordStore

router = APIRouter()


@router.get("/accounts/{account_id}/balance", response_model=AccountBalanceResponse)
def get_account_balance(account_id: str, request: Request, store: RecordStore = Depends(get_store)):
    """Opening balance plus deposits minus withdrawals for one account"""
    bank_repo = BankRepository(store)
    try:
        account = bank_repo.get_account(account_id)
        transactions = bank_repo.list_transactions(TransactionFilter(bank_account_id=account_id))
        balance = compute_account_balance(account, transactions)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return AccountBalanceResponse(
        account_id=account.id,
        bank_name=account.bank_name,
        opening_balance=account.opening_balance,
        balance=balance,
    )


@router.get("/balance", response_model=TotalBalanceResponse)
def get_total_balance(request: Request, store: RecordStore = Depends(get_store)):
    """
    Balance across every account, with income/expense totals.

    Income and expense cover all transactions, including any not linked
    to an account; the total balance only counts linked ones.
    """
    bank_repo = BankRepository(store)
    try:
        accounts = bank_repo.list_accounts()
        transactions = bank_repo.list_transactions()
        total = compute_total_balance(accounts, transactions)
        summary = summarize_transactions(transactions)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return TotalBalanceResponse(
        total_balance=total,
        total_income=summary.total_income,
        total_expense=summary.total_expense,
        account_count=len(accounts),
        transaction_count=summary.transaction_count,
    )
