"""/v1/transactions - transaction ledger with create, edit and hard delete"""

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from ops_console.api.dependencies import get_request_id, get_store
from ops_console.api.errors import to_http_exception
from ops_console.api.v1.schemas import (
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionSchema,
    TransactionUpdateRequest,
)
from ops_console.domain.balance import validate_transaction
from ops_console.domain.exceptions import DomainException
from ops_console.domain.ledger import TransactionFilter
from ops_console.infrastructure.repositories import BankRepository
from ops_console.infrastructure.store.base import RecordStore

router = APIRouter()


def _to_schema(txn) -> TransactionSchema:
    return TransactionSchema(
        id=txn.id,
        bank_account_id=txn.bank_account_id,
        type=txn.type,
        amount=txn.amount,
        date=txn.date,
        category=txn.category,
        description=txn.description,
        client_id=txn.client_id,
        project_id=txn.project_id,
        profile_id=txn.profile_id,
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    request: Request,
    bank_account_id: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    type: Optional[Literal["deposit", "withdrawal"]] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    store: RecordStore = Depends(get_store),
):
    """Recent transactions, newest first"""
    try:
        txn_filter = TransactionFilter(
            bank_account_id=bank_account_id,
            date_from=date_from,
            date_to=date_to,
            type=type,
        )
        transactions = BankRepository(store).list_transactions(txn_filter, limit=limit)
    except DomainException as e:
        raise to_http_exception(e, get_request_id(request))

    return TransactionListResponse(transactions=[_to_schema(t) for t in transactions])


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(
    body: TransactionCreateRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """Record a deposit or withdrawal against an existing account"""
    request_id = get_request_id(request)
    bank_repo = BankRepository(store)
    try:
        validate_transaction(body.type, body.amount)
        bank_repo.get_account(body.bank_account_id)
        txn = bank_repo.create_transaction(body.model_dump())
    except DomainException as e:
        raise to_http_exception(e, request_id)

    logging.info(
        "Transaction recorded",
        extra={"request_id": request_id, "transaction_id": txn.id, "type": txn.type},
    )
    return _to_schema(txn)


@router.put("/transactions/{transaction_id}", response_model=TransactionSchema)
def update_transaction(
    transaction_id: str,
    body: TransactionUpdateRequest,
    request: Request,
    store: RecordStore = Depends(get_store),
):
    """Explicit edit of a recorded transaction; same rules as creation"""
    request_id = get_request_id(request)
    bank_repo = BankRepository(store)
    try:
        validate_transaction(body.type, body.amount)
        bank_repo.get_transaction(transaction_id)
        bank_repo.get_account(body.bank_account_id)
        txn = bank_repo.update_transaction(transaction_id, body.model_dump())
    except DomainException as e:
        raise to_http_exception(e, request_id)

    logging.info(
        "Transaction updated",
        extra={"request_id": request_id, "transaction_id": txn.id, "type": txn.type},
    )
    return _to_schema(txn)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: str, request: Request, store: RecordStore = Depends(get_store)):
    """Hard delete; balances simply stop counting it"""
    request_id = get_request_id(request)
    try:
        BankRepository(store).delete_transaction(transaction_id)
    except DomainException as e:
        raise to_http_exception(e, request_id)

    logging.info("Transaction deleted", extra={"request_id": request_id, "transaction_id": transaction_id})
    return Response(status_code=204)
