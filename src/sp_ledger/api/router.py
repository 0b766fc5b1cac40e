"""Balance and transaction REST API — all endpoints require JWT authentication."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from src.sp_common.response import ApiResponse, success_response
from src.sp_gateway.auth.dependencies import get_current_username
from src.sp_ledger.api.dependencies import get_ledger_service, get_request_id
from src.sp_ledger.application.schemas import (
    BalanceResponse,
    DepositRequest,
    DepositResponse,
    TransactionItem,
    TransactionListResponse,
    TransferRequest,
)
from src.sp_ledger.application.service import LedgerService

balance_router = APIRouter(prefix="/balance", tags=["Account Balance Management"])
transactions_router = APIRouter(prefix="/transactions", tags=["Transactions"])

CurrentUser = Annotated[str, Depends(get_current_username)]
Ledger = Annotated[LedgerService, Depends(get_ledger_service)]
RequestId = Annotated[str, Depends(get_request_id)]


@balance_router.get("", response_model=ApiResponse, summary="Current balance of user")
async def get_balance(username: CurrentUser, ledger: Ledger, request_id: RequestId) -> ApiResponse:
    balance = await ledger.get_balance(username)
    return success_response(
        BalanceResponse(username=username, balance=balance).model_dump(),
        request_id=request_id,
    )


@balance_router.post("/deposit", response_model=ApiResponse, summary="Deposit money")
async def deposit(
    body: DepositRequest,
    username: CurrentUser,
    ledger: Ledger,
    request_id: RequestId,
) -> ApiResponse:
    balance = await ledger.deposit(username, body.deposit_amount)
    data = DepositResponse(username=username, deposited=body.deposit_amount, balance=balance)
    return success_response(
        data.model_dump(), message="Successfully deposited money", request_id=request_id
    )


@transactions_router.post(
    "", response_model=ApiResponse, summary="Transfer money to another user"
)
async def create_transaction(
    body: TransferRequest,
    username: CurrentUser,
    ledger: Ledger,
    request_id: RequestId,
) -> ApiResponse:
    record = await ledger.transfer(username, body.to_user, body.amount)
    return success_response(
        TransactionItem.from_record(record).model_dump(),
        message="Transaction successfully executed",
        request_id=request_id,
    )


@transactions_router.get(
    "", response_model=ApiResponse, summary="Transactions of the current user, newest first"
)
async def list_transactions(
    username: CurrentUser, ledger: Ledger, request_id: RequestId
) -> ApiResponse:
    records = await ledger.list_transactions(username)
    items = [TransactionItem.from_record(r) for r in records]
    return success_response(
        TransactionListResponse(items=items, count=len(items)).model_dump(),
        request_id=request_id,
    )


@transactions_router.get(
    "/{transaction_id}", response_model=ApiResponse, summary="Transaction by id"
)
async def get_transaction(
    transaction_id: Annotated[uuid.UUID, Path(description="Transaction id")],
    username: CurrentUser,
    ledger: Ledger,
    request_id: RequestId,
) -> ApiResponse:
    record = await ledger.get_transaction(transaction_id, username)
    return success_response(
        TransactionItem.from_record(record).model_dump(), request_id=request_id
    )
