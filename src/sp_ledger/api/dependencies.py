"""FastAPI dependencies that hand out the app-scoped ledger handles."""

from fastapi import Request

from src.sp_ledger.application.service import LedgerService


def get_ledger_service(request: Request) -> LedgerService:
    return request.app.state.ledger


def get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")
