# despachos/infrastructure/api/dependencies.py
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from despachos.application.session import BackOfficeSession
from despachos.domain.exceptions import (
    AssetNotFound,
    BackendError,
    DespachoError,
    LoadAlreadyClosed,
    LoadNotFound,
    SellerNotFound,
    SessionExpired,
    ValidationError,
)
from despachos.domain.ports.logistics_backend import LogisticsBackend
from despachos.domain.ports.settlement_journal import SettlementJournal
from despachos.infrastructure.external.rest_backend_adapter import RestBackendAdapter
from despachos.infrastructure.persistence.database import get_db
from despachos.infrastructure.persistence.settlement_journal_adapter import SQLAlchemySettlementJournal


def get_session(authorization: Optional[str] = Header(None)) -> BackOfficeSession:
    """El token del usuario se reenvía tal cual al backend de logística."""
    return BackOfficeSession.from_authorization(authorization)


def get_backend(session: BackOfficeSession = Depends(get_session)) -> LogisticsBackend:
    return RestBackendAdapter(session)


def get_journal(db: Session = Depends(get_db)) -> SettlementJournal:
    return SQLAlchemySettlementJournal(db)


def to_http_exception(error: DespachoError) -> HTTPException:
    if isinstance(error, SessionExpired):
        return HTTPException(status_code=401, detail=error.message)
    if isinstance(error, LoadAlreadyClosed):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, (SellerNotFound, LoadNotFound, AssetNotFound)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, BackendError):
        return HTTPException(status_code=502, detail=error.message)
    return HTTPException(status_code=500, detail=str(error))
