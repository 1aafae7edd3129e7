# despachos/infrastructure/persistence/settlement_journal_adapter.py
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from despachos.domain.ports.settlement_journal import SettlementJournal
from .models import CLOSED, FAILED, RESERVED, LiquidacionEnviada

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemySettlementJournal(SettlementJournal):
    """
    Bitácora de cierres en base de datos. Cada cambio se confirma de
    inmediato para que otra sesión vea la reserva antes de enviar su cierre.
    Una reserva que no se confirmó ni liberó dentro del plazo se considera
    abandonada (el proceso que la tomó murió) y puede volver a tomarse.
    """

    def __init__(
        self,
        db: Session,
        reservation_timeout: Optional[timedelta] = None,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.db = db
        self.reservation_timeout = reservation_timeout or timedelta(seconds=config.SETTLEMENT_RESERVATION_TIMEOUT)
        self.clock = clock

    def _find(self, load_id: str) -> Optional[LiquidacionEnviada]:
        return self.db.query(LiquidacionEnviada).filter(LiquidacionEnviada.id_despacho == load_id).first()

    def _is_stale(self, record: LiquidacionEnviada) -> bool:
        reserved_at = record.reservado_en
        if reserved_at is None:
            return True
        # SQLite devuelve fechas sin zona; se guardan siempre en UTC
        if reserved_at.tzinfo is None:
            reserved_at = reserved_at.replace(tzinfo=timezone.utc)
        return self.clock() - reserved_at > self.reservation_timeout

    def reserve(self, load_id: str, seller_id: Optional[str], payment_amount: Decimal) -> bool:
        now = self.clock()
        record = self._find(load_id)
        if record is not None:
            if record.estado == CLOSED:
                logger.warning(f"[{load_id}] Cierre ya registrado (estado: {record.estado}).")
                return False
            if record.estado == RESERVED:
                if not self._is_stale(record):
                    logger.warning(f"[{load_id}] Cierre ya registrado (estado: {record.estado}).")
                    return False
                logger.warning(f"[{load_id}] Reserva abandonada desde {record.reservado_en}; se vuelve a tomar.")
            # Reintento tras un fallo anterior o una reserva abandonada
            record.estado = RESERVED
            record.id_heladero = seller_id
            record.monto_pagado = payment_amount
            record.ultimo_error = None
            record.reservado_en = now
        else:
            self.db.add(LiquidacionEnviada(
                id_despacho=load_id,
                id_heladero=seller_id,
                monto_pagado=payment_amount,
                estado=RESERVED,
                reservado_en=now,
            ))
        try:
            self.db.commit()
        except IntegrityError:
            # Otra sesión reservó el mismo despacho entre la lectura y el insert
            self.db.rollback()
            logger.warning(f"[{load_id}] Reserva concurrente detectada.")
            return False
        return True

    def confirm(self, load_id: str) -> None:
        record = self._find(load_id)
        if record is None:
            raise ValueError(f"No existe reserva para el despacho {load_id}")
        record.estado = CLOSED
        record.cerrado_en = self.clock()
        self.db.commit()

    def release(self, load_id: str, error: Optional[str] = None) -> None:
        record = self._find(load_id)
        if record is None:
            return
        record.estado = FAILED
        record.ultimo_error = error
        self.db.commit()

    def is_closed(self, load_id: str) -> bool:
        record = self._find(load_id)
        return record is not None and record.estado == CLOSED
