# despachos/infrastructure/persistence/models.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Numeric, String, Text

from .database import Base

RESERVED = "closing"
CLOSED = "closed"
FAILED = "failed"


class LiquidacionEnviada(Base):
    """Un cierre de liquidación enviado (o en envío) al backend."""
    __tablename__ = "liquidaciones_enviadas"

    id_despacho = Column(String(64), primary_key=True)
    id_heladero = Column(String(64), nullable=True)
    monto_pagado = Column(Numeric(12, 2), nullable=False, default=0)
    estado = Column(String(16), nullable=False, default=RESERVED)
    ultimo_error = Column(Text, nullable=True)
    reservado_en = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    cerrado_en = Column(DateTime(timezone=True), nullable=True)
