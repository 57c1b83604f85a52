"""
Modelos de Reserva
Incluye: estados tipados, datos de pago, check-in/check-out e historial de estados
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Boolean, Numeric, Text, Index
)
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from enum import Enum


# ========================================================================
# ENUMS
# ========================================================================

class EstadoReservaEnum(str, Enum):
    """Estados del ciclo de vida de una reserva"""
    PENDIENTE = "pendiente"
    CONFIRMADA = "confirmada"
    COMPLETADA = "completada"
    CANCELADA = "cancelada"


ESTADOS_TERMINALES = (EstadoReservaEnum.COMPLETADA, EstadoReservaEnum.CANCELADA)


# ----------- RESERVA -----------
class Reserva(Base):
    __tablename__ = "reservas"
    __table_args__ = (
        Index('idx_reserva_departamento', 'departamento_id'),
        Index('idx_reserva_cliente', 'cliente_id'),
        Index('idx_reserva_estado', 'estado'),
        Index('idx_reserva_fechas', 'departamento_id', 'fecha_inicio', 'fecha_fin'),
    )

    id = Column(Integer, primary_key=True, index=True)
    departamento_id = Column(Integer, ForeignKey("departamentos.id"), nullable=False)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=False)

    # Fechas: fecha_fin es el día de salida (exclusivo para disponibilidad)
    fecha_inicio = Column(DateTime, nullable=False)
    fecha_fin = Column(DateTime, nullable=False)

    estado = Column(String(20), nullable=False, default=EstadoReservaEnum.PENDIENTE.value)

    # Pago
    monto = Column(Numeric(12, 2), nullable=False)
    metodo_pago = Column(String(50), nullable=True)
    pagado = Column(Boolean, nullable=False, default=False)
    fecha_pago = Column(DateTime, nullable=True)

    # Operación
    check_in = Column(DateTime, nullable=True)
    check_out = Column(DateTime, nullable=True)
    notas_check_in = Column(Text, nullable=True)
    notas_check_out = Column(Text, nullable=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    departamento = relationship("Departamento", back_populates="reservas")
    cliente = relationship("Cliente", back_populates="reservas")
    historial = relationship(
        "HistorialReserva",
        back_populates="reserva",
        cascade="all, delete-orphan",
        order_by="HistorialReserva.fecha",
    )

    @property
    def es_terminal(self):
        return self.estado in {e.value for e in ESTADOS_TERMINALES}

    def __repr__(self):
        return f"<Reserva(id={self.id}, departamento_id={self.departamento_id}, estado='{self.estado}')>"


# ----------- HISTORIAL RESERVA -----------
class HistorialReserva(Base):
    __tablename__ = "historial_reservas"
    __table_args__ = (
        Index('idx_hist_resv_reserva', 'reserva_id'),
        Index('idx_hist_resv_fecha', 'fecha'),
    )

    id = Column(Integer, primary_key=True, index=True)
    reserva_id = Column(Integer, ForeignKey("reservas.id", ondelete="CASCADE"), nullable=False)

    # Estados
    estado_anterior = Column(String(20), nullable=True)
    estado_nuevo = Column(String(20), nullable=False)

    # Auditoría
    usuario = Column(String(50), nullable=False)
    fecha = Column(DateTime, default=datetime.utcnow)
    motivo = Column(Text, nullable=True)

    # Relaciones
    reserva = relationship("Reserva", back_populates="historial")

    def __repr__(self):
        return f"<HistorialReserva(reserva_id={self.reserva_id}, estado='{self.estado_nuevo}')>"
