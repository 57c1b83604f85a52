"""
Modelo de Departamento (unidad alquilable)
El estado y el flag de limpieza son una proyección del estado de la reserva
que está ocupando la unidad; solo los modifica el servicio de reservas.
"""

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Boolean, Text, Index
)
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime
from enum import Enum


class EstadoDepartamentoEnum(str, Enum):
    """Estados operativos de un departamento"""
    DISPONIBLE = "disponible"
    RESERVADO = "reservado"
    OCUPADO = "ocupado"


class Departamento(Base):
    __tablename__ = "departamentos"
    __table_args__ = (
        Index('idx_departamento_edificio', 'edificio_id'),
        Index('idx_departamento_estado', 'estado'),
    )

    id = Column(Integer, primary_key=True, index=True)
    edificio_id = Column(Integer, ForeignKey("edificios.id"), nullable=False)
    numero = Column(String(20), nullable=False)
    piso = Column(Integer, nullable=True)
    estado = Column(String(20), nullable=False, default=EstadoDepartamentoEnum.DISPONIBLE.value)
    requiere_limpieza = Column(Boolean, nullable=False, default=False)
    observaciones = Column(Text, nullable=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    edificio = relationship("Edificio", back_populates="departamentos")
    reservas = relationship("Reserva", back_populates="departamento")
    tareas_limpieza = relationship("TareaLimpieza", back_populates="departamento")

    def __repr__(self):
        return f"<Departamento(id={self.id}, numero='{self.numero}', estado='{self.estado}')>"
