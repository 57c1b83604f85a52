"""
Modelo de Cliente
El alta y edición de clientes vive fuera de este servicio; las reservas
solo validan que el cliente exista.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Index
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime


class Cliente(Base):
    __tablename__ = "clientes"
    __table_args__ = (
        Index('idx_cliente_email', 'email'),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Información personal
    nombre = Column(String(60), nullable=False)
    apellido = Column(String(60), nullable=False)
    documento = Column(String(40), nullable=True)

    # Contacto
    email = Column(String(100), nullable=True)
    telefono = Column(String(30), nullable=True)

    # Control
    activo = Column(Boolean, default=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    reservas = relationship("Reserva", back_populates="cliente")

    def __repr__(self):
        return f"<Cliente(id={self.id}, nombre='{self.nombre} {self.apellido}')>"
