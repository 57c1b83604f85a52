"""
Modelo de Edificio
Los edificios se administran fuera del motor de reservas; acá solo se
persiste lo necesario para agrupar departamentos.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Index
from sqlalchemy.orm import relationship
from database.conexion import Base
from datetime import datetime


class Edificio(Base):
    __tablename__ = "edificios"
    __table_args__ = (
        Index('idx_edificio_nombre', 'nombre'),
    )

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(120), nullable=False)
    direccion = Column(String(200), nullable=True)
    ciudad = Column(String(100), nullable=True)

    # Control
    activo = Column(Boolean, default=True)

    # Auditoría
    creado_en = Column(DateTime, default=datetime.utcnow)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relaciones
    departamentos = relationship("Departamento", back_populates="edificio")

    def __repr__(self):
        return f"<Edificio(id={self.id}, nombre='{self.nombre}')>"
