from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from database.conexion import Base


class TareaLimpieza(Base):
    __tablename__ = "tareas_limpieza"
    __table_args__ = (
        Index('idx_limpieza_departamento', 'departamento_id'),
        Index('idx_limpieza_estado', 'estado'),
    )

    id = Column(Integer, primary_key=True, index=True)
    departamento_id = Column(Integer, ForeignKey("departamentos.id"), nullable=False)
    reserva_id = Column(Integer, ForeignKey("reservas.id"), nullable=True)

    tipo = Column(String(20), nullable=False, default="checkout")
    estado = Column(String(20), nullable=False, default="pendiente")  # pendiente, en_curso, finalizada
    prioridad = Column(String(10), nullable=False, default="alta")  # alta, media, baja
    asignado_a = Column(String(100), nullable=True)
    notas = Column(Text, nullable=True)
    fecha_programada = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    departamento = relationship("Departamento", back_populates="tareas_limpieza")
