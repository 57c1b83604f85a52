"""
Archivo de inicialización del paquete models.
Expone todas las clases de los diferentes archivos para que
SQLAlchemy (Base.metadata) las detecte al importar 'models'.
"""

# 1. Colaboradores externos (edificios, departamentos, clientes)
from .edificio import Edificio
from .departamento import Departamento, EstadoDepartamentoEnum
from .cliente import Cliente

# 2. Reservas e historial de estados
from .reserva import Reserva, HistorialReserva, EstadoReservaEnum, ESTADOS_TERMINALES

# 3. Limpieza (tareas creadas en el check-out)
from .limpieza import TareaLimpieza

__all__ = [
    "Edificio", "Departamento", "EstadoDepartamentoEnum", "Cliente",
    "Reserva", "HistorialReserva", "EstadoReservaEnum", "ESTADOS_TERMINALES",
    "TareaLimpieza",
]
