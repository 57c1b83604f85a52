"""
Servicios de negocio para reservas de departamentos
"""

from .disponibilidad_service import (
    ResultadoDisponibilidad,
    validar_rango,
    verificar_solapamiento,
)
from .reserva_service import ReservaService
from .limpieza_service import crear_tarea_automatica

__all__ = [
    "ResultadoDisponibilidad",
    "validar_rango",
    "verificar_solapamiento",
    "ReservaService",
    "crear_tarea_automatica",
]
