"""
Resolución de conflictos de disponibilidad por departamento

La superposición se evalúa por DÍA calendario, ignorando la hora:
el día de salida de una reserva es exclusivo, así que otra reserva puede
empezar ese mismo día (turnover en el día).
"""

from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from models.reserva import Reserva, EstadoReservaEnum
from utils.errores import ValidacionError
from utils.logging_utils import log_event
from utils.timezone import a_hora_local, dia_calendario


class ResultadoDisponibilidad:
    """Resultado de una verificación de disponibilidad"""

    def __init__(self, conflictos: List[Reserva]):
        self.conflictos = conflictos

    @property
    def disponible(self) -> bool:
        return not self.conflictos

    def __repr__(self):
        return f"<ResultadoDisponibilidad(disponible={self.disponible}, conflictos={len(self.conflictos)})>"


def validar_rango(fecha_inicio: datetime, fecha_fin: datetime) -> None:
    """
    Rechaza rangos vacíos o invertidos antes de evaluar conflictos.

    Un rango cuyo día de salida es igual o anterior al de entrada no ocupa
    ningún día, y no debe confundirse con "sin conflicto".
    """
    if fecha_inicio is None or fecha_fin is None:
        raise ValidacionError("Se requieren fechaInicio y fechaFin", requeridos=["fechaInicio", "fechaFin"])
    if dia_calendario(fecha_fin) <= dia_calendario(fecha_inicio):
        raise ValidacionError("La fecha de fin debe ser posterior a la fecha de inicio")


def dias_se_superponen(
    inicio_dia: date,
    fin_dia: date,
    existente_inicio_dia: date,
    existente_fin_dia: date,
) -> bool:
    # Intervalos semiabiertos [inicio, fin)
    return inicio_dia < existente_fin_dia and fin_dia > existente_inicio_dia


def filtrar_conflictos(
    candidatas: Iterable[Reserva],
    fecha_inicio: datetime,
    fecha_fin: datetime,
) -> List[Reserva]:
    """Aplica la regla por día sobre reservas ya traídas de la base"""
    inicio_dia = dia_calendario(fecha_inicio)
    fin_dia = dia_calendario(fecha_fin)
    return [
        reserva
        for reserva in candidatas
        if dias_se_superponen(
            inicio_dia,
            fin_dia,
            dia_calendario(reserva.fecha_inicio),
            dia_calendario(reserva.fecha_fin),
        )
    ]


def buscar_reservas_departamento(
    db: Session,
    departamento_id: int,
    fecha_inicio: datetime,
    fecha_fin: datetime,
    excluir_canceladas: bool = True,
    reserva_id_excluir: Optional[int] = None,
) -> List[Reserva]:
    """Prefiltro grueso por datetime: existente.inicio <= fin AND existente.fin >= inicio"""
    query = db.query(Reserva).filter(
        Reserva.departamento_id == departamento_id,
        Reserva.fecha_inicio <= fecha_fin,
        Reserva.fecha_fin >= fecha_inicio,
    )
    if excluir_canceladas:
        query = query.filter(Reserva.estado != EstadoReservaEnum.CANCELADA.value)
    if reserva_id_excluir:
        query = query.filter(Reserva.id != reserva_id_excluir)
    return query.order_by(Reserva.fecha_inicio.asc()).all()


def verificar_solapamiento(
    db: Session,
    departamento_id: int,
    fecha_inicio: datetime,
    fecha_fin: datetime,
    excluir_canceladas: bool = True,
    reserva_id_excluir: Optional[int] = None,
) -> ResultadoDisponibilidad:
    """
    Determina si el rango pedido choca con alguna reserva del departamento.

    Args:
        db: Sesión de base de datos.
        departamento_id: Departamento a consultar.
        fecha_inicio: Entrada pedida (inclusiva).
        fecha_fin: Salida pedida (día exclusivo).
        excluir_canceladas: Ignorar reservas canceladas (por defecto sí).
        reserva_id_excluir: Reserva a ignorar, para re-validar una reserva existente.

    Returns:
        ResultadoDisponibilidad con la lista de reservas en conflicto.
    """
    validar_rango(fecha_inicio, fecha_fin)
    fecha_inicio = a_hora_local(fecha_inicio)
    fecha_fin = a_hora_local(fecha_fin)

    candidatas = buscar_reservas_departamento(
        db,
        departamento_id,
        fecha_inicio,
        fecha_fin,
        excluir_canceladas=excluir_canceladas,
        reserva_id_excluir=reserva_id_excluir,
    )
    resultado = ResultadoDisponibilidad(filtrar_conflictos(candidatas, fecha_inicio, fecha_fin))

    if not resultado.disponible:
        log_event(
            "disponibilidad",
            "sistema",
            "Conflicto detectado",
            f"departamento_id={departamento_id} desde={fecha_inicio} hasta={fecha_fin} "
            f"conflictos={[r.id for r in resultado.conflictos]}",
        )
    return resultado
