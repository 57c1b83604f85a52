from datetime import timedelta
from typing import List, Optional

from dateutil import parser
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from config import DIAS_PROXIMAS
from database import conexion
from models.reserva import Reserva, HistorialReserva, EstadoReservaEnum
from schemas.reservas import (
    CancelacionRequest,
    CheckInRequest,
    CheckOutRequest,
    CheckOutRespuesta,
    DisponibilidadRespuesta,
    HistorialReservaRead,
    PagoRequest,
    ReservaCreate,
    ReservaListaRespuesta,
    ReservaRead,
    ReservaRespuesta,
    ReservaUpdate,
    TareaLimpiezaRead,
)
from services.disponibilidad_service import verificar_solapamiento
from services.reserva_service import ReservaService
from utils.errores import ValidacionError
from utils.logging_utils import log_event
from utils.timezone import a_hora_local, ahora, dia_calendario

router = APIRouter(prefix="/reservas", tags=["Reservas"])


def _parsear_fecha_query(valor: str, nombre: str):
    try:
        return a_hora_local(parser.isoparse(valor))
    except ValueError:
        raise ValidacionError(f"Fecha inválida en {nombre}: {valor}")


def _serializar(reserva: Reserva) -> ReservaRead:
    return ReservaRead.model_validate(reserva)


@router.get("", response_model=ReservaListaRespuesta)
def listar_reservas(
    estado: Optional[str] = Query(None, min_length=1, max_length=20),
    fecha: Optional[str] = Query(None, description="Día de inicio: YYYY-MM-DD"),
    db: Session = Depends(conexion.get_db),
):
    query = db.query(Reserva)
    if estado:
        if estado not in {e.value for e in EstadoReservaEnum}:
            valores_validos = ", ".join(e.value for e in EstadoReservaEnum)
            raise ValidacionError(f"Estado inválido. Usa: {valores_validos}")
        query = query.filter(Reserva.estado == estado)
    if fecha:
        dia = _parsear_fecha_query(fecha, "fecha").replace(hour=0, minute=0, second=0, microsecond=0)
        query = query.filter(Reserva.fecha_inicio >= dia, Reserva.fecha_inicio < dia + timedelta(days=1))
    reservas = query.order_by(Reserva.fecha_inicio.desc()).all()

    log_event("reservas", "admin", "Listar reservas", f"total={len(reservas)}")
    return {
        "mensaje": "Reservas obtenidas exitosamente",
        "total": len(reservas),
        "reservas": [_serializar(r) for r in reservas],
    }


@router.get("/proximas", response_model=ReservaListaRespuesta)
def listar_reservas_proximas(db: Session = Depends(conexion.get_db)):
    hoy = ahora()
    limite = hoy + timedelta(days=DIAS_PROXIMAS)
    reservas = (
        db.query(Reserva)
        .filter(
            Reserva.fecha_inicio >= hoy,
            Reserva.fecha_inicio <= limite,
            Reserva.estado.in_([EstadoReservaEnum.PENDIENTE.value, EstadoReservaEnum.CONFIRMADA.value]),
        )
        .order_by(Reserva.fecha_inicio.asc())
        .all()
    )
    log_event("reservas", "admin", "Listar reservas proximas", f"total={len(reservas)}")
    return {
        "mensaje": "Reservas próximas",
        "total": len(reservas),
        "reservas": [_serializar(r) for r in reservas],
    }


@router.get("/disponibilidad", response_model=DisponibilidadRespuesta)
def verificar_disponibilidad(
    departamento_id: int = Query(..., gt=0, alias="departamentoId"),
    fecha_inicio: str = Query(..., alias="fechaInicio", description="ISO date: YYYY-MM-DD"),
    fecha_fin: str = Query(..., alias="fechaFin", description="ISO date: YYYY-MM-DD"),
    db: Session = Depends(conexion.get_db),
):
    inicio = _parsear_fecha_query(fecha_inicio, "fechaInicio")
    fin = _parsear_fecha_query(fecha_fin, "fechaFin")

    resultado = verificar_solapamiento(db, departamento_id, inicio, fin)

    log_event(
        "disponibilidad",
        "admin",
        "Consulta de disponibilidad",
        f"departamento_id={departamento_id} desde={dia_calendario(inicio)} hasta={dia_calendario(fin)} "
        f"disponible={resultado.disponible}",
    )
    return {
        "disponible": resultado.disponible,
        "mensaje": (
            "El departamento está disponible"
            if resultado.disponible
            else "El departamento no está disponible en esas fechas"
        ),
        "conflictos": [_serializar(r) for r in resultado.conflictos],
    }


@router.get("/{reserva_id}", response_model=ReservaRead)
def obtener_reserva(
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    reserva = ReservaService.obtener_reserva(db, reserva_id)
    log_event("reservas", "admin", "Obtener reserva", f"id={reserva_id}")
    return _serializar(reserva)


@router.get("/{reserva_id}/historial", response_model=List[HistorialReservaRead])
def obtener_historial_reserva(
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    ReservaService.obtener_reserva(db, reserva_id)
    historial = (
        db.query(HistorialReserva)
        .filter(HistorialReserva.reserva_id == reserva_id)
        .order_by(HistorialReserva.fecha.asc(), HistorialReserva.id.asc())
        .all()
    )
    log_event("reservas", "admin", "Obtener historial reserva", f"id={reserva_id} total={len(historial)}")
    return [HistorialReservaRead.model_validate(h) for h in historial]


@router.post("", response_model=ReservaRespuesta, status_code=status.HTTP_201_CREATED)
def crear_reserva(reserva: ReservaCreate, db: Session = Depends(conexion.get_db)):
    nueva = ReservaService.crear_reserva(db, reserva)
    return {"mensaje": "Reserva creada exitosamente", "reserva": _serializar(nueva)}


@router.put("/{reserva_id}", response_model=ReservaRespuesta)
def actualizar_reserva(
    cambios: ReservaUpdate,
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    reserva = ReservaService.actualizar_reserva(db, reserva_id, cambios)
    return {"mensaje": "Reserva actualizada exitosamente", "reserva": _serializar(reserva)}


@router.post("/{reserva_id}/check-in", response_model=ReservaRespuesta)
def hacer_check_in(
    solicitud: Optional[CheckInRequest] = None,
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    solicitud = solicitud or CheckInRequest()
    reserva = ReservaService.hacer_check_in(db, reserva_id, solicitud.notas, solicitud.usuario)
    return {"mensaje": "Check-in realizado exitosamente", "reserva": _serializar(reserva)}


@router.post("/{reserva_id}/check-out", response_model=CheckOutRespuesta)
def hacer_check_out(
    solicitud: Optional[CheckOutRequest] = None,
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    solicitud = solicitud or CheckOutRequest()
    reserva, tarea = ReservaService.hacer_check_out(db, reserva_id, solicitud.notas, solicitud.usuario)
    mensaje = "Check-out realizado exitosamente."
    mensaje += " Tarea de limpieza creada." if tarea else " No se pudo crear la tarea de limpieza."
    return {
        "mensaje": mensaje,
        "reserva": _serializar(reserva),
        "tareaLimpieza": TareaLimpiezaRead.model_validate(tarea) if tarea else None,
    }


@router.post("/{reserva_id}/pago", response_model=ReservaRespuesta)
def registrar_pago(
    pago: PagoRequest,
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    reserva = ReservaService.registrar_pago(db, reserva_id, pago.metodo_pago, pago.usuario)
    return {"mensaje": "Pago registrado exitosamente", "reserva": _serializar(reserva)}


@router.post("/{reserva_id}/cancelar", response_model=ReservaRespuesta)
def cancelar_reserva(
    solicitud: Optional[CancelacionRequest] = None,
    reserva_id: int = Path(..., gt=0),
    db: Session = Depends(conexion.get_db),
):
    solicitud = solicitud or CancelacionRequest()
    reserva = ReservaService.cancelar_reserva(db, reserva_id, solicitud.motivo, solicitud.usuario)
    return {"mensaje": "Reserva cancelada exitosamente", "reserva": _serializar(reserva)}
