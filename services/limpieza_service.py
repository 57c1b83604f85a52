from typing import Optional

from sqlalchemy.orm import Session

from models.limpieza import TareaLimpieza
from utils.logging_utils import log_event
from utils.timezone import ahora


def crear_tarea_automatica(db: Session, departamento_id: int, reserva_id: Optional[int] = None) -> TareaLimpieza:
    """
    Genera una tarea de limpieza de tipo 'checkout' para el departamento.
    Si ya hay una tarea pendiente de checkout para la misma reserva, la devuelve
    sin crear otra.

    Args:
        db: Sesión de base de datos.
        departamento_id: Departamento que se liberó.
        reserva_id: Reserva cuyo check-out generó la tarea.

    Returns:
        La tarea creada (o la existente).
    """
    if reserva_id is not None:
        existente = db.query(TareaLimpieza).filter(
            TareaLimpieza.reserva_id == reserva_id,
            TareaLimpieza.tipo == "checkout",
            TareaLimpieza.estado == "pendiente",
        ).first()
        if existente:
            return existente

    tarea = TareaLimpieza(
        departamento_id=departamento_id,
        reserva_id=reserva_id,
        tipo="checkout",
        estado="pendiente",
        prioridad="alta",
        fecha_programada=ahora(),  # La limpieza de salida es para HOY
        notas="Tarea generada automáticamente en el check-out",
    )
    db.add(tarea)
    # Transacción propia: el check-out ya quedó confirmado antes de llegar acá
    db.commit()
    db.refresh(tarea)

    log_event("limpieza", "sistema", "Crear tarea automatica", f"departamento_id={departamento_id} tarea_id={tarea.id}")
    return tarea
