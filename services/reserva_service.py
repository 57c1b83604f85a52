"""
Servicio de ciclo de vida de reservas
Contiene la lógica de negocio para:
- Alta de reservas (con verificación de disponibilidad o forzada)
- Check-in y check-out
- Registro de pago
- Cancelación
- Actualización genérica

Cada operación escribe la reserva y el estado del departamento en una sola
transacción.
"""

from typing import Optional, Tuple

from sqlalchemy.orm import Session

from database.conexion import tomar_lock_escritura
from models.cliente import Cliente
from models.departamento import Departamento, EstadoDepartamentoEnum
from models.limpieza import TareaLimpieza
from models.reserva import Reserva, HistorialReserva, EstadoReservaEnum, ESTADOS_TERMINALES
from schemas.reservas import ReservaCreate, ReservaUpdate
from services.disponibilidad_service import validar_rango, verificar_solapamiento
from services.limpieza_service import crear_tarea_automatica
from utils.errores import ConflictoReservaError, NoEncontradoError, ValidacionError
from utils.logging_utils import log_event, log_exception, log_warning
from utils.timezone import a_hora_local, ahora


class ReservaService:
    """Máquina de estados de la reserva y su efecto sobre el departamento"""

    # ===== HELPERS =====

    @staticmethod
    def obtener_reserva(db: Session, reserva_id: int) -> Reserva:
        reserva = db.query(Reserva).filter(Reserva.id == reserva_id).first()
        if not reserva:
            raise NoEncontradoError("Reserva no encontrada")
        return reserva

    @staticmethod
    def _obtener_departamento(db: Session, departamento_id: int, bloquear: bool = False) -> Departamento:
        query = db.query(Departamento).filter(Departamento.id == departamento_id)
        if bloquear:
            # Serializa check-and-insert por departamento (SELECT ... FOR UPDATE)
            tomar_lock_escritura(db)
            query = query.with_for_update()
        departamento = query.first()
        if not departamento:
            raise NoEncontradoError("Departamento no encontrado")
        return departamento

    @staticmethod
    def _validar_cliente(db: Session, cliente_id: int) -> Cliente:
        cliente = db.query(Cliente).filter(Cliente.id == cliente_id).first()
        if not cliente:
            raise NoEncontradoError("Cliente no encontrado")
        return cliente

    @staticmethod
    def _registrar_historial(
        db: Session,
        reserva: Reserva,
        estado_nuevo: str,
        usuario: str,
        estado_anterior: Optional[str] = None,
        motivo: Optional[str] = None,
    ) -> None:
        db.add(
            HistorialReserva(
                reserva=reserva,
                estado_anterior=estado_anterior,
                estado_nuevo=estado_nuevo,
                usuario=usuario,
                fecha=ahora(),
                motivo=motivo,
            )
        )

    @staticmethod
    def _cambiar_estado(db: Session, reserva: Reserva, nuevo: EstadoReservaEnum, usuario: str, motivo: Optional[str] = None) -> None:
        anterior = reserva.estado
        reserva.estado = nuevo.value
        ReservaService._registrar_historial(db, reserva, nuevo.value, usuario, estado_anterior=anterior, motivo=motivo)

    @staticmethod
    def _rechazar_conflictos(db: Session, resultado, forzar: bool, departamento_id: int, usuario: str) -> None:
        if resultado.disponible:
            return
        if not forzar:
            error = ConflictoReservaError(resultado.conflictos)
            db.rollback()
            raise error
        log_warning(
            "reservas",
            usuario,
            "Reserva forzada con conflictos",
            f"departamento_id={departamento_id} conflictos={[r.id for r in resultado.conflictos]}",
        )

    # ===== OPERACIONES =====

    @staticmethod
    def crear_reserva(db: Session, datos: ReservaCreate, usuario: str = "admin") -> Reserva:
        """
        Crea una reserva y deja el departamento en 'reservado'.

        La verificación de disponibilidad y el insert corren en la misma
        transacción con el departamento bloqueado. Si hay conflictos y no viene
        `forzar`, se rechaza con ConflictoReservaError.
        """
        validar_rango(datos.fecha_inicio, datos.fecha_fin)
        estado = datos.estado or EstadoReservaEnum.PENDIENTE
        if estado in ESTADOS_TERMINALES:
            raise ValidacionError(f"No se puede crear una reserva en estado '{estado.value}'")

        fecha_inicio = a_hora_local(datos.fecha_inicio)
        fecha_fin = a_hora_local(datos.fecha_fin)

        departamento = ReservaService._obtener_departamento(db, datos.departamento_id, bloquear=True)
        ReservaService._validar_cliente(db, datos.cliente_id)

        resultado = verificar_solapamiento(db, departamento.id, fecha_inicio, fecha_fin)
        ReservaService._rechazar_conflictos(db, resultado, datos.forzar, departamento.id, usuario)

        reserva = Reserva(
            departamento_id=departamento.id,
            cliente_id=datos.cliente_id,
            fecha_inicio=fecha_inicio,
            fecha_fin=fecha_fin,
            monto=datos.monto,
            metodo_pago=datos.metodo_pago or None,
            estado=estado.value,
        )
        db.add(reserva)
        departamento.estado = EstadoDepartamentoEnum.RESERVADO.value
        ReservaService._registrar_historial(
            db, reserva, estado.value, usuario, motivo="Reserva forzada" if not resultado.disponible else None
        )
        db.commit()
        db.refresh(reserva)

        log_event(
            "reservas",
            usuario,
            "Crear reserva",
            f"id={reserva.id} departamento_id={departamento.id} forzada={not resultado.disponible}",
        )
        return reserva

    @staticmethod
    def hacer_check_in(db: Session, reserva_id: int, notas: Optional[str] = None, usuario: str = "admin") -> Reserva:
        reserva = ReservaService.obtener_reserva(db, reserva_id)
        departamento = ReservaService._obtener_departamento(db, reserva.departamento_id)

        # Un check-in repetido pisa el timestamp anterior
        reserva.check_in = ahora()
        reserva.notas_check_in = notas or None
        ReservaService._cambiar_estado(db, reserva, EstadoReservaEnum.CONFIRMADA, usuario)

        departamento.estado = EstadoDepartamentoEnum.OCUPADO.value
        departamento.requiere_limpieza = False
        db.commit()
        db.refresh(reserva)

        log_event("checkin", usuario, "Check-in", f"reserva_id={reserva_id} departamento_id={departamento.id}")
        return reserva

    @staticmethod
    def hacer_check_out(
        db: Session, reserva_id: int, notas: Optional[str] = None, usuario: str = "admin"
    ) -> Tuple[Reserva, Optional[TareaLimpieza]]:
        """
        Cierra la reserva, libera el departamento y pide una tarea de limpieza.

        Returns:
            (reserva, tarea_limpieza): la tarea es None si su creación falló.
        """
        reserva = ReservaService.obtener_reserva(db, reserva_id)
        departamento = ReservaService._obtener_departamento(db, reserva.departamento_id)

        reserva.check_out = ahora()
        reserva.notas_check_out = notas or None
        ReservaService._cambiar_estado(db, reserva, EstadoReservaEnum.COMPLETADA, usuario)

        departamento.estado = EstadoDepartamentoEnum.DISPONIBLE.value
        departamento.requiere_limpieza = True
        db.commit()

        log_event("checkout", usuario, "Check-out", f"reserva_id={reserva_id} departamento_id={departamento.id}")

        tarea = None
        try:
            tarea = crear_tarea_automatica(db, departamento.id, reserva.id)
        except Exception as e:
            # La limpieza es best-effort: el check-out ya está confirmado
            db.rollback()
            log_exception(
                "limpieza",
                usuario,
                "Error creando tarea de limpieza",
                f"reserva_id={reserva_id} departamento_id={departamento.id} error={e}",
            )

        db.refresh(reserva)
        return reserva, tarea

    @staticmethod
    def registrar_pago(db: Session, reserva_id: int, metodo_pago: Optional[str], usuario: str = "admin") -> Reserva:
        if not metodo_pago:
            raise ValidacionError("Método de pago requerido", requeridos=["metodoPago"])

        reserva = ReservaService.obtener_reserva(db, reserva_id)
        reserva.pagado = True
        reserva.metodo_pago = metodo_pago
        reserva.fecha_pago = ahora()
        db.commit()
        db.refresh(reserva)

        log_event("pagos", usuario, "Registrar pago", f"reserva_id={reserva_id} metodo={metodo_pago}")
        return reserva

    @staticmethod
    def cancelar_reserva(db: Session, reserva_id: int, motivo: Optional[str] = None, usuario: str = "admin") -> Reserva:
        """
        Cancela una reserva no terminal y deja el departamento 'disponible'.

        No revisa si otra reserva activa sigue ocupando el departamento.
        """
        reserva = ReservaService.obtener_reserva(db, reserva_id)
        if reserva.es_terminal:
            raise ValidacionError(f"No se puede cancelar una reserva {reserva.estado}")
        departamento = ReservaService._obtener_departamento(db, reserva.departamento_id)

        motivo = motivo or "Cancelada"
        reserva.notas_check_out = motivo
        ReservaService._cambiar_estado(db, reserva, EstadoReservaEnum.CANCELADA, usuario, motivo=motivo)

        departamento.estado = EstadoDepartamentoEnum.DISPONIBLE.value
        db.commit()
        db.refresh(reserva)

        log_event("reservas", usuario, "Cancelar reserva", f"id={reserva_id} motivo={motivo}")
        return reserva

    @staticmethod
    def actualizar_reserva(db: Session, reserva_id: int, cambios: ReservaUpdate, usuario: str = "admin") -> Reserva:
        """
        Sobrescribe los campos enviados. No toca el estado del departamento.

        Si cambian las fechas o el departamento de una reserva no cancelada,
        se vuelve a verificar la disponibilidad (excluyendo la propia reserva);
        `forzar` permite guardar igual.
        """
        reserva = ReservaService.obtener_reserva(db, reserva_id)
        datos = cambios.model_dump(exclude_unset=True)
        forzar = datos.pop("forzar", False)

        if datos.get("cliente_id") is not None:
            ReservaService._validar_cliente(db, datos["cliente_id"])

        nuevo_estado = datos.pop("estado", None)
        cambia_ocupacion = any(campo in datos for campo in ("fecha_inicio", "fecha_fin", "departamento_id"))

        if cambia_ocupacion:
            departamento_id = datos.get("departamento_id") or reserva.departamento_id
            fecha_inicio = a_hora_local(datos.get("fecha_inicio") or reserva.fecha_inicio)
            fecha_fin = a_hora_local(datos.get("fecha_fin") or reserva.fecha_fin)
            validar_rango(fecha_inicio, fecha_fin)
            departamento = ReservaService._obtener_departamento(db, departamento_id, bloquear=True)

            estado_final = nuevo_estado.value if nuevo_estado else reserva.estado
            if estado_final != EstadoReservaEnum.CANCELADA.value:
                resultado = verificar_solapamiento(
                    db, departamento.id, fecha_inicio, fecha_fin, reserva_id_excluir=reserva.id
                )
                ReservaService._rechazar_conflictos(db, resultado, forzar, departamento.id, usuario)

            datos["departamento_id"] = departamento.id
            datos["fecha_inicio"] = fecha_inicio
            datos["fecha_fin"] = fecha_fin

        if nuevo_estado and nuevo_estado.value != reserva.estado:
            ReservaService._cambiar_estado(db, reserva, nuevo_estado, usuario, motivo="Actualización manual")

        for campo, valor in datos.items():
            setattr(reserva, campo, valor)
        db.commit()
        db.refresh(reserva)

        log_event("reservas", usuario, "Actualizar reserva", f"id={reserva_id} campos={sorted(datos)}")
        return reserva
