from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, condecimal, constr, field_validator, model_validator, ConfigDict
from dateutil import parser

from models.reserva import EstadoReservaEnum


def _parsear_fecha(valor):
    """Acepta 'YYYY-MM-DD' o ISO 8601 completo"""
    if isinstance(valor, str):
        try:
            return parser.isoparse(valor)
        except ValueError:
            raise ValueError(f"Fecha inválida: {valor}")
    return valor


# ===== LECTURA =====

class HistorialReservaRead(BaseModel):
    id: int
    estado_anterior: Optional[str] = Field(None, alias="estadoAnterior")
    estado_nuevo: str = Field(..., alias="estadoNuevo")
    usuario: str
    fecha: datetime
    motivo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ReservaRead(BaseModel):
    id: int
    departamento_id: int = Field(..., alias="departamentoId")
    cliente_id: int = Field(..., alias="clienteId")
    fecha_inicio: datetime = Field(..., alias="fechaInicio")
    fecha_fin: datetime = Field(..., alias="fechaFin")
    estado: str
    monto: condecimal(max_digits=12, decimal_places=2)
    metodo_pago: Optional[str] = Field(None, alias="metodoPago")
    pagado: bool = False
    fecha_pago: Optional[datetime] = Field(None, alias="fechaPago")
    check_in: Optional[datetime] = Field(None, alias="checkIn")
    check_out: Optional[datetime] = Field(None, alias="checkOut")
    notas_check_in: Optional[str] = Field(None, alias="notasCheckIn")
    notas_check_out: Optional[str] = Field(None, alias="notasCheckOut")
    creado_en: Optional[datetime] = Field(None, alias="creadoEn")
    actualizado_en: Optional[datetime] = Field(None, alias="actualizadoEn")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TareaLimpiezaRead(BaseModel):
    id: int
    departamento_id: int = Field(..., alias="departamentoId")
    reserva_id: Optional[int] = Field(None, alias="reservaId")
    tipo: str
    estado: str
    prioridad: str
    fecha_programada: Optional[datetime] = Field(None, alias="fechaProgramada")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# ===== RESPUESTAS =====

class ReservaRespuesta(BaseModel):
    mensaje: str
    reserva: ReservaRead


class ReservaListaRespuesta(BaseModel):
    mensaje: str
    total: int
    reservas: List[ReservaRead]


class DisponibilidadRespuesta(BaseModel):
    disponible: bool
    mensaje: str
    conflictos: List[ReservaRead] = Field(default_factory=list)


class CheckOutRespuesta(BaseModel):
    mensaje: str
    reserva: ReservaRead
    tarea_limpieza: Optional[TareaLimpiezaRead] = Field(None, alias="tareaLimpieza")

    model_config = ConfigDict(populate_by_name=True)


# ===== ESCRITURA =====

class ReservaCreate(BaseModel):
    departamento_id: int = Field(..., gt=0, alias="departamentoId")
    cliente_id: int = Field(..., gt=0, alias="clienteId")
    fecha_inicio: datetime = Field(..., alias="fechaInicio")
    fecha_fin: datetime = Field(..., alias="fechaFin")
    monto: condecimal(gt=0, max_digits=12, decimal_places=2)
    metodo_pago: Optional[constr(strip_whitespace=True, max_length=50)] = Field(None, alias="metodoPago")
    estado: Optional[EstadoReservaEnum] = None
    forzar: bool = False

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("fecha_inicio", "fecha_fin", mode="before")
    @classmethod
    def parsear_fechas(cls, valor):
        return _parsear_fecha(valor)


class ReservaUpdate(BaseModel):
    departamento_id: Optional[int] = Field(None, gt=0, alias="departamentoId")
    cliente_id: Optional[int] = Field(None, gt=0, alias="clienteId")
    fecha_inicio: Optional[datetime] = Field(None, alias="fechaInicio")
    fecha_fin: Optional[datetime] = Field(None, alias="fechaFin")
    monto: Optional[condecimal(gt=0, max_digits=12, decimal_places=2)] = None
    metodo_pago: Optional[constr(strip_whitespace=True, max_length=50)] = Field(None, alias="metodoPago")
    estado: Optional[EstadoReservaEnum] = None
    notas_check_in: Optional[str] = Field(None, alias="notasCheckIn")
    notas_check_out: Optional[str] = Field(None, alias="notasCheckOut")
    forzar: bool = False

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("fecha_inicio", "fecha_fin", mode="before")
    @classmethod
    def parsear_fechas(cls, valor):
        return _parsear_fecha(valor)

    @field_validator("departamento_id", "cliente_id", "fecha_inicio", "fecha_fin", "monto", mode="before")
    @classmethod
    def rechazar_nulos(cls, valor):
        # Son columnas NOT NULL: se pueden omitir pero no vaciar
        if valor is None:
            raise ValueError("El campo no puede ser null")
        return valor

    @model_validator(mode="before")
    def validar_datos(cls, data):
        if isinstance(data, dict) and set(data) - {"forzar"}:
            return data
        raise ValueError("Se requiere al menos un campo para actualizar")


class CheckInRequest(BaseModel):
    notas: Optional[str] = Field(None, alias="notasCheckIn")
    usuario: constr(strip_whitespace=True, min_length=1, max_length=50) = "admin"

    model_config = ConfigDict(populate_by_name=True)


class CheckOutRequest(BaseModel):
    notas: Optional[str] = Field(None, alias="notasCheckOut")
    usuario: constr(strip_whitespace=True, min_length=1, max_length=50) = "admin"

    model_config = ConfigDict(populate_by_name=True)


class PagoRequest(BaseModel):
    metodo_pago: Optional[constr(strip_whitespace=True, max_length=50)] = Field(None, alias="metodoPago")
    usuario: constr(strip_whitespace=True, min_length=1, max_length=50) = "admin"

    model_config = ConfigDict(populate_by_name=True)


class CancelacionRequest(BaseModel):
    motivo: Optional[str] = None
    usuario: constr(strip_whitespace=True, min_length=1, max_length=50) = "admin"
