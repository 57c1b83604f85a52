from datetime import date, datetime
import pytz

from config import HOTEL_TIMEZONE

HOTEL_TZ = pytz.timezone(HOTEL_TIMEZONE)


def get_hotel_now() -> datetime:
    """Returns current time in Hotel Timezone"""
    return datetime.now(HOTEL_TZ)


def to_hotel_time(dt: datetime) -> datetime:
    """Converts a datetime to Hotel Timezone"""
    if dt.tzinfo is None:
        # Naive = hora local del hotel
        return HOTEL_TZ.localize(dt)
    return dt.astimezone(HOTEL_TZ)


def a_hora_local(dt: datetime) -> datetime:
    """Naive local datetime; naive inputs are returned unchanged"""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(HOTEL_TZ).replace(tzinfo=None)


def ahora() -> datetime:
    """Naive local timestamp, the format stored in DateTime columns"""
    return get_hotel_now().replace(tzinfo=None)


def dia_calendario(valor) -> date:
    """
    Día calendario de una fecha, sin la hora.
    Las fechas con zona horaria se pasan primero a la hora del hotel;
    las naive ya se consideran locales.
    """
    if isinstance(valor, datetime):
        return to_hotel_time(valor).date()
    if isinstance(valor, date):
        return valor
    raise TypeError(f"Se esperaba date o datetime, se recibió {type(valor).__name__}")
