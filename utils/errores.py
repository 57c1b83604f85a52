"""
Errores de dominio del servicio de reservas
Cada error lleva el código HTTP con el que se reporta al cliente.
"""
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Error operacional con código de estado HTTP"""

    status_code = 500

    def __init__(self, mensaje: str, status_code: Optional[int] = None):
        super().__init__(mensaje)
        self.mensaje = mensaje
        if status_code is not None:
            self.status_code = status_code

    def extras(self) -> Dict[str, Any]:
        """Campos adicionales que se agregan al cuerpo de la respuesta"""
        return {}


class ValidacionError(AppError):
    status_code = 400

    def __init__(self, mensaje: str, requeridos: Optional[List[str]] = None):
        super().__init__(mensaje)
        self.requeridos = requeridos

    def extras(self) -> Dict[str, Any]:
        if self.requeridos:
            return {"requeridos": self.requeridos}
        return {}


class NoEncontradoError(AppError):
    status_code = 404


class ConflictoReservaError(AppError):
    """El departamento ya tiene reservas activas que se superponen con el rango pedido"""

    status_code = 400

    def __init__(self, conflictos: list, mensaje: str = "El departamento no está disponible en esas fechas"):
        # Import diferido: schemas depende de models y no al revés
        from schemas.reservas import ReservaRead

        super().__init__(mensaje)
        self.conflictos = conflictos
        self.puede_forzar = True
        # Se serializa ya: la sesión se cierra antes de que corra el handler
        self.conflictos_serializados = [
            ReservaRead.model_validate(r).model_dump(mode="json", by_alias=True)
            for r in conflictos
        ]

    def extras(self) -> Dict[str, Any]:
        return {
            "conflictos": self.conflictos_serializados,
            "puedeForzar": self.puede_forzar,
        }
