from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import CORS_ALLOW_ALL, CORS_ORIGINS, DEBUG, ENVIRONMENT
from database.conexion import Base, engine
import models  # asegura que todos los modelos estén registrados
from endpoints import reservas
from utils.errores import AppError
from utils.logging_utils import log_event, log_exception
from utils.rate_limiter import setup_rate_limiting

try:
    Base.metadata.create_all(bind=engine)
    log_event("sistema", "sistema", "Tablas creadas (o ya existian)")
except SQLAlchemyError as e:
    log_exception("sistema", "sistema", "Error creando tablas", f"error={e}")

app = FastAPI(title="Reservas de departamentos", debug=DEBUG)
log_event("sistema", "sistema", "Inicio de la API", f"environment={ENVIRONMENT} debug={DEBUG}")

if CORS_ALLOW_ALL:
    # credentials no se puede combinar con origin "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

setup_rate_limiting(app)


def _respuesta_error(status_code: int, mensaje: str, **extras) -> JSONResponse:
    contenido = {"error": mensaje, "timestamp": datetime.utcnow().isoformat()}
    contenido.update(extras)
    return JSONResponse(status_code=status_code, content=contenido)


@app.exception_handler(AppError)
async def manejar_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        log_exception("errores", "sistema", "Error de aplicacion", f"path={request.url.path} error={exc.mensaje}")
    return _respuesta_error(exc.status_code, exc.mensaje, **exc.extras())


@app.exception_handler(RequestValidationError)
async def manejar_error_validacion(request: Request, exc: RequestValidationError):
    return _respuesta_error(
        status.HTTP_400_BAD_REQUEST,
        "Datos inválidos",
        detalles=jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
    )


@app.exception_handler(SQLAlchemyError)
async def manejar_error_base_datos(request: Request, exc: SQLAlchemyError):
    log_exception("errores", "sistema", "Error de base de datos", f"path={request.url.path}")
    return _respuesta_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error de base de datos")


@app.exception_handler(Exception)
async def manejar_error_generico(request: Request, exc: Exception):
    log_exception("errores", "sistema", "Error inesperado", f"path={request.url.path}")
    return _respuesta_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")


app.include_router(reservas.router)


@app.get("/")
def read_root():
    return {"message": "API de reservas de departamentos"}
