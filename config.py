"""
Configuración general del servicio de reservas
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Base de datos
_DB_USER = os.getenv("DB_USER")
_DB_HOST = os.getenv("DB_HOST")

if _DB_USER and _DB_HOST:
    _DEFAULT_DATABASE_URL = (
        f"postgresql://{_DB_USER}:{os.getenv('DB_PASSWORD', '')}@{_DB_HOST}:"
        f"{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME', 'reservas')}"
    )
else:
    _DEFAULT_DATABASE_URL = "sqlite:///./reservas.db"

DATABASE_URL = os.getenv("DATABASE_URL", _DEFAULT_DATABASE_URL)

# Entorno: development, production, test
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

# Solo en modo debug se devuelven trazas de errores inesperados
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# CORS
CORS_ALLOW_ALL = os.getenv("CORS_ALLOW_ALL", "false").lower() == "true"
CORS_ORIGINS = [
    origen.strip()
    for origen in os.getenv("CORS_ORIGINS", "http://localhost:8080,http://127.0.0.1:8080").split(",")
    if origen.strip()
]

# Rate limiting
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
REDIS_URL = os.getenv("REDIS_URL", "memory://")

# Zona horaria usada para normalizar fechas a día calendario
HOTEL_TIMEZONE = os.getenv("HOTEL_TIMEZONE", "America/Argentina/Buenos_Aires")

# Logs
LOG_FILE = os.getenv("LOG_FILE", "reservas_logs.txt")

# Ventana (en días) para el listado de reservas próximas
DIAS_PROXIMAS = int(os.getenv("DIAS_PROXIMAS", "7"))
