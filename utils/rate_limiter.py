"""
Rate Limiting Middleware
Protección contra abuso de la API de reservas
"""
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from config import RATE_LIMIT_DEFAULT, REDIS_URL

# Configurar limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=REDIS_URL,  # Usar Redis en producción
    strategy="fixed-window"
)


def setup_rate_limiting(app):
    """Configurar rate limiting en la aplicación FastAPI"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    # Aplica default_limits a todas las rutas
    app.add_middleware(SlowAPIMiddleware)

    return limiter
