"""
Configuración de pytest y fixtures.
Los tests usan una base SQLite aislada, nunca la base configurada en .env.
"""

import os
import sys
import tempfile
from datetime import datetime

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# La base de test se define ANTES de importar la app
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), "reservas_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_DEFAULT"] = "10000/minute"
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "reservas_test_logs.txt")

from fastapi.testclient import TestClient  # noqa: E402

from database.conexion import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from models.cliente import Cliente  # noqa: E402
from models.departamento import Departamento  # noqa: E402
from models.edificio import Edificio  # noqa: E402
from models.reserva import Reserva  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def limpiar_base_test():
    yield
    engine.dispose()
    if os.path.exists(TEST_DB_PATH):
        try:
            os.remove(TEST_DB_PATH)
        except PermissionError:
            pass  # Windows puede tener el archivo bloqueado


@pytest.fixture
def db():
    """Sesión sobre tablas recién creadas"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def edificio(db):
    edificio = Edificio(nombre="Torre Centro", direccion="Av. Siempreviva 742", ciudad="Córdoba")
    db.add(edificio)
    db.commit()
    db.refresh(edificio)
    return edificio


@pytest.fixture
def departamento(db, edificio):
    departamento = Departamento(edificio_id=edificio.id, numero="3B", piso=3)
    db.add(departamento)
    db.commit()
    db.refresh(departamento)
    return departamento


@pytest.fixture
def otro_departamento(db, edificio):
    departamento = Departamento(edificio_id=edificio.id, numero="4A", piso=4)
    db.add(departamento)
    db.commit()
    db.refresh(departamento)
    return departamento


@pytest.fixture
def cliente(db):
    cliente = Cliente(nombre="Lucía", apellido="Gómez", documento="30111222", email="lucia@mail.com")
    db.add(cliente)
    db.commit()
    db.refresh(cliente)
    return cliente


@pytest.fixture
def crear_reserva_db(db, departamento, cliente):
    """Inserta una reserva directamente, sin pasar por el servicio"""

    def _crear(inicio: datetime, fin: datetime, estado: str = "confirmada", departamento_id=None) -> Reserva:
        reserva = Reserva(
            departamento_id=departamento_id or departamento.id,
            cliente_id=cliente.id,
            fecha_inicio=inicio,
            fecha_fin=fin,
            monto=100,
            estado=estado,
        )
        db.add(reserva)
        db.commit()
        db.refresh(reserva)
        return reserva

    return _crear
