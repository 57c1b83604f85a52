#!/usr/bin/env python3
"""
Script para cargar datos de demostración
Crea: un Edificio con departamentos y un Cliente de prueba
"""

import sys

from sqlalchemy.exc import SQLAlchemyError

from database.conexion import Base, SessionLocal, engine
import models  # registra todas las tablas
from models.cliente import Cliente
from models.departamento import Departamento
from models.edificio import Edificio

logger = print  # Simple logger

DEPARTAMENTOS_DEMO = [
    ("1A", 1),
    ("1B", 1),
    ("2A", 2),
    ("3B", 3),
]


def crear_edificio_demo():
    """Crea el edificio demo y sus departamentos"""
    session = SessionLocal()
    try:
        edificio = session.query(Edificio).filter(Edificio.nombre == "Edificio Demo").first()
        if edificio:
            logger("✅ Edificio demo ya existe")
            return edificio.id

        logger("📝 Creando edificio demo...")
        edificio = Edificio(nombre="Edificio Demo", direccion="Av. Colón 1234", ciudad="Córdoba")
        session.add(edificio)
        session.flush()  # Para obtener el ID

        for numero, piso in DEPARTAMENTOS_DEMO:
            session.add(Departamento(edificio_id=edificio.id, numero=numero, piso=piso))

        session.commit()
        logger(f"✅ Edificio demo creado con {len(DEPARTAMENTOS_DEMO)} departamentos")
        return edificio.id

    except SQLAlchemyError as e:
        logger(f"❌ Error creando edificio demo: {e}")
        session.rollback()
        return None
    finally:
        session.close()


def crear_cliente_demo():
    """Crea un cliente de prueba para cargar reservas"""
    session = SessionLocal()
    try:
        cliente = session.query(Cliente).filter(Cliente.email == "demo@reservas.com").first()
        if cliente:
            logger("✅ Cliente demo ya existe")
            return cliente.id

        logger("📝 Creando cliente demo...")
        cliente = Cliente(
            nombre="Cliente",
            apellido="Demo",
            documento="20123456",
            email="demo@reservas.com",
            telefono="+54911234567",
        )
        session.add(cliente)
        session.commit()
        logger(f"✅ Cliente demo creado con ID {cliente.id}")
        return cliente.id

    except SQLAlchemyError as e:
        logger(f"❌ Error creando cliente demo: {e}")
        session.rollback()
        return None
    finally:
        session.close()


def main():
    """Ejecuta todo el seed"""
    logger("=" * 70)
    logger("🌱 DATOS DE DEMOSTRACIÓN")
    logger("=" * 70)

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger(f"❌ Error creando tablas: {e}")
        return False

    edificio_id = crear_edificio_demo()
    cliente_id = crear_cliente_demo()

    if edificio_id is None or cliente_id is None:
        logger("⚠️  Seed incompleto")
        return False

    logger("=" * 70)
    logger("✅ SEED COMPLETADO")
    logger("=" * 70)
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
