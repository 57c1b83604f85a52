from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from config import DATABASE_URL

# SQLite necesita compartir la conexión entre hilos del servidor
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# NO crear tablas acá: main.py lo hace después de importar los modelos


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def tomar_lock_escritura(db: Session) -> None:
    """
    En SQLite abre la transacción con BEGIN IMMEDIATE.

    SQLite ignora SELECT ... FOR UPDATE y pysqlite recién abre la transacción
    en el primer INSERT/UPDATE, así que sin esto dos sesiones pueden verificar
    disponibilidad a la vez. Con el lock de escritura tomado, la otra sesión
    espera (hasta el timeout de la conexión) a que esta haga commit o rollback.
    En otros motores no hace nada.
    """
    if db.get_bind().dialect.name != "sqlite":
        return
    conexion_dbapi = db.connection().connection.dbapi_connection
    if not conexion_dbapi.in_transaction:
        db.execute(text("BEGIN IMMEDIATE"))
