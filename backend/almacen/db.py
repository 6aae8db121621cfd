import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import settings

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False):
    """
    Crea el engine aplicando la disciplina de transacciones del almacén.

    En SQLite cada transacción arranca con BEGIN IMMEDIATE: un solo escritor
    a la vez, de modo que leer contadores y escribirlos ocurre bajo el mismo
    bloqueo. En PostgreSQL el bloqueo es por fila (with_for_update en los
    repositorios) y los folios se serializan con advisory lock (services_folio).
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, future=True, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=echo, future=True, **kwargs)

    @event.listens_for(engine, "connect")
    def _sqlite_on_connect(dbapi_connection, connection_record):
        # El driver no debe abrir transacciones por su cuenta
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _sqlite_on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


if settings.database_url.startswith("sqlite:///./data/"):
    os.makedirs("./data", exist_ok=True)

engine = build_engine(settings.database_url, echo=settings.debug)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


def _import_all_models():
    """Importa todos los modelos para que Base.metadata los registre."""
    from .domain import models_inventario  # noqa: F401 - Material, Compra, Entrada, Salida, InventarioHistorial


def init_db(bind=None):
    """Crear tablas si no existen (arranque normal)."""
    _import_all_models()
    Base.metadata.create_all(bind=bind or engine)


def recreate_schema_from_models(bind=None):
    """Elimina todas las tablas y las recrea desde los modelos."""
    _import_all_models()
    Base.metadata.drop_all(bind=bind or engine)
    Base.metadata.create_all(bind=bind or engine)
