"""
Configuración global de pytest para tests del almacén.

Cada test corre contra una base SQLite en memoria recién creada, con la
misma disciplina de transacciones que producción (build_engine).
"""
import os
import sys
import tempfile
import pytest
from pathlib import Path
from datetime import date
from decimal import Decimal

# Agregar el directorio raíz al path para imports
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

# Antes de importar almacen.*: nunca tocar ./data ni ./logs del desarrollador
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="almacen_logs_"))

from sqlalchemy.orm import sessionmaker

from almacen.db import build_engine, init_db
from almacen.infrastructure.unit_of_work import UnitOfWork
from almacen.application.services_inventario import InventarioService
from almacen.application.services_materiales import CrearMaterial
from almacen.application.services_compras import CrearCompra
from almacen.application.services_entradas import CrearEntrada


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def uow(db):
    return UnitOfWork(db)


@pytest.fixture
def service(uow):
    return InventarioService(uow)


@pytest.fixture
def material(service):
    """Cemento sin existencias."""
    return service.ejecutar(CrearMaterial(nombre="Cemento gris 50 kg", codigo="CEM-001", unidad="BULTO"))


@pytest.fixture
def crear_compra(service):
    def _crear(material_id, cantidad="100", precio="10", **kwargs):
        return service.ejecutar(CrearCompra(
            material_id=material_id,
            cantidad=Decimal(cantidad),
            precio_unitario=Decimal(precio),
            fecha=kwargs.pop("fecha", date(2025, 1, 15)),
            **kwargs,
        ))
    return _crear


@pytest.fixture
def crear_entrada(service):
    def _crear(compra_id, cantidad, **kwargs):
        return service.ejecutar(CrearEntrada(
            compra_id=compra_id,
            cantidad=Decimal(cantidad),
            fecha=kwargs.pop("fecha", date(2025, 1, 16)),
            **kwargs,
        ))
    return _crear


@pytest.fixture
def recargar(uow):
    """Relee un registro desde la base (descarta el estado en memoria)."""
    def _recargar(obj):
        uow.db.expire_all()
        return uow.db.get(type(obj), obj.id)
    return _recargar
