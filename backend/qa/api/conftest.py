"""
Fixtures para tests de integración API.
Usa TestClient de FastAPI contra la app real, con get_db apuntando a una
base SQLite temporal por test.
"""
import pytest
import sys
from pathlib import Path

# Asegurar que el path permita imports de almacen
root_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(root_dir))

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from almacen.main import app
from almacen.db import build_engine, init_db
from almacen.dependencies import get_db


@pytest.fixture
def client(tmp_path):
    """Cliente HTTP con base de datos aislada."""
    engine = build_engine(f"sqlite:///{tmp_path / 'api.db'}")
    init_db(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def material_id(client):
    r = client.post("/inventario/materiales", json={"nombre": "Cemento gris 50 kg", "codigo": "CEM-001", "unidad": "BULTO"})
    assert r.status_code == 200, r.text
    return r.json()["id"]
