"""
Tests del generador de folios (COM / ENT / SAL)
"""
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from almacen.domain.enums import TipoFolio, EstatusCompra
from almacen.domain.models_inventario import Compra
from almacen.application.services_folio import generate_folio, parse_folio, bloquear_secuencia, clave_bloqueo
from almacen.application.services_compras import CancelarCompra


def _compra_con_folio(uow, material_id, folio):
    return uow.compras.add(Compra(
        folio=folio,
        material_id=material_id,
        cantidad=Decimal("1"),
        cantidad_recibida=Decimal("0"),
        precio_unitario=Decimal("1"),
        total=Decimal("1"),
        fecha=date(2025, 1, 15),
        estatus=EstatusCompra.ACTIVA.value,
    ))


class TestGenerarFolio:
    """Formato PREFIJO-AAAAMMDD-NNN y secuencia por tipo y día"""

    def test_primer_folio_del_dia(self, db):
        """Sin registros del día el secuencial arranca en 001"""
        assert generate_folio(db, TipoFolio.COMPRA, hoy=date(2025, 1, 15)) == "COM-20250115-001"
        assert generate_folio(db, TipoFolio.ENTRADA, hoy=date(2025, 1, 15)) == "ENT-20250115-001"
        assert generate_folio(db, TipoFolio.SALIDA, hoy=date(2025, 1, 15)) == "SAL-20250115-001"

    def test_folios_consecutivos_usan_fecha_actual(self, material, crear_compra):
        """El folio lleva la fecha del día, no la fecha del movimiento"""
        hoy = date.today().strftime("%Y%m%d")
        c1 = crear_compra(material.id, fecha=date(2020, 5, 1))
        c2 = crear_compra(material.id)
        assert c1.folio == f"COM-{hoy}-001"
        assert c2.folio == f"COM-{hoy}-002"

    def test_cancelados_siguen_contando(self, service, material, crear_compra):
        hoy = date.today().strftime("%Y%m%d")
        c1 = crear_compra(material.id)
        service.ejecutar(CancelarCompra(compra_id=c1.id))
        c2 = crear_compra(material.id)
        assert c2.folio == f"COM-{hoy}-002"

    def test_secuencia_independiente_por_dia(self, uow, material):
        _compra_con_folio(uow, material.id, "COM-20250114-007")
        assert generate_folio(uow.db, TipoFolio.COMPRA, hoy=date(2025, 1, 15)) == "COM-20250115-001"
        assert generate_folio(uow.db, TipoFolio.COMPRA, hoy=date(2025, 1, 14)) == "COM-20250114-008"

    def test_pasado_999_no_trunca(self, uow, material):
        """Después de 999 sigue 1000 y luego 1001"""
        _compra_con_folio(uow, material.id, "COM-20250115-999")
        assert generate_folio(uow.db, TipoFolio.COMPRA, hoy=date(2025, 1, 15)) == "COM-20250115-1000"
        _compra_con_folio(uow, material.id, "COM-20250115-1000")
        assert generate_folio(uow.db, TipoFolio.COMPRA, hoy=date(2025, 1, 15)) == "COM-20250115-1001"

    def test_pendientes_se_envian_antes_de_calcular(self, uow, material):
        """Un registro agregado a la sesión sin flush ya cuenta para el siguiente folio"""
        uow.db.add(Compra(
            folio="COM-20250115-001", material_id=material.id, cantidad=Decimal("1"),
            cantidad_recibida=Decimal("0"), precio_unitario=Decimal("1"), total=Decimal("1"),
            fecha=date(2025, 1, 15), estatus=EstatusCompra.ACTIVA.value,
        ))
        assert generate_folio(uow.db, TipoFolio.COMPRA, hoy=date(2025, 1, 15)) == "COM-20250115-002"


class TestParseFolio:

    def test_parse_valido(self):
        assert parse_folio("ENT-20250115-007") == {
            "prefijo": "ENT",
            "fecha": date(2025, 1, 15),
            "secuencial": 7,
        }

    def test_parse_mil(self):
        assert parse_folio("SAL-20251231-1000")["secuencial"] == 1000

    def test_parse_invalidos(self):
        assert parse_folio("") is None
        assert parse_folio(None) is None
        assert parse_folio("COM-20250115") is None
        assert parse_folio("COM-2025011-001") is None
        assert parse_folio("COM-20251315-001") is None
        assert parse_folio("COM-20250115-abc") is None


def _sesion_falsa(dialecto):
    db = MagicMock()
    db.get_bind.return_value.dialect.name = dialecto
    return db


class TestBloqueoSecuencia:
    """En PostgreSQL el primer folio del día no tiene fila que bloquear: se usa advisory lock"""

    def test_postgresql_toma_advisory_lock(self):
        db = _sesion_falsa("postgresql")
        bloquear_secuencia(db, "COM-20250115-")
        db.execute.assert_called_once()
        sql, params = db.execute.call_args.args
        assert "pg_advisory_xact_lock" in str(sql)
        assert params == {"clave": clave_bloqueo("COM-20250115-")}

    def test_generar_bloquea_antes_de_consultar(self):
        db = _sesion_falsa("postgresql")
        db.query.return_value.filter.return_value.order_by.return_value.limit.return_value.scalar.return_value = None

        assert generate_folio(db, TipoFolio.COMPRA, hoy=date(2025, 1, 15)) == "COM-20250115-001"
        nombres = [c[0] for c in db.mock_calls]
        assert nombres.index("flush") < nombres.index("execute") < nombres.index("query")

    def test_sqlite_no_ejecuta_nada(self):
        db = _sesion_falsa("sqlite")
        bloquear_secuencia(db, "COM-20250115-")
        db.execute.assert_not_called()

    def test_clave_por_prefijo(self):
        assert clave_bloqueo("COM-20250115-") == clave_bloqueo("COM-20250115-")
        assert clave_bloqueo("COM-20250115-") != clave_bloqueo("ENT-20250115-")
        assert clave_bloqueo("COM-20250115-") != clave_bloqueo("COM-20250116-")
        for prefijo in ("COM-20250115-", "ENT-20991231-", "SAL-20250101-"):
            assert -(1 << 31) <= clave_bloqueo(prefijo) < (1 << 31)

    def test_sqlite_real_sin_bloqueo(self, db):
        assert generate_folio(db, TipoFolio.SALIDA, hoy=date(2025, 1, 15)) == "SAL-20250115-001"
