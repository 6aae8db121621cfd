"""
Tests de entradas: recepción contra compra y su cancelación
"""
import pytest
from datetime import date
from decimal import Decimal

from almacen.application.services_inventario import (
    NoEncontradoError, CantidadInvalidaError, EstadoInvalidoError,
)
from almacen.application.services_compras import CancelarCompra
from almacen.application.services_entradas import CrearEntrada, CancelarEntrada
from almacen.domain.enums import EstatusCompra, EstatusMovimiento, TipoHistorial


class TestCrearEntrada:

    def test_virtual_pasa_a_fisico(self, material, crear_compra, crear_entrada, recargar):
        compra = crear_compra(material.id, cantidad="100")
        entrada = crear_entrada(compra.id, "60")
        m = recargar(material)
        c = recargar(compra)
        assert m.stock_virtual == Decimal("40")
        assert m.stock_fisico == Decimal("60")
        assert c.cantidad_recibida == Decimal("60")
        assert c.estatus == EstatusCompra.ACTIVA
        assert entrada.estatus == EstatusMovimiento.ACTIVA
        assert entrada.material_id == material.id

    def test_completa_la_compra_exactamente(self, material, crear_compra, crear_entrada, recargar):
        compra = crear_compra(material.id, cantidad="100")
        crear_entrada(compra.id, "60")
        crear_entrada(compra.id, "40")
        c = recargar(compra)
        assert c.cantidad_recibida == c.cantidad
        assert c.estatus == EstatusCompra.COMPLETADA

    def test_no_mas_de_lo_pendiente(self, service, material, crear_compra, crear_entrada, recargar):
        compra = crear_compra(material.id, cantidad="100")
        crear_entrada(compra.id, "60")
        with pytest.raises(CantidadInvalidaError):
            service.ejecutar(CrearEntrada(compra_id=compra.id, cantidad=Decimal("40.0001"), fecha=date(2025, 1, 16)))
        assert recargar(compra).cantidad_recibida == Decimal("60")

    @pytest.mark.parametrize("cantidad", ["0", "-1"])
    def test_cantidad_no_positiva(self, service, material, crear_compra, cantidad):
        compra = crear_compra(material.id)
        with pytest.raises(CantidadInvalidaError):
            service.ejecutar(CrearEntrada(compra_id=compra.id, cantidad=Decimal(cantidad), fecha=date(2025, 1, 16)))

    def test_compra_inexistente_no_se_autocrea(self, service, uow):
        with pytest.raises(NoEncontradoError):
            service.ejecutar(CrearEntrada(compra_id=999, cantidad=Decimal("1"), fecha=date(2025, 1, 16)))
        assert uow.compras.list() == []
        assert uow.entradas.list() == []

    def test_compra_cancelada(self, service, material, crear_compra):
        compra = crear_compra(material.id)
        service.ejecutar(CancelarCompra(compra_id=compra.id))
        with pytest.raises(EstadoInvalidoError):
            service.ejecutar(CrearEntrada(compra_id=compra.id, cantidad=Decimal("1"), fecha=date(2025, 1, 16)))

    def test_compra_completada(self, service, material, crear_compra, crear_entrada):
        compra = crear_compra(material.id, cantidad="10")
        crear_entrada(compra.id, "10")
        with pytest.raises(EstadoInvalidoError):
            service.ejecutar(CrearEntrada(compra_id=compra.id, cantidad=Decimal("1"), fecha=date(2025, 1, 16)))

    def test_historial(self, uow, material, crear_compra, crear_entrada):
        compra = crear_compra(material.id, cantidad="100")
        entrada = crear_entrada(compra.id, "60")
        linea = uow.historial.por_material(material.id)[-1]
        assert linea.tipo == TipoHistorial.ENTRADA
        assert linea.cantidad == Decimal("60")
        assert linea.referencia_id == entrada.id
        assert linea.delta_fisico == Decimal("60")
        assert linea.delta_virtual == Decimal("-60")
        assert entrada.folio in linea.notas and compra.folio in linea.notas


class TestCancelarEntrada:

    def test_ida_y_vuelta_restaura_todo(self, service, material, crear_compra, crear_entrada, recargar):
        """Crear y cancelar una entrada deja contadores y compra como estaban"""
        compra = crear_compra(material.id, cantidad="100")
        crear_entrada(compra.id, "30")
        antes_m = recargar(material)
        antes = (antes_m.stock_fisico, antes_m.stock_virtual)
        antes_c = recargar(compra)
        antes_compra = (antes_c.cantidad_recibida, antes_c.estatus)

        entrada = crear_entrada(compra.id, "70")
        assert recargar(compra).estatus == EstatusCompra.COMPLETADA
        service.ejecutar(CancelarEntrada(entrada_id=entrada.id))

        m = recargar(material)
        c = recargar(compra)
        assert (m.stock_fisico, m.stock_virtual) == antes
        assert (c.cantidad_recibida, c.estatus) == antes_compra
        assert recargar(entrada).estatus == EstatusMovimiento.CANCELADA

    def test_historial_negativo(self, service, uow, material, crear_compra, crear_entrada):
        compra = crear_compra(material.id, cantidad="100")
        entrada = crear_entrada(compra.id, "30")
        service.ejecutar(CancelarEntrada(entrada_id=entrada.id))
        linea = uow.historial.por_material(material.id)[-1]
        assert linea.tipo == TipoHistorial.CANCELACION_ENTRADA
        assert linea.cantidad == Decimal("-30")
        assert linea.delta_fisico == Decimal("-30")
        assert linea.delta_virtual == Decimal("30")

    def test_cancelar_dos_veces(self, service, uow, material, crear_compra, crear_entrada, recargar):
        compra = crear_compra(material.id, cantidad="100")
        entrada = crear_entrada(compra.id, "30")
        service.ejecutar(CancelarEntrada(entrada_id=entrada.id))
        lineas = len(uow.historial.por_material(material.id))
        with pytest.raises(EstadoInvalidoError):
            service.ejecutar(CancelarEntrada(entrada_id=entrada.id))
        m = recargar(material)
        assert m.stock_fisico == 0
        assert m.stock_virtual == Decimal("100")
        assert len(uow.historial.por_material(material.id)) == lineas

    def test_inexistente(self, service):
        with pytest.raises(NoEncontradoError):
            service.ejecutar(CancelarEntrada(entrada_id=999))

    def test_recorte_de_fisico(self, service, material, crear_compra, crear_entrada, recargar):
        """Si ya salió material por ajuste, la reversión no deja el físico negativo"""
        from almacen.application.services_ajuste import AjustarMaterial
        compra = crear_compra(material.id, cantidad="100")
        entrada = crear_entrada(compra.id, "30")
        service.ejecutar(AjustarMaterial(material_id=material.id, stock_fisico=Decimal("10"), notas="merma"))
        service.ejecutar(CancelarEntrada(entrada_id=entrada.id))
        m = recargar(material)
        assert m.stock_fisico == 0
        assert m.stock_virtual == Decimal("100")
