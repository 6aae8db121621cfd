"""
Compras - órdenes de compra de material
========================================
Crear una compra reserva stock virtual; cancelarla libera solo la parte
que nunca se recibió. Las entradas activas bloquean la cancelación.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Compra
from ..domain.enums import EstatusCompra, TipoFolio, TipoHistorial
from .services_folio import generate_folio
from .services_historial import registrar_historial
from .services_inventario import (
    Comando, CERO, a_cantidad, a_precio, recortar, obtener_material_activo, obtener_material,
    NoEncontradoError, CantidadInvalidaError, EstadoInvalidoError, PrecondicionError,
)


@dataclass(frozen=True)
class CrearCompra(Comando):
    material_id: int
    cantidad: Decimal
    precio_unitario: Decimal
    fecha: date
    proveedor_id: Optional[int] = None
    notas: Optional[str] = None

    def ejecutar(self, uow: UnitOfWork) -> Compra:
        cantidad = a_cantidad(self.cantidad)
        precio_unitario = a_precio(self.precio_unitario)
        if cantidad <= 0 or precio_unitario <= 0:
            raise CantidadInvalidaError("Cantidad y precio deben ser mayores a 0")

        material = obtener_material_activo(uow, self.material_id)
        stock_fisico_anterior = material.stock_fisico or CERO
        stock_virtual_anterior = material.stock_virtual or CERO

        folio = generate_folio(uow.db, TipoFolio.COMPRA)
        compra = uow.compras.add(Compra(
            folio=folio,
            material_id=material.id,
            proveedor_id=self.proveedor_id,
            cantidad=cantidad,
            cantidad_recibida=CERO,
            precio_unitario=precio_unitario,
            total=(cantidad * precio_unitario).quantize(Decimal("0.01")),
            fecha=self.fecha,
            notas=self.notas or None,
            estatus=EstatusCompra.ACTIVA.value,
        ))

        material.stock_virtual = stock_virtual_anterior + cantidad
        registrar_historial(
            uow, material, TipoHistorial.COMPRA, cantidad,
            stock_fisico_anterior, stock_virtual_anterior,
            referencia_id=compra.id, notas=f"Compra {folio}",
        )
        return compra


@dataclass(frozen=True)
class CancelarCompra(Comando):
    compra_id: int

    def ejecutar(self, uow: UnitOfWork) -> Compra:
        compra = uow.compras.get_for_update(self.compra_id)
        if not compra:
            raise NoEncontradoError(f"Compra {self.compra_id} no encontrada")
        if compra.estatus == EstatusCompra.CANCELADA:
            raise EstadoInvalidoError(f"La compra {compra.folio} ya está cancelada")
        if uow.entradas.contar_activas(compra.id) > 0:
            raise PrecondicionError(
                "No se puede cancelar: tiene entradas activas asociadas. Cancele las entradas primero."
            )
        if compra.estatus == EstatusCompra.COMPLETADA:
            # Una compra completada sin entradas activas indica datos inconsistentes
            raise EstadoInvalidoError(f"La compra {compra.folio} está completada")

        material = obtener_material(uow, compra.material_id)
        stock_fisico_anterior = material.stock_fisico or CERO
        stock_virtual_anterior = material.stock_virtual or CERO
        pendiente = compra.cantidad - (compra.cantidad_recibida or CERO)

        material.stock_virtual = recortar(stock_virtual_anterior - pendiente)
        compra.estatus = EstatusCompra.CANCELADA.value
        registrar_historial(
            uow, material, TipoHistorial.CANCELACION_COMPRA, -pendiente,
            stock_fisico_anterior, stock_virtual_anterior,
            referencia_id=compra.id, notas=f"Cancelación compra {compra.folio}",
        )
        return compra
