"""
Entradas - recepción física contra una compra
==============================================
Pasa stock de virtual a físico y acumula lo recibido en la compra.
La compra queda "completada" exactamente cuando recibido == comprado.
Nunca se crea una compra automática para una entrada huérfana.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Entrada
from ..domain.enums import EstatusCompra, EstatusMovimiento, TipoFolio, TipoHistorial
from .services_folio import generate_folio
from .services_historial import registrar_historial
from .services_inventario import (
    Comando, CERO, a_cantidad, recortar, obtener_material,
    NoEncontradoError, CantidadInvalidaError, EstadoInvalidoError,
)


@dataclass(frozen=True)
class CrearEntrada(Comando):
    compra_id: int
    cantidad: Decimal
    fecha: date
    notas: Optional[str] = None

    def ejecutar(self, uow: UnitOfWork) -> Entrada:
        cantidad = a_cantidad(self.cantidad)
        if cantidad <= 0:
            raise CantidadInvalidaError("La cantidad debe ser mayor a 0")

        compra = uow.compras.get_for_update(self.compra_id)
        if not compra:
            raise NoEncontradoError(f"Compra {self.compra_id} no encontrada")
        if compra.estatus != EstatusCompra.ACTIVA:
            raise EstadoInvalidoError(f"La compra {compra.folio} no está activa")

        recibida_anterior = compra.cantidad_recibida or CERO
        pendiente = compra.cantidad - recibida_anterior
        if cantidad > pendiente:
            raise CantidadInvalidaError(f"No se puede recibir más de lo pendiente ({pendiente})")

        material = obtener_material(uow, compra.material_id)
        stock_fisico_anterior = material.stock_fisico or CERO
        stock_virtual_anterior = material.stock_virtual or CERO

        folio = generate_folio(uow.db, TipoFolio.ENTRADA)
        entrada = uow.entradas.add(Entrada(
            folio=folio,
            compra_id=compra.id,
            material_id=compra.material_id,
            cantidad=cantidad,
            fecha=self.fecha,
            notas=self.notas or None,
            estatus=EstatusMovimiento.ACTIVA.value,
        ))

        # Virtual -> físico
        material.stock_virtual = recortar(stock_virtual_anterior - cantidad)
        material.stock_fisico = stock_fisico_anterior + cantidad

        compra.cantidad_recibida = recibida_anterior + cantidad
        compra.estatus = (
            EstatusCompra.COMPLETADA.value
            if compra.cantidad_recibida == compra.cantidad
            else EstatusCompra.ACTIVA.value
        )

        registrar_historial(
            uow, material, TipoHistorial.ENTRADA, cantidad,
            stock_fisico_anterior, stock_virtual_anterior,
            referencia_id=entrada.id, notas=f"Entrada {folio} de compra {compra.folio}",
        )
        return entrada


@dataclass(frozen=True)
class CancelarEntrada(Comando):
    entrada_id: int

    def ejecutar(self, uow: UnitOfWork) -> Entrada:
        entrada = uow.entradas.get_for_update(self.entrada_id)
        if not entrada:
            raise NoEncontradoError(f"Entrada {self.entrada_id} no encontrada")
        if entrada.estatus == EstatusMovimiento.CANCELADA:
            raise EstadoInvalidoError(f"La entrada {entrada.folio} ya está cancelada")

        compra = uow.compras.get_for_update(entrada.compra_id)
        material = obtener_material(uow, entrada.material_id)
        stock_fisico_anterior = material.stock_fisico or CERO
        stock_virtual_anterior = material.stock_virtual or CERO

        # Físico -> virtual
        material.stock_virtual = stock_virtual_anterior + entrada.cantidad
        material.stock_fisico = recortar(stock_fisico_anterior - entrada.cantidad)

        compra.cantidad_recibida = recortar((compra.cantidad_recibida or CERO) - entrada.cantidad)
        if compra.estatus != EstatusCompra.CANCELADA:
            compra.estatus = EstatusCompra.ACTIVA.value

        entrada.estatus = EstatusMovimiento.CANCELADA.value
        registrar_historial(
            uow, material, TipoHistorial.CANCELACION_ENTRADA, -entrada.cantidad,
            stock_fisico_anterior, stock_virtual_anterior,
            referencia_id=entrada.id, notas=f"Cancelación entrada {entrada.folio}",
        )
        return entrada
