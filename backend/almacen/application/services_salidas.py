"""
Salidas - consumo o entrega de material a obra
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Salida
from ..domain.enums import EstatusMovimiento, TipoFolio, TipoHistorial
from .services_folio import generate_folio
from .services_historial import registrar_historial
from .services_inventario import (
    Comando, CERO, a_cantidad, obtener_material_activo, obtener_material,
    NoEncontradoError, CantidadInvalidaError, EstadoInvalidoError, DatosInvalidosError,
)


@dataclass(frozen=True)
class CrearSalida(Comando):
    material_id: int
    cantidad: Decimal
    referencia: str
    fecha: date
    notas: Optional[str] = None

    def ejecutar(self, uow: UnitOfWork) -> Salida:
        cantidad = a_cantidad(self.cantidad)
        if cantidad <= 0:
            raise CantidadInvalidaError("La cantidad debe ser mayor a 0")
        referencia = (self.referencia or "").strip()
        if not referencia:
            raise DatosInvalidosError("La referencia es obligatoria")

        material = obtener_material_activo(uow, self.material_id)
        stock_fisico_anterior = material.stock_fisico or CERO
        stock_virtual_anterior = material.stock_virtual or CERO
        if cantidad > stock_fisico_anterior:
            raise CantidadInvalidaError(f"Stock físico insuficiente. Disponible: {stock_fisico_anterior}")

        folio = generate_folio(uow.db, TipoFolio.SALIDA)
        salida = uow.salidas.add(Salida(
            folio=folio,
            material_id=material.id,
            cantidad=cantidad,
            referencia=referencia,
            fecha=self.fecha,
            notas=self.notas or None,
            estatus=EstatusMovimiento.ACTIVA.value,
        ))

        material.stock_fisico = stock_fisico_anterior - cantidad
        registrar_historial(
            uow, material, TipoHistorial.SALIDA, -cantidad,
            stock_fisico_anterior, stock_virtual_anterior,
            referencia_id=salida.id, notas=f"Salida {folio} - {referencia}",
        )
        return salida


@dataclass(frozen=True)
class CancelarSalida(Comando):
    salida_id: int

    def ejecutar(self, uow: UnitOfWork) -> Salida:
        salida = uow.salidas.get_for_update(self.salida_id)
        if not salida:
            raise NoEncontradoError(f"Salida {self.salida_id} no encontrada")
        if salida.estatus == EstatusMovimiento.CANCELADA:
            raise EstadoInvalidoError(f"La salida {salida.folio} ya está cancelada")

        material = obtener_material(uow, salida.material_id)
        stock_fisico_anterior = material.stock_fisico or CERO
        stock_virtual_anterior = material.stock_virtual or CERO

        material.stock_fisico = stock_fisico_anterior + salida.cantidad
        salida.estatus = EstatusMovimiento.CANCELADA.value
        registrar_historial(
            uow, material, TipoHistorial.CANCELACION_SALIDA, salida.cantidad,
            stock_fisico_anterior, stock_virtual_anterior,
            referencia_id=salida.id, notas=f"Cancelación salida {salida.folio}",
        )
        return salida
