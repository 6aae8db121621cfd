"""
Ajuste manual de almacén
========================
Única operación que fija el stock físico a un valor absoluto. Exige motivo.
El stock mínimo es metadato: cambiarlo no genera historial.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Material
from ..domain.enums import TipoHistorial
from .services_historial import registrar_historial
from .services_inventario import (
    Comando, CERO, a_cantidad, obtener_material_activo,
    CantidadInvalidaError, JustificacionRequeridaError, DatosInvalidosError,
)


@dataclass(frozen=True)
class AjustarMaterial(Comando):
    material_id: int
    stock_fisico: Optional[Decimal] = None
    stock_minimo: Optional[Decimal] = None
    notas: Optional[str] = None

    def ejecutar(self, uow: UnitOfWork) -> Material:
        if self.stock_fisico is None and self.stock_minimo is None:
            raise DatosInvalidosError("Debe indicar stock físico o stock mínimo")

        nuevo_fisico = a_cantidad(self.stock_fisico, "El stock físico") if self.stock_fisico is not None else None
        nuevo_minimo = a_cantidad(self.stock_minimo, "El stock mínimo") if self.stock_minimo is not None else None
        if (nuevo_fisico is not None and nuevo_fisico < 0) or (nuevo_minimo is not None and nuevo_minimo < 0):
            raise CantidadInvalidaError("El stock no puede ser negativo")

        motivo = (self.notas or "").strip()
        if nuevo_fisico is not None and not motivo:
            raise JustificacionRequeridaError("El motivo del ajuste es obligatorio")

        material = obtener_material_activo(uow, self.material_id)

        if nuevo_fisico is not None:
            stock_fisico_anterior = material.stock_fisico or CERO
            stock_virtual_anterior = material.stock_virtual or CERO
            material.stock_fisico = nuevo_fisico
            registrar_historial(
                uow, material, TipoHistorial.AJUSTE, nuevo_fisico - stock_fisico_anterior,
                stock_fisico_anterior, stock_virtual_anterior,
                referencia_id=None, notas=f"Ajuste manual: {motivo}",
            )

        if nuevo_minimo is not None:
            material.stock_minimo = nuevo_minimo

        return material
