"""
Catálogo de materiales.

Solo campos descriptivos. Los contadores nacen en cero y únicamente los
mueven compras, entradas, salidas y ajustes.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Material
from .services_inventario import (
    Comando, CERO, a_cantidad, NoEncontradoError, CantidadInvalidaError, DatosInvalidosError,
)


def _codigo_limpio(codigo: Optional[str]) -> Optional[str]:
    codigo = (codigo or "").strip()
    return codigo or None


@dataclass(frozen=True)
class CrearMaterial(Comando):
    nombre: str
    codigo: Optional[str] = None
    unidad: Optional[str] = None
    stock_minimo: Decimal = CERO

    def ejecutar(self, uow: UnitOfWork) -> Material:
        nombre = (self.nombre or "").strip()
        if not nombre:
            raise DatosInvalidosError("El nombre del material es obligatorio")
        stock_minimo = a_cantidad(self.stock_minimo or CERO, "El stock mínimo")
        if stock_minimo < 0:
            raise CantidadInvalidaError("El stock mínimo no puede ser negativo")
        codigo = _codigo_limpio(self.codigo)
        if codigo and uow.materiales.by_codigo(codigo):
            raise DatosInvalidosError(f"Ya existe un material con código {codigo}")

        return uow.materiales.add(Material(
            codigo=codigo,
            nombre=nombre,
            unidad=(self.unidad or "").strip() or None,
            stock_fisico=CERO,
            stock_virtual=CERO,
            stock_minimo=stock_minimo,
            activo=True,
        ))


@dataclass(frozen=True)
class ActualizarMaterial(Comando):
    material_id: int
    codigo: Optional[str] = None
    nombre: Optional[str] = None
    unidad: Optional[str] = None
    activo: Optional[bool] = None

    def ejecutar(self, uow: UnitOfWork) -> Material:
        material = uow.materiales.get_for_update(self.material_id)
        if not material:
            raise NoEncontradoError(f"Material {self.material_id} no encontrado")

        if self.nombre is not None:
            nombre = self.nombre.strip()
            if not nombre:
                raise DatosInvalidosError("El nombre del material es obligatorio")
            material.nombre = nombre
        if self.codigo is not None:
            codigo = _codigo_limpio(self.codigo)
            if codigo:
                otro = uow.materiales.by_codigo(codigo)
                if otro and otro.id != material.id:
                    raise DatosInvalidosError(f"Ya existe un material con código {codigo}")
            material.codigo = codigo
        if self.unidad is not None:
            material.unidad = self.unidad.strip() or None
        if self.activo is not None:
            material.activo = self.activo
        return material


@dataclass(frozen=True)
class EliminarMaterial(Comando):
    """
    Borrado físico si el material nunca se movió; si tiene compras,
    entradas, salidas o historial solo se desactiva.
    """
    material_id: int

    def ejecutar(self, uow: UnitOfWork) -> dict:
        material = uow.materiales.get_for_update(self.material_id)
        if not material:
            raise NoEncontradoError(f"Material {self.material_id} no encontrado")

        if uow.materiales.tiene_movimientos(material.id):
            material.activo = False
            return {"id": material.id, "eliminado": False, "desactivado": True}

        uow.materiales.delete(material)
        return {"id": self.material_id, "eliminado": True, "desactivado": False}
