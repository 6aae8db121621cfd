"""
Consultas de solo lectura del almacén (sin bloqueos ni transacción propia).
"""
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Material, Compra, Entrada, Salida
from .services_inventario import NoEncontradoError


def listar_materiales(uow: UnitOfWork, activos: bool = True) -> list[Material]:
    return uow.materiales.list(activos=activos)


def obtener_material(uow: UnitOfWork, material_id: int) -> Material:
    material = uow.materiales.get(material_id)
    if not material:
        raise NoEncontradoError(f"Material {material_id} no encontrado")
    return material


def listar_compras(uow: UnitOfWork, estatus: Optional[str] = None, material_id: Optional[int] = None) -> list[Compra]:
    return uow.compras.list(estatus=estatus, material_id=material_id)


def obtener_compra(uow: UnitOfWork, compra_id: int) -> Compra:
    compra = uow.compras.get(compra_id)
    if not compra:
        raise NoEncontradoError(f"Compra {compra_id} no encontrada")
    return compra


def listar_entradas(
    uow: UnitOfWork,
    estatus: Optional[str] = None,
    material_id: Optional[int] = None,
    compra_id: Optional[int] = None,
) -> list[Entrada]:
    return uow.entradas.list(estatus=estatus, material_id=material_id, compra_id=compra_id)


def obtener_entrada(uow: UnitOfWork, entrada_id: int) -> Entrada:
    entrada = uow.entradas.get(entrada_id)
    if not entrada:
        raise NoEncontradoError(f"Entrada {entrada_id} no encontrada")
    return entrada


def listar_salidas(uow: UnitOfWork, estatus: Optional[str] = None, material_id: Optional[int] = None) -> list[Salida]:
    return uow.salidas.list(estatus=estatus, material_id=material_id)


def obtener_salida(uow: UnitOfWork, salida_id: int) -> Salida:
    salida = uow.salidas.get(salida_id)
    if not salida:
        raise NoEncontradoError(f"Salida {salida_id} no encontrada")
    return salida
