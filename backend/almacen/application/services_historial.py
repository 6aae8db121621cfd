"""
Historial de Inventario
=======================
Bitácora inmutable de cada cambio de stock. Solo INSERT.
A diferencia de una auditoría "try-safe", aquí la línea se escribe en la
MISMA sesión y transacción del movimiento: si falla, falla el movimiento.
"""
from decimal import Decimal
from typing import Optional

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Material, InventarioHistorial
from ..domain.enums import TipoHistorial
from ..config import settings


def registrar_historial(
    uow: UnitOfWork,
    material: Material,
    tipo: TipoHistorial,
    cantidad: Decimal,
    stock_fisico_anterior: Decimal,
    stock_virtual_anterior: Decimal,
    referencia_id: Optional[int] = None,
    notas: Optional[str] = None,
) -> InventarioHistorial:
    """
    Registra una línea de historial con la foto antes/después de ambos
    contadores. Los valores "nuevos" se toman del material ya actualizado.
    """
    linea = InventarioHistorial(
        material_id=material.id,
        tipo=TipoHistorial(tipo).value,
        referencia_id=referencia_id,
        cantidad=cantidad,
        stock_fisico_anterior=stock_fisico_anterior,
        stock_fisico_nuevo=material.stock_fisico,
        stock_virtual_anterior=stock_virtual_anterior,
        stock_virtual_nuevo=material.stock_virtual,
        notas=notas[:500] if notas else None,
    )
    return uow.historial.add(linea)


def consultar_historial(
    uow: UnitOfWork,
    material_id: Optional[int] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> dict:
    """Lectura paginada del historial, más reciente primero."""
    limit = limit or settings.historial_page_size
    total, items = uow.historial.page(material_id=material_id, limit=limit, offset=offset)
    return {"total": total, "items": items}
