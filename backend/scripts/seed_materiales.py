#!/usr/bin/env python3
"""
Carga un catálogo de materiales de obra para pruebas.

Uso:
  cd backend && python -m scripts.seed_materiales
  cd backend && python scripts/seed_materiales.py
  cd backend && python scripts/seed_materiales.py --con-movimientos

Crea (si no existen por código):
- Cemento, varilla, arena, grava, block y alambre
Con --con-movimientos registra además una compra por material y la recepción
parcial de la mitad, para tener stock físico y virtual a la vez.
"""
import sys
import argparse
from pathlib import Path
from datetime import date
from decimal import Decimal

# Agregar backend al path
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from almacen.db import init_db
from almacen.infrastructure.logging_config import setup_logging, get_logger
from almacen.infrastructure.unit_of_work import UnitOfWork
from almacen.application.services_inventario import InventarioService
from almacen.application.services_materiales import CrearMaterial
from almacen.application.services_compras import CrearCompra
from almacen.application.services_entradas import CrearEntrada

logger = get_logger("scripts.seed_materiales")

# codigo, nombre, unidad, stock_minimo, compra, precio
MATERIALES = [
    ("CEM-001", "Cemento gris 50 kg", "BULTO", Decimal("20"), Decimal("100"), Decimal("245.00")),
    ("VAR-038", "Varilla corrugada 3/8", "PZA", Decimal("50"), Decimal("200"), Decimal("98.50")),
    ("ARE-001", "Arena de río", "M3", Decimal("5"), Decimal("12"), Decimal("420.00")),
    ("GRA-034", "Grava 3/4", "M3", Decimal("5"), Decimal("10"), Decimal("460.00")),
    ("BLK-015", "Block 15x20x40", "PZA", Decimal("300"), Decimal("1500"), Decimal("12.80")),
    ("ALA-016", "Alambre recocido cal. 16", "KG", Decimal("10"), Decimal("40"), Decimal("38.00")),
]


def main():
    parser = argparse.ArgumentParser(description="Carga materiales de ejemplo")
    parser.add_argument("--con-movimientos", action="store_true", help="Registrar compra y entrada parcial por material")
    args = parser.parse_args()

    setup_logging()
    init_db()

    with UnitOfWork() as uow:
        service = InventarioService(uow)
        for codigo, nombre, unidad, minimo, cantidad, precio in MATERIALES:
            if uow.materiales.by_codigo(codigo):
                logger.info(f"{codigo} ya existe, se omite")
                continue
            material = service.ejecutar(CrearMaterial(nombre=nombre, codigo=codigo, unidad=unidad, stock_minimo=minimo))
            print(f"  + {codigo} {nombre}")

            if args.con_movimientos:
                compra = service.ejecutar(CrearCompra(
                    material_id=material.id, cantidad=cantidad, precio_unitario=precio, fecha=date.today(),
                ))
                entrada = service.ejecutar(CrearEntrada(
                    compra_id=compra.id, cantidad=(cantidad / 2).quantize(Decimal("0.0001")), fecha=date.today(),
                ))
                print(f"    {compra.folio} / {entrada.folio}")

    print("Catálogo de materiales listo.")


if __name__ == "__main__":
    main()
