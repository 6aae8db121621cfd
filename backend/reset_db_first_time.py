#!/usr/bin/env python3
"""
Resetea la base de datos del almacén: elimina todas las tablas y las recrea
vacías desde los modelos. Se pierden materiales, movimientos e historial.

Uso: python reset_db_first_time.py
"""
import sys
from pathlib import Path

# Añadir el directorio del backend al path
sys.path.insert(0, str(Path(__file__).resolve().parent))

def main():
    from almacen.config import settings
    from almacen.db import recreate_schema_from_models

    print(f"Reseteando base de datos: {settings.database_url}")
    print("Se eliminarán todas las tablas y datos.")
    resp = input("Continuar? (s/n): ").strip().lower()
    if resp != "s":
        print("Cancelado.")
        return

    recreate_schema_from_models()

    print("\nListo. Carga materiales de ejemplo con: python scripts/seed_materiales.py")

if __name__ == "__main__":
    main()
