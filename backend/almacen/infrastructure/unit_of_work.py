from contextlib import contextmanager
from sqlalchemy.orm import Session
from ..db import SessionLocal
from .repositories import (
    MaterialRepository, CompraRepository, EntradaRepository, SalidaRepository, HistorialRepository
)

class UnitOfWork:
    def __init__(self, db: Session = None):
        self.db: Session = db if db is not None else SessionLocal()
        self.materiales = MaterialRepository(self.db)
        self.compras = CompraRepository(self.db)
        self.entradas = EntradaRepository(self.db)
        self.salidas = SalidaRepository(self.db)
        self.historial = HistorialRepository(self.db)

    def commit(self): self.db.commit()
    def rollback(self): self.db.rollback()
    def close(self): self.db.close()

    def __enter__(self): return self
    def __exit__(self, exc_type, exc, tb): self.close()

    @contextmanager
    def transaction(self):
        """Todo o nada: commit al salir, rollback ante cualquier excepción."""
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise
