from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from ..domain.models_inventario import Material, Compra, Entrada, Salida, InventarioHistorial
from ..domain.enums import EstatusMovimiento

class MaterialRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, m: Material): self.db.add(m); self.db.flush(); return m
    def get(self, id: int): return self.db.get(Material, id)
    def get_for_update(self, id: int):
        # Bloquea la fila del material hasta el commit (contadores)
        return (self.db.query(Material).filter(Material.id == id)
                .populate_existing().with_for_update().first())
    def by_codigo(self, codigo: str):
        return self.db.query(Material).filter(Material.codigo == codigo).first()
    def list(self, activos: bool = True):
        q = self.db.query(Material)
        if activos:
            q = q.filter(Material.activo == True)  # noqa: E712
        return q.order_by(Material.codigo.asc(), Material.nombre.asc()).all()
    def tiene_movimientos(self, id: int) -> bool:
        for model in (Compra, Entrada, Salida, InventarioHistorial):
            if self.db.query(model.id).filter(model.material_id == id).first():
                return True
        return False
    def delete(self, m: Material): self.db.delete(m); self.db.flush()

class CompraRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, c: Compra): self.db.add(c); self.db.flush(); return c
    def get(self, id: int): return self.db.get(Compra, id)
    def get_for_update(self, id: int):
        return (self.db.query(Compra).filter(Compra.id == id)
                .populate_existing().with_for_update().first())
    def list(self, estatus: str | None = None, material_id: int | None = None):
        q = self.db.query(Compra).options(joinedload(Compra.material))
        if estatus:
            q = q.filter(Compra.estatus == estatus)
        if material_id:
            q = q.filter(Compra.material_id == material_id)
        return q.order_by(Compra.created_at.desc(), Compra.id.desc()).all()

class EntradaRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, e: Entrada): self.db.add(e); self.db.flush(); return e
    def get(self, id: int): return self.db.get(Entrada, id)
    def get_for_update(self, id: int):
        return (self.db.query(Entrada).filter(Entrada.id == id)
                .populate_existing().with_for_update().first())
    def contar_activas(self, compra_id: int) -> int:
        return self.db.query(func.count(Entrada.id)).filter(
            Entrada.compra_id == compra_id,
            Entrada.estatus == EstatusMovimiento.ACTIVA.value,
        ).scalar() or 0
    def list(self, estatus: str | None = None, material_id: int | None = None, compra_id: int | None = None):
        q = self.db.query(Entrada).options(joinedload(Entrada.material), joinedload(Entrada.compra))
        if estatus:
            q = q.filter(Entrada.estatus == estatus)
        if material_id:
            q = q.filter(Entrada.material_id == material_id)
        if compra_id:
            q = q.filter(Entrada.compra_id == compra_id)
        return q.order_by(Entrada.created_at.desc(), Entrada.id.desc()).all()

class SalidaRepository:
    def __init__(self, db: Session): self.db = db
    def add(self, s: Salida): self.db.add(s); self.db.flush(); return s
    def get(self, id: int): return self.db.get(Salida, id)
    def get_for_update(self, id: int):
        return (self.db.query(Salida).filter(Salida.id == id)
                .populate_existing().with_for_update().first())
    def list(self, estatus: str | None = None, material_id: int | None = None):
        q = self.db.query(Salida).options(joinedload(Salida.material))
        if estatus:
            q = q.filter(Salida.estatus == estatus)
        if material_id:
            q = q.filter(Salida.material_id == material_id)
        return q.order_by(Salida.created_at.desc(), Salida.id.desc()).all()

class HistorialRepository:
    """Solo INSERT y lectura: la bitácora no se edita ni se borra."""
    def __init__(self, db: Session): self.db = db
    def add(self, h: InventarioHistorial): self.db.add(h); self.db.flush(); return h
    def page(self, material_id: int | None = None, limit: int = 100, offset: int = 0):
        q = self.db.query(InventarioHistorial)
        if material_id is not None:
            q = q.filter(InventarioHistorial.material_id == material_id)
        total = q.count()
        items = (q.order_by(InventarioHistorial.created_at.desc(), InventarioHistorial.id.desc())
                 .offset(offset).limit(limit).all())
        return total, items
    def por_material(self, material_id: int):
        return (self.db.query(InventarioHistorial)
                .filter(InventarioHistorial.material_id == material_id)
                .order_by(InventarioHistorial.id.asc()).all())
