"""
API de Inventario - Almacén de obra
===================================

Compra → Entrada → Salida, más Ajuste manual.
Cada POST ejecuta un comando en su propia transacción (InventarioService);
los GET son consultas directas.
"""
import logging
from fastapi import APIRouter, HTTPException, Query, Depends
from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy.orm import Session
from typing import List, Optional
from ...dependencies import get_db
from ...infrastructure.unit_of_work import UnitOfWork
from ...application.services_inventario import (
    InventarioService, InventarioError, NoEncontradoError, Comando,
)
from ...application.services_materiales import CrearMaterial, ActualizarMaterial, EliminarMaterial
from ...application.services_compras import CrearCompra, CancelarCompra
from ...application.services_entradas import CrearEntrada, CancelarEntrada
from ...application.services_salidas import CrearSalida, CancelarSalida
from ...application.services_ajuste import AjustarMaterial
from ...application.services_historial import consultar_historial
from ...application import queries_inventario as queries
from ...domain.enums import EstatusCompra, EstatusMovimiento

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventario", tags=["inventario"])


def _ejecutar(db: Session, comando: Comando):
    """Corre el comando y traduce errores de negocio a HTTP (404 / 400)."""
    uow = UnitOfWork(db)
    try:
        return InventarioService(uow).ejecutar(comando)
    except NoEncontradoError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InventarioError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error inesperado en {comando.describir()}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error inesperado: {str(e)}")


def _consultar(fn, *args, **kwargs):
    try:
        return fn(*args, **kwargs)
    except NoEncontradoError as e:
        raise HTTPException(status_code=404, detail=str(e))

# ===== MATERIALES =====

class MaterialIn(BaseModel):
    nombre: str
    codigo: str | None = None
    unidad: str | None = None  # PZA, M3, KG, BULTO, etc.
    stock_minimo: Decimal = Decimal("0")

class MaterialUpdate(BaseModel):
    codigo: str | None = None
    nombre: str | None = None
    unidad: str | None = None
    activo: bool | None = None

class MaterialOut(BaseModel):
    id: int
    codigo: str | None
    nombre: str
    unidad: str | None
    stock_fisico: Decimal
    stock_virtual: Decimal
    stock_minimo: Decimal
    stock_disponible: Decimal
    bajo_minimo: bool
    activo: bool

    class Config:
        from_attributes = True

@router.get("/materiales", response_model=List[MaterialOut])
def list_materiales(
    activos: bool = Query(True, description="Solo materiales activos"),
    db: Session = Depends(get_db),
):
    uow = UnitOfWork(db)
    return [MaterialOut.model_validate(m) for m in queries.listar_materiales(uow, activos=activos)]

@router.post("/materiales", response_model=MaterialOut)
def create_material(payload: MaterialIn, db: Session = Depends(get_db)):
    material = _ejecutar(db, CrearMaterial(
        nombre=payload.nombre,
        codigo=payload.codigo,
        unidad=payload.unidad,
        stock_minimo=payload.stock_minimo,
    ))
    return MaterialOut.model_validate(material)

@router.get("/materiales/{material_id}", response_model=MaterialOut)
def get_material(material_id: int, db: Session = Depends(get_db)):
    material = _consultar(queries.obtener_material, UnitOfWork(db), material_id)
    return MaterialOut.model_validate(material)

@router.patch("/materiales/{material_id}", response_model=MaterialOut)
def update_material(material_id: int, payload: MaterialUpdate, db: Session = Depends(get_db)):
    """Actualiza solo campos descriptivos; el stock se mueve con compras, entradas, salidas y ajustes."""
    material = _ejecutar(db, ActualizarMaterial(material_id=material_id, **payload.model_dump(exclude_unset=True)))
    return MaterialOut.model_validate(material)

@router.delete("/materiales/{material_id}")
def delete_material(material_id: int, db: Session = Depends(get_db)):
    """Elimina el material o, si ya tiene movimientos, lo desactiva."""
    return _ejecutar(db, EliminarMaterial(material_id=material_id))

# ===== ALMACÉN =====

class AjusteIn(BaseModel):
    material_id: int
    stock_fisico: Decimal | None = None
    stock_minimo: Decimal | None = None
    notas: str | None = None

@router.get("/almacen", response_model=List[MaterialOut])
def get_almacen(db: Session = Depends(get_db)):
    """Existencias de los materiales activos (físico, virtual, disponible)."""
    uow = UnitOfWork(db)
    return [MaterialOut.model_validate(m) for m in queries.listar_materiales(uow, activos=True)]

@router.post("/almacen/ajuste", response_model=MaterialOut)
def ajustar_almacen(payload: AjusteIn, db: Session = Depends(get_db)):
    """
    Ajuste manual de stock físico y/o stock mínimo.
    Cambiar el stock físico exige motivo (notas) y queda en el historial.
    """
    material = _ejecutar(db, AjustarMaterial(
        material_id=payload.material_id,
        stock_fisico=payload.stock_fisico,
        stock_minimo=payload.stock_minimo,
        notas=payload.notas,
    ))
    return MaterialOut.model_validate(material)

# ===== COMPRAS =====

class CompraIn(BaseModel):
    material_id: int
    cantidad: Decimal
    precio_unitario: Decimal
    fecha: date | None = None
    proveedor_id: int | None = None
    notas: str | None = None

class CompraOut(BaseModel):
    id: int
    folio: str
    material_id: int
    material_nombre: str | None = None
    material_unidad: str | None = None
    proveedor_id: int | None
    cantidad: Decimal
    cantidad_recibida: Decimal
    cantidad_pendiente: Decimal
    precio_unitario: Decimal
    total: Decimal
    fecha: date
    notas: str | None
    estatus: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True

@router.get("/compras", response_model=List[CompraOut])
def list_compras(
    estatus: Optional[EstatusCompra] = Query(None, description="activa, completada o cancelada"),
    material_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    uow = UnitOfWork(db)
    compras = queries.listar_compras(uow, estatus=estatus.value if estatus else None, material_id=material_id)
    return [CompraOut.model_validate(c) for c in compras]

@router.post("/compras", response_model=CompraOut)
def create_compra(payload: CompraIn, db: Session = Depends(get_db)):
    """Registra una compra: suma al stock virtual del material."""
    compra = _ejecutar(db, CrearCompra(
        material_id=payload.material_id,
        cantidad=payload.cantidad,
        precio_unitario=payload.precio_unitario,
        fecha=payload.fecha or date.today(),
        proveedor_id=payload.proveedor_id,
        notas=payload.notas,
    ))
    return CompraOut.model_validate(compra)

@router.get("/compras/{compra_id}", response_model=CompraOut)
def get_compra(compra_id: int, db: Session = Depends(get_db)):
    return CompraOut.model_validate(_consultar(queries.obtener_compra, UnitOfWork(db), compra_id))

@router.post("/compras/{compra_id}/cancelar", response_model=CompraOut)
def cancel_compra(compra_id: int, db: Session = Depends(get_db)):
    """Cancela la compra y libera del stock virtual lo no recibido."""
    return CompraOut.model_validate(_ejecutar(db, CancelarCompra(compra_id=compra_id)))

# ===== ENTRADAS =====

class EntradaIn(BaseModel):
    compra_id: int
    cantidad: Decimal
    fecha: date | None = None
    notas: str | None = None

class EntradaOut(BaseModel):
    id: int
    folio: str
    compra_id: int
    compra_folio: str | None = None
    material_id: int
    material_nombre: str | None = None
    material_unidad: str | None = None
    cantidad: Decimal
    fecha: date
    notas: str | None
    estatus: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True

@router.get("/entradas", response_model=List[EntradaOut])
def list_entradas(
    estatus: Optional[EstatusMovimiento] = Query(None, description="activa o cancelada"),
    material_id: Optional[int] = Query(None),
    compra_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    uow = UnitOfWork(db)
    entradas = queries.listar_entradas(
        uow, estatus=estatus.value if estatus else None, material_id=material_id, compra_id=compra_id,
    )
    return [EntradaOut.model_validate(e) for e in entradas]

@router.post("/entradas", response_model=EntradaOut)
def create_entrada(payload: EntradaIn, db: Session = Depends(get_db)):
    """Recibe material de una compra activa: pasa de stock virtual a físico."""
    entrada = _ejecutar(db, CrearEntrada(
        compra_id=payload.compra_id,
        cantidad=payload.cantidad,
        fecha=payload.fecha or date.today(),
        notas=payload.notas,
    ))
    return EntradaOut.model_validate(entrada)

@router.get("/entradas/{entrada_id}", response_model=EntradaOut)
def get_entrada(entrada_id: int, db: Session = Depends(get_db)):
    return EntradaOut.model_validate(_consultar(queries.obtener_entrada, UnitOfWork(db), entrada_id))

@router.post("/entradas/{entrada_id}/cancelar", response_model=EntradaOut)
def cancel_entrada(entrada_id: int, db: Session = Depends(get_db)):
    return EntradaOut.model_validate(_ejecutar(db, CancelarEntrada(entrada_id=entrada_id)))

# ===== SALIDAS =====

class SalidaIn(BaseModel):
    material_id: int
    cantidad: Decimal
    referencia: str
    fecha: date | None = None
    notas: str | None = None

class SalidaOut(BaseModel):
    id: int
    folio: str
    material_id: int
    material_nombre: str | None = None
    material_unidad: str | None = None
    cantidad: Decimal
    referencia: str
    fecha: date
    notas: str | None
    estatus: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True

@router.get("/salidas", response_model=List[SalidaOut])
def list_salidas(
    estatus: Optional[EstatusMovimiento] = Query(None, description="activa o cancelada"),
    material_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    uow = UnitOfWork(db)
    salidas = queries.listar_salidas(uow, estatus=estatus.value if estatus else None, material_id=material_id)
    return [SalidaOut.model_validate(s) for s in salidas]

@router.post("/salidas", response_model=SalidaOut)
def create_salida(payload: SalidaIn, db: Session = Depends(get_db)):
    salida = _ejecutar(db, CrearSalida(
        material_id=payload.material_id,
        cantidad=payload.cantidad,
        referencia=payload.referencia,
        fecha=payload.fecha or date.today(),
        notas=payload.notas,
    ))
    return SalidaOut.model_validate(salida)

@router.get("/salidas/{salida_id}", response_model=SalidaOut)
def get_salida(salida_id: int, db: Session = Depends(get_db)):
    return SalidaOut.model_validate(_consultar(queries.obtener_salida, UnitOfWork(db), salida_id))

@router.post("/salidas/{salida_id}/cancelar", response_model=SalidaOut)
def cancel_salida(salida_id: int, db: Session = Depends(get_db)):
    return SalidaOut.model_validate(_ejecutar(db, CancelarSalida(salida_id=salida_id)))

# ===== HISTORIAL =====

class HistorialOut(BaseModel):
    id: int
    material_id: int
    tipo: str
    referencia_id: int | None
    cantidad: Decimal
    stock_fisico_anterior: Decimal
    stock_fisico_nuevo: Decimal
    stock_virtual_anterior: Decimal
    stock_virtual_nuevo: Decimal
    delta_fisico: Decimal
    delta_virtual: Decimal
    notas: str | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class HistorialPage(BaseModel):
    total: int
    items: List[HistorialOut]

@router.get("/historial", response_model=HistorialPage)
def get_historial(
    material_id: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Historial de movimientos de stock, más reciente primero."""
    pagina = consultar_historial(UnitOfWork(db), material_id=material_id, limit=limit, offset=offset)
    return HistorialPage(
        total=pagina["total"],
        items=[HistorialOut.model_validate(h) for h in pagina["items"]],
    )
