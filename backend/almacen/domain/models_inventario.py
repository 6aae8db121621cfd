"""
Modelos del Dominio de Inventario
==================================

Entidades del almacén de obra:
- Material (contadores de stock físico y virtual)
- Compra (orden de compra, reserva stock virtual)
- Entrada (recepción física contra una compra)
- Salida (consumo/entrega de material)
- InventarioHistorial (bitácora inmutable de cada cambio de stock)
"""
from sqlalchemy import Integer, String, Boolean, ForeignKey, Numeric, Date, DateTime, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import datetime, date
from decimal import Decimal
from ..db import Base
from .enums import EstatusCompra, EstatusMovimiento


class Material(Base):
    """
    Material del almacén
    Un solo depósito por material: stock_fisico (en almacén) y
    stock_virtual (comprado, pendiente de recibir).
    """
    __tablename__ = "materiales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    codigo: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True, index=True)
    nombre: Mapped[str] = mapped_column(String(200))
    unidad: Mapped[str | None] = mapped_column(String(20), nullable=True)  # PZA, M3, KG, BULTO, etc.
    stock_fisico: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0"))
    stock_virtual: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0"))
    stock_minimo: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0"))
    activo: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    compras = relationship("Compra", back_populates="material")
    salidas = relationship("Salida", back_populates="material")

    @property
    def stock_disponible(self) -> Decimal:
        return (self.stock_fisico or Decimal("0")) + (self.stock_virtual or Decimal("0"))

    @property
    def bajo_minimo(self) -> bool:
        return (self.stock_fisico or Decimal("0")) < (self.stock_minimo or Decimal("0"))


class Compra(Base):
    """
    Orden de compra
    Estatus: activa → completada (recibida por completo) | cancelada
    """
    __tablename__ = "compras"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    folio: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    material_id: Mapped[int] = mapped_column(ForeignKey("materiales.id"), index=True)
    proveedor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Catálogo externo
    cantidad: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    cantidad_recibida: Mapped[Decimal] = mapped_column(Numeric(12, 4), default=Decimal("0"))
    precio_unitario: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    total: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    fecha: Mapped[date] = mapped_column(Date, index=True)
    notas: Mapped[str | None] = mapped_column(Text, nullable=True)
    estatus: Mapped[str] = mapped_column(String(20), default=EstatusCompra.ACTIVA.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    material = relationship("Material", back_populates="compras")
    entradas = relationship("Entrada", back_populates="compra")

    @property
    def cantidad_pendiente(self) -> Decimal:
        return self.cantidad - (self.cantidad_recibida or Decimal("0"))

    @property
    def material_nombre(self) -> str | None:
        return self.material.nombre if self.material else None

    @property
    def material_unidad(self) -> str | None:
        return self.material.unidad if self.material else None


class Entrada(Base):
    """
    Entrada (recepción física) contra una compra activa.
    material_id se copia de la compra.
    """
    __tablename__ = "entradas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    folio: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    compra_id: Mapped[int] = mapped_column(ForeignKey("compras.id"), index=True)
    material_id: Mapped[int] = mapped_column(ForeignKey("materiales.id"), index=True)
    cantidad: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    fecha: Mapped[date] = mapped_column(Date, index=True)
    notas: Mapped[str | None] = mapped_column(Text, nullable=True)
    estatus: Mapped[str] = mapped_column(String(20), default=EstatusMovimiento.ACTIVA.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    compra = relationship("Compra", back_populates="entradas")
    material = relationship("Material")

    # Campos de despliegue para listados
    @property
    def material_nombre(self) -> str | None:
        return self.material.nombre if self.material else None

    @property
    def material_unidad(self) -> str | None:
        return self.material.unidad if self.material else None

    @property
    def compra_folio(self) -> str | None:
        return self.compra.folio if self.compra else None


class Salida(Base):
    """Salida de material hacia una obra/consumidor (referencia obligatoria)."""
    __tablename__ = "salidas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    folio: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    material_id: Mapped[int] = mapped_column(ForeignKey("materiales.id"), index=True)
    cantidad: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    referencia: Mapped[str] = mapped_column(String(200))
    fecha: Mapped[date] = mapped_column(Date, index=True)
    notas: Mapped[str | None] = mapped_column(Text, nullable=True)
    estatus: Mapped[str] = mapped_column(String(20), default=EstatusMovimiento.ACTIVA.value, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    material = relationship("Material", back_populates="salidas")

    @property
    def material_nombre(self) -> str | None:
        return self.material.nombre if self.material else None

    @property
    def material_unidad(self) -> str | None:
        return self.material.unidad if self.material else None


class InventarioHistorial(Base):
    """
    Bitácora de stock. Inmutable.
    Solo INSERT permitido. Prohibido UPDATE y DELETE.
    """
    __tablename__ = "inventario_historial"
    __table_args__ = {"comment": "Historial de inventario - inmutable"}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    material_id: Mapped[int] = mapped_column(ForeignKey("materiales.id"), index=True)
    tipo: Mapped[str] = mapped_column(String(30), index=True)  # TipoHistorial
    referencia_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # compra/entrada/salida de origen
    cantidad: Mapped[Decimal] = mapped_column(Numeric(12, 4))  # Con signo
    stock_fisico_anterior: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    stock_fisico_nuevo: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    stock_virtual_anterior: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    stock_virtual_nuevo: Mapped[Decimal] = mapped_column(Numeric(12, 4))
    notas: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)

    material = relationship("Material")

    @property
    def delta_fisico(self) -> Decimal:
        return self.stock_fisico_nuevo - self.stock_fisico_anterior

    @property
    def delta_virtual(self) -> Decimal:
        return self.stock_virtual_nuevo - self.stock_virtual_anterior
