"""
Servicios de Inventario - Motor de flujo de stock
=================================================

Compra → Entrada → Salida, con Ajuste como canal lateral.

Cada operación es un comando (CrearCompra, CancelarEntrada, ...) que se
ejecuta dentro de UNA transacción del UnitOfWork: validar, mover contadores,
insertar el registro y la línea de historial; o nada.

PRINCIPIOS:
- Dos contadores por material: stock_fisico y stock_virtual
- Ningún contador queda negativo: las operaciones directas se rechazan,
  las reversiones se recortan a cero
- Una cancelación invierte exactamente lo que registró su creación
- Cada cambio de stock deja una línea en InventarioHistorial
"""
from decimal import Decimal, InvalidOperation
from typing import Any
import logging

from ..infrastructure.unit_of_work import UnitOfWork
from ..domain.models_inventario import Material

logger = logging.getLogger(__name__)

CERO = Decimal("0")


class InventarioError(Exception):
    """Excepción base para errores del módulo de inventario"""
    pass


class NoEncontradoError(InventarioError):
    """Material, compra, entrada o salida inexistente"""
    pass


class CantidadInvalidaError(InventarioError):
    """Cantidad o precio <= 0, o mayor a lo pendiente/disponible"""
    pass


class EstadoInvalidoError(InventarioError):
    """Operación sobre un registro cancelado o con estatus incorrecto"""
    pass


class PrecondicionError(InventarioError):
    """Cancelar una compra que aún tiene entradas activas"""
    pass


class JustificacionRequeridaError(InventarioError):
    """Ajuste de stock físico sin motivo"""
    pass


class DatosInvalidosError(InventarioError):
    """Datos de entrada incompletos o duplicados"""
    pass


ESCALA_CANTIDAD = Decimal("0.0001")  # Numeric(12, 4)
ESCALA_PRECIO = Decimal("0.01")  # Numeric(14, 2)
MAXIMO_CANTIDAD = Decimal("100000000")  # 8 dígitos enteros


def a_decimal(valor: Any) -> Decimal:
    if isinstance(valor, Decimal):
        return valor
    try:
        return Decimal(str(valor))
    except InvalidOperation:
        raise CantidadInvalidaError(f"Valor numérico inválido: {valor}")


def _en_escala(valor: Any, escala: Decimal, campo: str) -> Decimal:
    """
    Convierte y exige que el valor quepa exacto en la columna.
    Un valor que la base redondearía se rechaza: lo guardado debe ser lo validado.
    """
    valor = a_decimal(valor)
    if not valor.is_finite():
        raise CantidadInvalidaError(f"{campo} inválido: {valor}")
    if abs(valor) >= MAXIMO_CANTIDAD:
        raise CantidadInvalidaError(f"{campo} fuera de rango: {valor}")
    if valor != valor.quantize(escala):
        raise CantidadInvalidaError(f"{campo} admite como máximo {-escala.as_tuple().exponent} decimales: {valor}")
    return valor


def a_cantidad(valor: Any, campo: str = "La cantidad") -> Decimal:
    return _en_escala(valor, ESCALA_CANTIDAD, campo)


def a_precio(valor: Any) -> Decimal:
    return _en_escala(valor, ESCALA_PRECIO, "El precio unitario")


def recortar(valor: Decimal) -> Decimal:
    """Recorte a cero para reversiones."""
    return max(CERO, valor)


def obtener_material_activo(uow: UnitOfWork, material_id: int, bloquear: bool = True) -> Material:
    """Valida que el material existe y está activo"""
    material = uow.materiales.get_for_update(material_id) if bloquear else uow.materiales.get(material_id)
    if not material or not material.activo:
        raise NoEncontradoError(f"Material {material_id} no encontrado o inactivo")
    return material


def obtener_material(uow: UnitOfWork, material_id: int) -> Material:
    """Material con bloqueo de fila, activo o no (reversiones)."""
    material = uow.materiales.get_for_update(material_id)
    if not material:
        raise NoEncontradoError(f"Material {material_id} no encontrado")
    return material


class Comando:
    """Operación atómica del almacén. Nunca hace commit por su cuenta."""

    def ejecutar(self, uow: UnitOfWork):
        raise NotImplementedError

    def describir(self) -> str:
        return repr(self)


class InventarioService:
    """
    Servicio principal del módulo de inventario.

    Corre cada comando dentro de su propia transacción.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def ejecutar(self, comando: Comando):
        try:
            with self.uow.transaction():
                resultado = comando.ejecutar(self.uow)
        except InventarioError as e:
            logger.warning(f"{comando.describir()} rechazado: {e}")
            raise
        logger.info(f"{comando.describir()} confirmado")
        return resultado
