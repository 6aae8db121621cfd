from enum import Enum

class EstatusCompra(str, Enum):
    ACTIVA = "activa"
    COMPLETADA = "completada"
    CANCELADA = "cancelada"

class EstatusMovimiento(str, Enum):
    """Estatus de entradas y salidas: activa → cancelada, sin retorno."""
    ACTIVA = "activa"
    CANCELADA = "cancelada"

class TipoHistorial(str, Enum):
    COMPRA = "compra"
    ENTRADA = "entrada"
    SALIDA = "salida"
    CANCELACION_COMPRA = "cancelacion_compra"
    CANCELACION_ENTRADA = "cancelacion_entrada"
    CANCELACION_SALIDA = "cancelacion_salida"
    AJUSTE = "ajuste"

class TipoFolio(str, Enum):
    COMPRA = "COM"
    ENTRADA = "ENT"
    SALIDA = "SAL"
