"""
Servicio para generar folios de los movimientos de almacén.

Formato: [Prefijo]-[AAAAMMDD]-[Secuencial]
Ejemplo: COM-20250115-007 = Compra, 15 de enero de 2025, séptima del día

No existe contador aparte: el siguiente secuencial siempre se obtiene del
folio más alto ya registrado ese día, dentro de la transacción del INSERT.

Serialización por motor:
- PostgreSQL: pg_advisory_xact_lock por prefijo del día, liberado al commit/rollback
- SQLite: BEGIN IMMEDIATE (ver db.build_engine) ya deja un solo escritor
"""
import zlib
from sqlalchemy.orm import Session
from sqlalchemy import func, text
from datetime import date
from typing import Optional
from ..domain.enums import TipoFolio
from ..domain.models_inventario import Compra, Entrada, Salida


TIPO_TO_MODEL = {
    TipoFolio.COMPRA: Compra,
    TipoFolio.ENTRADA: Entrada,
    TipoFolio.SALIDA: Salida,
}

SECUENCIAL_DIGITS = 3


def clave_bloqueo(prefix: str) -> int:
    """Clave int32 estable del advisory lock para un prefijo (ej. "COM-20250115-")."""
    clave = zlib.crc32(prefix.encode("utf-8"))
    return clave - (1 << 32) if clave >= (1 << 31) else clave


def bloquear_secuencia(db: Session, prefix: str) -> None:
    """
    Serializa la generación de folios del mismo prefijo hasta el fin de la transacción.

    Bloquear la fila del último folio no alcanza: el primer folio del día no
    tiene fila que bloquear y dos transacciones leerían el mismo máximo.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(text("SELECT pg_advisory_xact_lock(:clave)"), {"clave": clave_bloqueo(prefix)})


def generate_folio(db: Session, tipo: TipoFolio, hoy: Optional[date] = None) -> str:
    """
    Genera el siguiente folio del día para un tipo de movimiento.

    Debe llamarse dentro de la misma transacción que inserta el registro.
    Los registros pendientes se envían (flush) antes de consultar, así dos
    movimientos creados en la misma transacción no comparten folio.

    Args:
        db: Sesión de base de datos
        tipo: Tipo de folio (COM, ENT, SAL)
        hoy: Fecha del folio (default: fecha actual)

    Returns:
        Folio (ej: "ENT-20250115-001")
    """
    tipo = TipoFolio(tipo)
    model = TIPO_TO_MODEL[tipo]
    hoy = hoy or date.today()
    prefix = f"{tipo.value}-{hoy.strftime('%Y%m%d')}-"

    db.flush()
    bloquear_secuencia(db, prefix)

    # El orden por longitud mantiene "1000" por encima de "999"
    last_folio = (
        db.query(model.folio)
        .filter(model.folio.like(f"{prefix}%"))
        .order_by(func.length(model.folio).desc(), model.folio.desc())
        .limit(1)
        .scalar()
    )

    next_secuential = 1
    if last_folio:
        parsed = parse_folio(last_folio)
        if parsed:
            next_secuential = parsed["secuencial"] + 1

    return f"{prefix}{str(next_secuential).zfill(SECUENCIAL_DIGITS)}"


def parse_folio(folio: str) -> Optional[dict]:
    """
    Parsea un folio y retorna sus componentes.

    Returns:
        Dict con {prefijo, fecha, secuencial} o None si el formato es inválido
    """
    if not folio:
        return None

    parts = folio.split('-')
    if len(parts) != 3:
        return None

    prefijo, fecha_txt, secuencial = parts
    if len(fecha_txt) != 8:
        return None
    try:
        return {
            "prefijo": prefijo,
            "fecha": date(int(fecha_txt[0:4]), int(fecha_txt[4:6]), int(fecha_txt[6:8])),
            "secuencial": int(secuencial),
        }
    except ValueError:
        return None
