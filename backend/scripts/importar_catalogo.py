#!/usr/bin/env python3
"""
Load the medication catalog (SAP export) into the database.

Usage examples:
  python scripts/importar_catalogo.py catalogo.xlsx
  python scripts/importar_catalogo.py catalogo.csv --dry-run

Expected columns: codigo_sap, nombre_medicamento, principio_activo, metodos
(method labels separated by "|", e.g. "Blister|Sachet").
"""

import argparse
import logging
import os
import sys

import pandas as pd
from dotenv import load_dotenv

load_dotenv()

# Add the parent directory to sys.path to allow imports from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, SessionLocal, engine
import models  # noqa: F401
from crud.catalogo import importar_catalogo

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("importar_catalogo")

COLUMNAS = ["codigo_sap", "nombre_medicamento", "principio_activo", "metodos"]


def leer_catalogo(ruta: str) -> list:
    """Read a CSV or Excel catalog into a list of row dicts (missing cells become None)."""
    if ruta.lower().endswith((".xlsx", ".xls")):
        df = pd.read_excel(ruta, dtype=str)
    else:
        df = pd.read_csv(ruta, dtype=str)
    df.columns = [str(c).strip().lower() for c in df.columns]
    faltan = {"codigo_sap", "nombre_medicamento"} - set(df.columns)
    if faltan:
        raise ValueError(f"Missing columns in {ruta}: {sorted(faltan)}")
    for columna in COLUMNAS:
        if columna not in df.columns:
            df[columna] = None
    df = df[COLUMNAS].astype(object).where(pd.notna(df[COLUMNAS]), None)
    return df.to_dict(orient="records")


def main():
    parser = argparse.ArgumentParser(description="Import the medication catalog from CSV or Excel")
    parser.add_argument("ruta", help="Path to the .csv or .xlsx file")
    parser.add_argument("--dry-run", action="store_true", help="Parse and report, do not write")
    args = parser.parse_args()

    filas = leer_catalogo(args.ruta)
    logger.info("Read %s rows from %s", len(filas), args.ruta)
    if args.dry_run:
        return

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        resumen = importar_catalogo(db, filas)
        logger.info("Import summary: %s", resumen)
    except Exception as e:
        db.rollback()
        logger.exception("Catalog import failed: %s", e)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
