"""
Work order CSV loading and saving.
"""

from pathlib import Path

import pandas as pd

from config import DURATION_COLUMN, EQUIPMENT_ID_COLUMN, ID_COLUMNS_TO_DROP, LABEL_COLUMN
from column_mapping import normalize_column_name, normalize_column_names
from logger import get_logger
from pipeline_validation import validate_file_exists, validate_required_columns

logger = get_logger(__name__)

# Identifiers look numeric in the export but must keep leading zeros
STRING_COLUMNS = [EQUIPMENT_ID_COLUMN, *ID_COLUMNS_TO_DROP, 'MAINTENANCE_PLAN', 'MAINTENANCE_ITEM']


def load_work_orders(path, required_columns=(DURATION_COLUMN, EQUIPMENT_ID_COLUMN)):
    """
    Read a work order CSV into a DataFrame with normalized headers.

    Raises:
        ValidationError: If the file or a required column is missing
    """
    path = Path(path)
    validate_file_exists(path)

    header = pd.read_csv(path, nrows=0).columns
    dtype = {raw: str for raw in header if normalize_column_name(raw) in STRING_COLUMNS}

    df = pd.read_csv(path, dtype=dtype, low_memory=False)
    df = normalize_column_names(df)
    validate_required_columns(df, path.name, list(required_columns))

    if LABEL_COLUMN in df.columns:
        # A label stored in a previous export is recomputed downstream
        df = df.drop(columns=[LABEL_COLUMN])

    logger.info(f"Loaded {path}: {len(df):,} rows × {len(df.columns)} columns")
    return df


def save_work_orders(df, path):
    """Write a work order DataFrame to CSV (UTF-8, no index)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding='utf-8')
    logger.info(f"Saved {len(df):,} rows to {path}")
    return path
