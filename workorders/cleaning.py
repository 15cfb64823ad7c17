"""
WORK ORDER CLEANING & LABELING

- clean_work_orders: drop records without a usable duration or equipment id,
  then drop identifier columns that carry no signal for modeling
- label_major_breakdowns: derive the binary major_breakdown label

Both functions return new DataFrames and never modify their input.
"""

import pandas as pd

from config import (
    DURATION_COLUMN,
    EQUIPMENT_ID_COLUMN,
    ID_COLUMNS_TO_DROP,
    MISSING_ID_TOKENS,
    LABEL_COLUMN,
    BREAKDOWN_THRESHOLD_MINUTES,
)
from logger import get_logger
from pipeline_validation import validate_required_columns

logger = get_logger(__name__)


def normalize_equipment_ids(ids, missing_tokens=MISSING_ID_TOKENS):
    """Strip equipment ids and turn blank / literal 'NA' values into missing."""
    stripped = ids.where(ids.isna(), ids.astype(str).str.strip())
    return stripped.mask(stripped.isin(missing_tokens))


def clean_work_orders(df, drop_columns=ID_COLUMNS_TO_DROP,
                      duration_col=DURATION_COLUMN, equipment_col=EQUIPMENT_ID_COLUMN):
    """
    Remove work orders that cannot be labeled or attributed to equipment.

    Steps:
    1. Normalize empty-string and literal "NA" equipment ids to missing,
       coerce non-numeric durations to missing
    2. Drop records missing duration
    3. Drop records missing equipment id
    4. Drop identifier columns irrelevant to modeling (absent ones are ignored)

    An empty result is not an error here; it is logged and rejected by the
    sampler before any model is fit.

    Raises:
        ValidationError: If the duration or equipment id column is absent
    """
    validate_required_columns(df, 'work orders', [duration_col, equipment_col])

    cleaned = df.copy()
    cleaned[equipment_col] = normalize_equipment_ids(cleaned[equipment_col])
    cleaned[duration_col] = pd.to_numeric(cleaned[duration_col], errors='coerce')

    n_start = len(cleaned)
    cleaned = cleaned[cleaned[duration_col].notna()]
    n_no_duration = n_start - len(cleaned)

    n_before_ids = len(cleaned)
    cleaned = cleaned[cleaned[equipment_col].notna()]
    n_no_equipment = n_before_ids - len(cleaned)

    to_drop = [col for col in drop_columns
               if col in cleaned.columns and col not in (duration_col, equipment_col)]
    cleaned = cleaned.drop(columns=to_drop)

    logger.info(
        f"Cleaning: {n_start:,} → {len(cleaned):,} work orders "
        f"({n_no_duration:,} missing duration, {n_no_equipment:,} missing equipment id)"
    )
    if to_drop:
        logger.debug(f"Dropped identifier columns: {to_drop}")
    if cleaned.empty:
        logger.warning("No work orders left after cleaning")

    return cleaned


def label_major_breakdowns(df, threshold=BREAKDOWN_THRESHOLD_MINUTES,
                           duration_col=DURATION_COLUMN, label_col=LABEL_COLUMN):
    """
    Add the major_breakdown label: duration > threshold (strictly greater).

    The label is stored as a two-level categorical [False, True] so it is
    treated as a class, not a number, downstream.
    """
    labeled = df.copy()
    is_major = pd.to_numeric(labeled[duration_col], errors='coerce') > threshold
    labeled[label_col] = pd.Categorical(is_major, categories=[False, True])

    if len(labeled):
        logger.info(
            f"Labeled {len(labeled):,} work orders: {int(is_major.sum()):,} major breakdowns "
            f"(> {threshold} min, {is_major.mean()*100:.1f}%)"
        )
    return labeled
