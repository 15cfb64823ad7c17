"""
COLUMN MAPPING & NAMING STANDARDIZATION
IWC Work Order Breakdown Analysis

Purpose:
- Centralized work-order column naming
- Header normalization for CSV exports with inconsistent casing/spacing
- Display names for reports and plots
- Leakage detection for the breakdown classifier feature set

Author: Data Analytics Team
Date: 2026-10-19
"""

import re

import pandas as pd

from config import DURATION_COLUMN, LABEL_COLUMN

# ============================================================================
# MASTER COLUMN MAPPING (raw header → display name)
# ============================================================================

# This is the single source of truth for column naming
# All pipeline scripts should import from here

COLUMN_DISPLAY_NAMES = {
    # Identifiers
    'ORDER_ID': 'Order ID',
    'PLANT_ID': 'Plant',
    'EQUIPMENT_ID': 'Equipment',
    'MAINTENANCE_PLAN': 'Maintenance Plan',
    'MAINTENANCE_ITEM': 'Maintenance Item',

    # Location
    'FUNCTIONAL_LOC': 'Functional Location',
    'FUNCTIONAL_AREA_NODE_1_MODIFIED': 'Functional Area (L1)',
    'FUNCTIONAL_AREA_NODE_2_MODIFIED': 'Functional Area (L2)',
    'FUNCTIONAL_AREA_NODE_3_MODIFIED': 'Functional Area (L3)',
    'FUNCTIONAL_AREA_NODE_4_MODIFIED': 'Functional Area (L4)',
    'FUNCTIONAL_AREA_NODE_5_MODIFIED': 'Functional Area (L5)',

    # Work order content
    'ORDER_DESCRIPTION': 'Order Description',
    'MAINTENANCE_TYPE_DESCRIPTION': 'Maintenance Type',
    'MAINTENANCE_ACTIVITY_TYPE': 'Activity Type',
    'ACTUAL_WORK_IN_MINUTES': 'Actual Work (min)',

    # Dates
    'EXECUTION_START_DATE': 'Execution Start',
    'EXECUTION_FINISH_DATE': 'Execution Finish',
    'EQUIP_VALID_FROM': 'Equipment Valid From',
    'EQUIP_VALID_TO': 'Equipment Valid To',

    # Equipment master data
    'EQUIP_CAT_DESC': 'Equipment Category',
    'EQUIPMENT_DESC': 'Equipment Description',

    # Derived
    'major_breakdown': 'Major Breakdown',
}

# ============================================================================
# LEAKAGE PATTERNS
# ============================================================================

# The label is a function of the work duration, so any duration-like column
# leaks the target into the feature set.
LEAKAGE_PATTERNS = {
    'target_source': [DURATION_COLUMN, 'ACTUAL_WORK', 'WORK_IN_MINUTES', 'DURATION'],
    'target': [LABEL_COLUMN],
}

# ============================================================================
# FEATURE CATEGORIES (for reporting)
# ============================================================================

FEATURE_CATEGORIES = {
    'Identifier': ['_ID', 'PLAN', 'ITEM'],
    'Date': ['DATE', 'VALID_FROM', 'VALID_TO'],
    'Location': ['FUNCTIONAL_LOC', 'FUNCTIONAL_AREA'],
    'Maintenance': ['MAINTENANCE_TYPE', 'ACTIVITY_TYPE', 'ORDER_DESCRIPTION'],
    'Equipment': ['EQUIP'],
}


def normalize_column_name(name):
    """Normalize a raw CSV header: strip, upper-case, spaces/dashes → underscores."""
    normalized = str(name).strip().upper()
    normalized = re.sub(r'[\s\-]+', '_', normalized)
    # Keep the derived label in its canonical lower-case spelling
    if normalized == LABEL_COLUMN.upper():
        return LABEL_COLUMN
    return normalized


def normalize_column_names(df, inplace=False):
    """
    Normalize all DataFrame headers with normalize_column_name

    Args:
        df: pandas DataFrame
        inplace: If True, modify df in place

    Returns:
        DataFrame with normalized column names
    """
    if not inplace:
        df = df.copy()

    rename_dict = {col: normalize_column_name(col) for col in df.columns
                   if normalize_column_name(col) != col}

    if rename_dict:
        df.rename(columns=rename_dict, inplace=True)

    return df


def get_display_name(column_name):
    """Get report display name for a column (falls back to the column name)"""
    return COLUMN_DISPLAY_NAMES.get(column_name, column_name)


def detect_leakage_pattern(column_name):
    """
    Detect if a column name matches leakage patterns

    Returns:
        tuple: (is_leaky, pattern_type)
    """
    col_upper = column_name.upper()

    for pattern_type, patterns in LEAKAGE_PATTERNS.items():
        for pattern in patterns:
            if pattern.upper() in col_upper:
                return (True, pattern_type)

    return (False, None)


def categorize_feature(column_name):
    """Return the reporting category of a feature column"""
    col_upper = column_name.upper()

    for category, patterns in FEATURE_CATEGORIES.items():
        if any(pattern in col_upper for pattern in patterns):
            return category

    return 'Other'


def format_feature_importance(importance_df, feature_col='Feature'):
    """Add display name and category columns to a feature importance table"""
    formatted = importance_df.copy()
    # Expanded date features (e.g. EXECUTION_START_DATE_MONTH) map back to their source column
    source = formatted[feature_col].str.replace(r'_(YEAR|MONTH|DAYOFWEEK)$', '', regex=True)
    formatted.insert(1, 'Display_Name', [
        get_display_name(src) if src == feat else f"{get_display_name(src)} ({feat[len(src) + 1:].lower()})"
        for feat, src in zip(formatted[feature_col], source)
    ])
    formatted.insert(2, 'Category', source.map(categorize_feature))
    return formatted


def create_display_df(df):
    """Return a copy of df with display-name headers (for printed reports)"""
    return pd.DataFrame(df).rename(columns=get_display_name)
