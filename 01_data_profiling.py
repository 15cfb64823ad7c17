"""
DATA PROFILING & CLEANING - IWC WORK ORDERS v1.0

Purpose:
- Profile the raw work order export (shape, types, missing values)
- Audit equipment ids and work durations before cleaning
- Clean work orders and write the hand-off file for EDA and modeling

Key Columns:
- Equipment ID: EQUIPMENT_ID (blank and literal "NA" count as missing)
- Duration: ACTUAL_WORK_IN_MINUTES (non-numeric counts as missing)
- Plant: PLANT_ID (kept in the hand-off file for plant-level EDA)

Input:  data/IWC_Work_Orders.csv
Output: data/cleaned_IWC_Work_Orders.csv, reports/data_quality_report.txt

Author: Data Analytics Team
Date: 2026
"""

import sys
from datetime import datetime

import pandas as pd

from config import (
    INPUT_FILE,
    CLEANED_FILE,
    PROFILING_REPORT_FILE,
    DURATION_COLUMN,
    EQUIPMENT_ID_COLUMN,
    PLANT_ID_COLUMN,
    ORDER_ID_COLUMN,
    MISSING_ID_TOKENS,
    BREAKDOWN_THRESHOLD_MINUTES,
    MIN_CLEANED_RECORDS,
    create_directories,
)
from logger import setup_logging, get_logger, log_script_start, log_script_end, log_dataframe_info
from pipeline_validation import ValidationError, validate_min_rows
from workorders import load_work_orders, save_work_orders, clean_work_orders
from workorders.profiling import profile_missing_values, summarize_downtime

SCRIPT_NAME = 'Data Profiling'

# Display settings
pd.set_option('display.max_columns', None)
pd.set_option('display.max_rows', 100)
pd.set_option('display.width', None)
pd.set_option('display.max_colwidth', 60)


def main():
    create_directories()
    setup_logging()
    logger = get_logger(__name__)
    start_time = datetime.now()
    log_script_start(logger, SCRIPT_NAME)

    print("="*100)
    print(" "*30 + "IWC WORK ORDER DATA PROFILING v1.0")
    print("="*100)

    # ============================================================================
    # 1. LOAD DATA
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 1: DATA LOADING")
    print("="*100)

    try:
        df = load_work_orders(INPUT_FILE)
    except ValidationError as e:
        logger.error(f"Cannot load work orders: {e}")
        print(f"\n❌ ERROR: {e}")
        print(f"\nPlease place the work order export at {INPUT_FILE}")
        return 1

    print(f"\n✓ Loaded: {INPUT_FILE}")
    print(f"Dataset Shape: {df.shape[0]:,} rows × {df.shape[1]} columns")
    print(f"Memory Usage: {df.memory_usage(deep=True).sum() / 1024**2:.2f} MB")
    log_dataframe_info(logger, df, "Raw work orders")

    report_lines = []
    report_lines.append("="*80)
    report_lines.append("DATA QUALITY REPORT - IWC WORK ORDERS")
    report_lines.append("="*80)
    report_lines.append(f"\nGenerated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    report_lines.append(f"Total Records: {df.shape[0]:,}")
    report_lines.append(f"Total Columns: {df.shape[1]}")

    # ============================================================================
    # 2. COLUMN OVERVIEW
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 2: COLUMN OVERVIEW")
    print("="*100)

    print(f"\n{'Column':<40} {'Type':<10} {'Non-null':>10} {'Unique':>10}")
    print("-"*74)
    for col in df.columns:
        print(f"{col:<40} {str(df[col].dtype):<10} {df[col].notna().sum():>10,} {df[col].nunique():>10,}")

    missing_df = profile_missing_values(df)
    report_lines.append("\nMISSING VALUES:")
    if len(missing_df) > 0:
        print(f"\nColumns with missing values: {len(missing_df)}")
        print(missing_df.to_string(index=False))
        report_lines.append(missing_df.to_string(index=False))
    else:
        print("\n✓ No missing values found!")
        report_lines.append("  none")

    # ============================================================================
    # 3. EQUIPMENT ID AUDIT
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 3: EQUIPMENT ID AUDIT")
    print("="*100)

    raw_ids = df[EQUIPMENT_ID_COLUMN]
    stripped = raw_ids.dropna().astype(str).str.strip()
    n_null = int(raw_ids.isna().sum())
    n_token = int(stripped.isin(MISSING_ID_TOKENS).sum())
    n_valid = len(df) - n_null - n_token

    print(f"\n📊 {EQUIPMENT_ID_COLUMN} Statistics:")
    print(f"   Null: {n_null:,} ({n_null/max(len(df), 1)*100:.1f}%)")
    print(f"   Blank / 'NA': {n_token:,} ({n_token/max(len(df), 1)*100:.1f}%)")
    print(f"   Usable: {n_valid:,} ({n_valid/max(len(df), 1)*100:.1f}%)")
    print(f"   Unique equipment: {stripped[~stripped.isin(MISSING_ID_TOKENS)].nunique():,}")
    report_lines.append(f"\nEquipment ids usable: {n_valid:,} / {len(df):,}")

    if PLANT_ID_COLUMN in df.columns:
        print(f"\n   Plants: {df[PLANT_ID_COLUMN].nunique():,}")
    if ORDER_ID_COLUMN in df.columns:
        n_dup = int(df[ORDER_ID_COLUMN].duplicated().sum())
        if n_dup > 0:
            print(f"   ⚠️  {n_dup:,} duplicate {ORDER_ID_COLUMN} values")
            logger.warning(f"{n_dup:,} duplicate {ORDER_ID_COLUMN} values in raw export")
        else:
            print(f"   ✓ {ORDER_ID_COLUMN} is unique")

    # ============================================================================
    # 4. DURATION AUDIT
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 4: WORK DURATION AUDIT")
    print("="*100)

    durations = pd.to_numeric(df[DURATION_COLUMN], errors='coerce')
    n_malformed = int((durations.isna() & df[DURATION_COLUMN].notna()).sum())
    print(f"\n   Missing durations: {int(df[DURATION_COLUMN].isna().sum()):,}")
    print(f"   Non-numeric durations: {n_malformed:,}")
    print(f"   Zero durations: {int((durations == 0).sum()):,}")
    print(f"   Negative durations: {int((durations < 0).sum()):,}")

    downtime = summarize_downtime(df)
    print(f"\n{downtime.to_string()}")
    report_lines.append(f"\nDURATION (minutes):\n{downtime.to_string()}")

    # ============================================================================
    # 5. CLEAN & SAVE HAND-OFF FILE
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 5: CLEANING")
    print("="*100)

    # PLANT_ID stays for the plant-level EDA; the classifier drops it itself
    cleaned = clean_work_orders(df, drop_columns=[ORDER_ID_COLUMN])
    removed = len(df) - len(cleaned)
    print(f"\n✓ Cleaned: {len(cleaned):,} work orders kept, {removed:,} removed")
    print(f"   Major breakdowns (> {BREAKDOWN_THRESHOLD_MINUTES} min): "
          f"{int((cleaned[DURATION_COLUMN] > BREAKDOWN_THRESHOLD_MINUTES).sum()):,}")
    report_lines.append(f"\nCleaned records: {len(cleaned):,} (removed {removed:,})")

    try:
        validate_min_rows(cleaned, MIN_CLEANED_RECORDS, 'cleaning')
    except ValidationError as e:
        logger.error(str(e))
        print(f"\n❌ ERROR: {e}")
        return 1

    save_work_orders(cleaned, CLEANED_FILE)
    print(f"✓ Saved: {CLEANED_FILE}")

    PROFILING_REPORT_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(PROFILING_REPORT_FILE, 'w', encoding='utf-8') as f:
        f.write('\n'.join(report_lines) + '\n')
    print(f"✓ Saved: {PROFILING_REPORT_FILE}")

    print("\n" + "="*100)
    print(" "*35 + "DATA PROFILING COMPLETE")
    print("="*100)
    log_script_end(logger, SCRIPT_NAME, start_time)
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except ValidationError as e:
        get_logger(__name__).error(f"{SCRIPT_NAME} failed: {e}")
        print(f"\n❌ VALIDATION FAILED: {e}", file=sys.stderr)
        sys.exit(1)
