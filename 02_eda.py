"""
EXPLORATORY DATA ANALYSIS (EDA) - IWC WORK ORDERS

Purpose:
- Profile downtime durations and the major breakdown share
- Rank plants by breakdown frequency
- Compare maintenance types and planned vs unplanned activity
- Track monthly work order volume

Input:  data/cleaned_IWC_Work_Orders.csv (from 01_data_profiling.py)
Output: results/*.csv, outputs/eda/*.png

Author: Data Analytics Team
Date: 2026
"""

import sys
from datetime import datetime

import pandas as pd

from config import (
    CLEANED_FILE,
    OUTPUT_DIR,
    DOWNTIME_SUMMARY_FILE,
    PLANT_BREAKDOWN_FILE,
    MAINTENANCE_TYPE_FILE,
    ACTIVITY_TYPE_FILE,
    TOP_EQUIPMENT_FILE,
    MONTHLY_TREND_FILE,
    BREAKDOWN_THRESHOLD_MINUTES,
    ACTIVITY_TYPE_COLUMN,
    EXECUTION_START_COLUMN,
    create_directories,
)
from column_mapping import create_display_df
from logger import setup_logging, get_logger, log_script_start, log_script_end, log_dataframe_info
from pipeline_validation import ValidationError
from workorders import load_work_orders, clean_work_orders, label_major_breakdowns
from workorders.profiling import (
    summarize_downtime,
    plant_breakdown_frequency,
    maintenance_type_distribution,
    activity_type_breakdown,
    top_equipment_by_downtime,
    monthly_work_order_trend,
)
from workorders.plots import (
    apply_plot_style,
    plot_downtime_distribution,
    plot_plant_breakdowns,
    plot_maintenance_types,
    plot_monthly_trend,
)

SCRIPT_NAME = 'Exploratory Data Analysis'
EDA_DIR = OUTPUT_DIR / 'eda'

# Display settings
pd.set_option('display.max_columns', None)
pd.set_option('display.width', None)


def main():
    create_directories()
    setup_logging()
    logger = get_logger(__name__)
    start_time = datetime.now()
    log_script_start(logger, SCRIPT_NAME)
    apply_plot_style()

    print("="*100)
    print(" "*30 + "EXPLORATORY DATA ANALYSIS")
    print(" "*30 + "IWC Work Order Breakdowns")
    print("="*100)

    # ============================================================================
    # STEP 1: LOAD DATA
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 1: LOADING DATA")
    print("="*100)

    try:
        df = load_work_orders(CLEANED_FILE)
    except ValidationError as e:
        logger.error(f"Cannot load cleaned work orders: {e}")
        print(f"\n❌ ERROR: {e}")
        print("Please run 01_data_profiling.py first!")
        return 1

    # Re-cleaning is a no-op on the hand-off file; PLANT_ID is kept for the plant tables
    df = clean_work_orders(df, drop_columns=[])
    df = label_major_breakdowns(df)
    log_dataframe_info(logger, df, "Cleaned work orders")
    print(f"\n✓ Loaded: {df.shape[0]:,} work orders × {df.shape[1]} columns")

    # ============================================================================
    # STEP 2: DOWNTIME PROFILE
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 2: DOWNTIME PROFILE")
    print("="*100)

    downtime = summarize_downtime(df)
    print(f"\n{downtime.to_string()}")
    print(f"\n   Major breakdowns (> {BREAKDOWN_THRESHOLD_MINUTES} min): "
          f"{int(downtime['over_threshold']):,} ({downtime['over_threshold_pct']:.1f}%)")
    downtime.to_frame().to_csv(DOWNTIME_SUMMARY_FILE, index_label='statistic')

    path = plot_downtime_distribution(df, EDA_DIR / '01_downtime_distribution.png')
    print(f"\n✓ Saved: {path}")

    # ============================================================================
    # STEP 3: PLANT BREAKDOWN FREQUENCY
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 3: PLANT BREAKDOWN FREQUENCY")
    print("="*100)

    plants = plant_breakdown_frequency(df)
    print(f"\nTotal Plants: {len(plants)}")
    print(create_display_df(plants).head(20).to_string(index=False))
    plants.to_csv(PLANT_BREAKDOWN_FILE, index=False)

    path = plot_plant_breakdowns(plants, EDA_DIR / '02_plant_breakdowns.png')
    print(f"\n✓ Saved: {path}")

    # ============================================================================
    # STEP 4: MAINTENANCE TYPES
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 4: MAINTENANCE TYPE DISTRIBUTION")
    print("="*100)

    types = maintenance_type_distribution(df)
    print(f"\nTotal Maintenance Types: {len(types)}")
    for i, row in enumerate(types.head(20).itertuples(index=False), 1):
        print(f"  {i:2d}. {str(row[0]):<40} {row.Count:>8,} ({row.Percent:>5.1f}%)  "
              f"mean {row.Mean_Downtime_Min:>8.1f} min")
    types.to_csv(MAINTENANCE_TYPE_FILE, index=False)

    path = plot_maintenance_types(types, EDA_DIR / '03_maintenance_types.png')
    print(f"\n✓ Saved: {path}")

    # ============================================================================
    # STEP 5: PLANNED VS UNPLANNED
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 5: PLANNED VS UNPLANNED ACTIVITY")
    print("="*100)

    if ACTIVITY_TYPE_COLUMN in df.columns:
        activity = activity_type_breakdown(df)
        print(f"\n{create_display_df(activity).to_string(index=False)}")
        activity.to_csv(ACTIVITY_TYPE_FILE, index=False)
    else:
        logger.warning(f"{ACTIVITY_TYPE_COLUMN} not found, skipping activity breakdown")
        print(f"\n⚠ WARNING: {ACTIVITY_TYPE_COLUMN} column not found!")

    # ============================================================================
    # STEP 6: EQUIPMENT & MONTHLY TREND
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 6: TOP EQUIPMENT & MONTHLY TREND")
    print("="*100)

    top_equipment = top_equipment_by_downtime(df, n=20)
    print(f"\nTop 20 equipment by total downtime:")
    print(top_equipment.to_string(index=False))
    top_equipment.to_csv(TOP_EQUIPMENT_FILE, index=False)

    if EXECUTION_START_COLUMN in df.columns:
        trend = monthly_work_order_trend(df)
        trend.to_csv(MONTHLY_TREND_FILE, index=False)
        if len(trend) > 0:
            path = plot_monthly_trend(trend, EDA_DIR / '04_monthly_trend.png')
            print(f"\n✓ Saved: {path} ({len(trend)} months)")
        else:
            print(f"\n⚠ WARNING: no parseable {EXECUTION_START_COLUMN} values")
    else:
        logger.warning(f"{EXECUTION_START_COLUMN} not found, skipping monthly trend")

    print("\n" + "="*100)
    print(" "*35 + "EDA COMPLETE")
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
