"""
WORK ORDER PROFILING (EDA TABLES)

Aggregations behind the exploratory analysis: downtime profile, plant-level
breakdown frequency, maintenance-type distributions, planned vs unplanned
split and monthly trend. Each function returns a DataFrame/Series and leaves
its input untouched.
"""

import pandas as pd

from config import (
    DURATION_COLUMN,
    EQUIPMENT_ID_COLUMN,
    PLANT_ID_COLUMN,
    MAINTENANCE_TYPE_COLUMN,
    ACTIVITY_TYPE_COLUMN,
    EXECUTION_START_COLUMN,
    BREAKDOWN_THRESHOLD_MINUTES,
)
from pipeline_validation import validate_required_columns
from workorders.date_parser import parse_date_column


def profile_missing_values(df):
    """Missing count and percent per column, most-missing first (columns without gaps omitted)."""
    missing = df.isnull().sum()
    missing_pct = missing / max(len(df), 1) * 100
    missing_df = pd.DataFrame({
        'Feature': missing.index,
        'Missing_Count': missing.values,
        'Missing_Percent': missing_pct.values
    })
    return missing_df[missing_df['Missing_Count'] > 0].sort_values(
        'Missing_Count', ascending=False, ignore_index=True
    )


def summarize_downtime(df, threshold=BREAKDOWN_THRESHOLD_MINUTES, duration_col=DURATION_COLUMN):
    """Descriptive statistics of work duration plus the share above threshold."""
    validate_required_columns(df, 'work orders', [duration_col])
    durations = pd.to_numeric(df[duration_col], errors='coerce').dropna()

    summary = durations.describe(percentiles=[0.25, 0.5, 0.75, 0.9, 0.95, 0.99])
    summary['total'] = durations.sum()
    summary['over_threshold'] = int((durations > threshold).sum())
    summary['over_threshold_pct'] = (durations > threshold).mean() * 100 if len(durations) else float('nan')
    return summary.rename('minutes')


def plant_breakdown_frequency(df, threshold=BREAKDOWN_THRESHOLD_MINUTES,
                              plant_col=PLANT_ID_COLUMN, duration_col=DURATION_COLUMN):
    """
    Work orders and major breakdowns per plant, most breakdowns first.

    Columns: Work_Orders, Major_Breakdowns, Breakdown_Rate_Pct,
    Total_Downtime_Min, Mean_Downtime_Min
    """
    validate_required_columns(df, 'work orders', [plant_col, duration_col])
    durations = pd.to_numeric(df[duration_col], errors='coerce')
    frame = pd.DataFrame({
        plant_col: df[plant_col],
        'duration': durations,
        'is_major': durations > threshold,
    })

    grouped = frame.groupby(plant_col, dropna=False)
    result = pd.DataFrame({
        'Work_Orders': grouped.size(),
        'Major_Breakdowns': grouped['is_major'].sum().astype(int),
        'Total_Downtime_Min': grouped['duration'].sum(),
        'Mean_Downtime_Min': grouped['duration'].mean(),
    })
    result.insert(2, 'Breakdown_Rate_Pct', result['Major_Breakdowns'] / result['Work_Orders'] * 100)

    return result.sort_values(['Major_Breakdowns', 'Work_Orders'], ascending=False).reset_index()


def maintenance_type_distribution(df, type_col=MAINTENANCE_TYPE_COLUMN, duration_col=DURATION_COLUMN):
    """Count, percent and downtime statistics per maintenance type."""
    validate_required_columns(df, 'work orders', [type_col, duration_col])
    durations = pd.to_numeric(df[duration_col], errors='coerce')
    types = df[type_col].fillna('(missing)')

    grouped = durations.groupby(types)
    result = pd.DataFrame({
        'Count': grouped.size(),
        'Mean_Downtime_Min': grouped.mean(),
        'Median_Downtime_Min': grouped.median(),
        'Total_Downtime_Min': grouped.sum(),
    })
    result.insert(1, 'Percent', result['Count'] / result['Count'].sum() * 100)
    result.index.name = type_col
    return result.sort_values('Count', ascending=False).reset_index()


def activity_type_breakdown(df, threshold=BREAKDOWN_THRESHOLD_MINUTES,
                            activity_col=ACTIVITY_TYPE_COLUMN, duration_col=DURATION_COLUMN):
    """Planned vs unplanned work orders against the major breakdown label."""
    validate_required_columns(df, 'work orders', [activity_col, duration_col])
    is_major = pd.to_numeric(df[duration_col], errors='coerce') > threshold
    activity = df[activity_col].fillna('(missing)')

    table = pd.crosstab(activity, is_major).reindex(columns=[False, True], fill_value=0)
    table.columns = ['Minor', 'Major']
    table.index.name = activity_col
    table['Total'] = table['Minor'] + table['Major']
    table['Major_Rate_Pct'] = table['Major'] / table['Total'] * 100
    return table.sort_values('Total', ascending=False).reset_index()


def top_equipment_by_downtime(df, n=20, equipment_col=EQUIPMENT_ID_COLUMN, duration_col=DURATION_COLUMN):
    """Equipment with the highest total downtime."""
    validate_required_columns(df, 'work orders', [equipment_col, duration_col])
    durations = pd.to_numeric(df[duration_col], errors='coerce')
    grouped = durations.groupby(df[equipment_col])
    result = pd.DataFrame({
        'Work_Orders': grouped.size(),
        'Total_Downtime_Min': grouped.sum(),
        'Mean_Downtime_Min': grouped.mean(),
    })
    result.index.name = equipment_col
    return result.sort_values('Total_Downtime_Min', ascending=False).head(n).reset_index()


def monthly_work_order_trend(df, date_col=EXECUTION_START_COLUMN, duration_col=DURATION_COLUMN,
                             threshold=BREAKDOWN_THRESHOLD_MINUTES):
    """Work orders, major breakdowns and downtime per execution-start month."""
    validate_required_columns(df, 'work orders', [date_col, duration_col])
    dates = parse_date_column(df[date_col])
    durations = pd.to_numeric(df[duration_col], errors='coerce')

    frame = pd.DataFrame({
        'Month': dates.dt.to_period('M'),
        'duration': durations,
        'is_major': durations > threshold,
    }).dropna(subset=['Month'])

    grouped = frame.groupby('Month')
    result = pd.DataFrame({
        'Work_Orders': grouped.size(),
        'Major_Breakdowns': grouped['is_major'].sum().astype(int),
        'Total_Downtime_Min': grouped['duration'].sum(),
    })
    return result.sort_index().reset_index()
