"""
DATE PARSING UTILITIES
======================
Centralized date parsing functions for the work order pipeline.

Work order exports mix several date layouts in the same column:
- ISO format (YYYY-MM-DD, with or without time)
- European formats (DD-MM-YYYY, DD/MM/YYYY, DD.MM.YYYY)
- US format (MM/DD/YYYY), only tried after the day-first formats
- Excel serial dates (numeric)

Usage:
    from workorders.date_parser import parse_date_flexible, parse_date_column

    df['EXECUTION_START_DATE'] = parse_date_column(df['EXECUTION_START_DATE'])
"""

from datetime import datetime

import pandas as pd

# Try multiple formats in order of likelihood
DATE_FORMATS = [
    '%Y-%m-%d %H:%M:%S',     # 2021-01-15 12:30:45 (ISO with time)
    '%Y-%m-%d',              # 2021-01-15 (ISO date only)
    '%d-%m-%Y %H:%M:%S',     # 15-01-2021 12:30:45 (European dash with time)
    '%d/%m/%Y %H:%M:%S',     # 15/01/2021 12:30:45 (European slash with time)
    '%d-%m-%Y',              # 15-01-2021 (European dash date only)
    '%d/%m/%Y',              # 15/01/2021 (European slash date only)
    '%d.%m.%Y %H:%M:%S',     # 15.01.2021 12:30:45 (dot format with time)
    '%d.%m.%Y',              # 15.01.2021 (dot format date only)
    '%m/%d/%Y %H:%M:%S',     # 01/15/2021 12:30:45 (US format with time - try last)
    '%m/%d/%Y',              # 01/15/2021 (US format date only - try last)
]

# Excel's epoch: 1899-12-30 (Excel incorrectly treats 1900 as leap year)
EXCEL_EPOCH = pd.Timestamp('1899-12-30')


def parse_date_flexible(value):
    """
    Parse date with multiple format support - handles mixed format data.

    Args:
        value: Date value to parse (str, int, float, datetime, or pd.Timestamp)

    Returns:
        pd.Timestamp: Parsed timestamp, or pd.NaT if parsing fails

    Examples:
        >>> parse_date_flexible('2021-01-15')
        Timestamp('2021-01-15 00:00:00')

        >>> parse_date_flexible('15/01/2021')
        Timestamp('2021-01-15 00:00:00')

        >>> parse_date_flexible(44211)  # Excel serial date
        Timestamp('2021-01-15 00:00:00')

        >>> parse_date_flexible(None)
        NaT
    """
    if isinstance(value, (pd.Timestamp, datetime)):
        return pd.Timestamp(value)

    if pd.isna(value):
        return pd.NaT

    # bool is an int subclass but never a date
    if isinstance(value, bool):
        return pd.NaT

    if isinstance(value, (int, float)):
        # Excel serial dates are typically between 1 (1900-01-01) and 100000
        if 1 <= value <= 100000:
            return EXCEL_EPOCH + pd.Timedelta(days=value)
        return pd.NaT

    if isinstance(value, str):
        value = value.strip()

        if not value:
            return pd.NaT

        for fmt in DATE_FORMATS:
            try:
                return pd.Timestamp(datetime.strptime(value, fmt))
            except ValueError:
                continue

        # Last resort: let pandas infer format (day-first preference)
        try:
            return pd.to_datetime(value, dayfirst=True)
        except (ValueError, OverflowError):
            return pd.NaT

    return pd.NaT


def parse_date_column(series):
    """
    Parse a whole column with parse_date_flexible.

    Each distinct raw value is parsed once, which keeps 100k-row work order
    exports fast (dates repeat heavily).
    """
    if pd.api.types.is_datetime64_any_dtype(series):
        return series

    uniques = pd.unique(series.dropna())
    mapping = {value: parse_date_flexible(value) for value in uniques}
    return pd.to_datetime(series.map(mapping), errors='coerce')
