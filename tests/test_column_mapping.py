import pandas as pd
import pytest

from column_mapping import (
    normalize_column_name,
    normalize_column_names,
    detect_leakage_pattern,
    categorize_feature,
    format_feature_importance,
    get_display_name,
)


@pytest.mark.parametrize('raw, expected', [
    ('EQUIPMENT_ID', 'EQUIPMENT_ID'),
    (' Equipment ID ', 'EQUIPMENT_ID'),
    ('actual-work in minutes', 'ACTUAL_WORK_IN_MINUTES'),
    ('Major_Breakdown', 'major_breakdown'),
])
def test_normalize_column_name(raw, expected):
    assert normalize_column_name(raw) == expected


def test_normalize_column_names_copies_by_default():
    df = pd.DataFrame({'plant id': [1]})
    normalized = normalize_column_names(df)

    assert list(normalized.columns) == ['PLANT_ID']
    assert list(df.columns) == ['plant id']


@pytest.mark.parametrize('column, expected', [
    ('ACTUAL_WORK_IN_MINUTES', (True, 'target_source')),
    ('PLANNED_DURATION', (True, 'target_source')),
    ('major_breakdown', (True, 'target')),
    ('EQUIPMENT_ID', (False, None)),
    ('MAINTENANCE_TYPE_DESCRIPTION', (False, None)),
])
def test_detect_leakage_pattern(column, expected):
    assert detect_leakage_pattern(column) == expected


def test_categorize_feature():
    assert categorize_feature('EQUIPMENT_ID') == 'Identifier'
    assert categorize_feature('EXECUTION_START_DATE') == 'Date'
    assert categorize_feature('SOMETHING_ELSE') == 'Other'


def test_format_feature_importance_maps_date_parts():
    importance = pd.DataFrame({
        'Feature': ['EXECUTION_START_DATE_MONTH', 'EQUIPMENT_ID'],
        'MEAN_DECREASE_ACCURACY': [0.2, 0.1],
    })
    formatted = format_feature_importance(importance)

    assert list(formatted.columns[:3]) == ['Feature', 'Display_Name', 'Category']
    assert formatted['Display_Name'].iloc[0] == f"{get_display_name('EXECUTION_START_DATE')} (month)"
    assert formatted['Category'].tolist() == ['Date', 'Identifier']
