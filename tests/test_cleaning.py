import pandas as pd
import pytest

from pipeline_validation import ValidationError
from workorders import clean_work_orders, label_major_breakdowns
from workorders.cleaning import normalize_equipment_ids


def test_clean_drops_unusable_rows_and_id_columns(scenario_work_orders):
    cleaned = clean_work_orders(scenario_work_orders)

    assert cleaned['EQUIPMENT_ID'].tolist() == ['A', 'B', 'D']
    assert cleaned['ACTUAL_WORK_IN_MINUTES'].tolist() == [30.0, 60.0, 120.0]
    assert 'ORDER_ID' not in cleaned.columns
    assert 'PLANT_ID' not in cleaned.columns


def test_labels_follow_strict_threshold(scenario_work_orders):
    labeled = label_major_breakdowns(clean_work_orders(scenario_work_orders))

    assert labeled['major_breakdown'].tolist() == [False, False, True]
    assert list(labeled['major_breakdown'].cat.categories) == [False, True]


def test_literal_na_and_blank_ids_are_missing():
    df = pd.DataFrame({
        'EQUIPMENT_ID': ['A', 'B', '', 'NA', 'C'],
        'ACTUAL_WORK_IN_MINUTES': [30, 60, 90, 120, 'abc'],
    })
    cleaned = clean_work_orders(df)

    assert cleaned['EQUIPMENT_ID'].tolist() == ['A', 'B']
    assert len(cleaned) == 2


def test_five_row_export_keeps_two_minor_orders():
    df = pd.DataFrame({
        'EQUIPMENT_ID': ['A', 'B', '', 'NA', 'C'],
        'ACTUAL_WORK_IN_MINUTES': [10, 60, 61, 1000, None],
    })
    labeled = label_major_breakdowns(clean_work_orders(df))

    assert labeled['EQUIPMENT_ID'].tolist() == ['A', 'B']
    assert labeled['ACTUAL_WORK_IN_MINUTES'].tolist() == [10.0, 60.0]
    assert labeled['major_breakdown'].tolist() == [False, False]


def test_whitespace_ids_are_stripped():
    ids = pd.Series([' X1 ', '   ', ' NA', None])
    normalized = normalize_equipment_ids(ids)

    assert normalized.iloc[0] == 'X1'
    assert normalized.iloc[1:].isna().all()


def test_clean_is_idempotent(raw_work_orders):
    once = clean_work_orders(raw_work_orders)
    twice = clean_work_orders(once)

    pd.testing.assert_frame_equal(once, twice)


def test_clean_does_not_modify_input(scenario_work_orders):
    before = scenario_work_orders.copy()
    clean_work_orders(scenario_work_orders)

    pd.testing.assert_frame_equal(scenario_work_orders, before)


def test_absent_drop_columns_are_ignored():
    df = pd.DataFrame({'EQUIPMENT_ID': ['A'], 'ACTUAL_WORK_IN_MINUTES': [10]})
    cleaned = clean_work_orders(df)

    assert list(cleaned.columns) == ['EQUIPMENT_ID', 'ACTUAL_WORK_IN_MINUTES']


def test_drop_columns_can_keep_plant(scenario_work_orders):
    cleaned = clean_work_orders(scenario_work_orders, drop_columns=['ORDER_ID'])

    assert 'PLANT_ID' in cleaned.columns
    assert 'ORDER_ID' not in cleaned.columns


def test_missing_duration_column_raises():
    df = pd.DataFrame({'EQUIPMENT_ID': ['A', 'B']})

    with pytest.raises(ValidationError, match='ACTUAL_WORK_IN_MINUTES'):
        clean_work_orders(df)


def test_everything_removed_returns_empty_frame():
    df = pd.DataFrame({'EQUIPMENT_ID': ['', 'NA'], 'ACTUAL_WORK_IN_MINUTES': [10, 20]})
    cleaned = clean_work_orders(df)

    assert cleaned.empty


@pytest.mark.parametrize('minutes, expected', [
    (0, False),
    (59.9, False),
    (60, False),
    (60.5, True),
    (61, True),
])
def test_label_boundary(minutes, expected):
    df = pd.DataFrame({'EQUIPMENT_ID': ['A'], 'ACTUAL_WORK_IN_MINUTES': [minutes]})
    labeled = label_major_breakdowns(df)

    assert bool(labeled['major_breakdown'].iloc[0]) is expected


def test_label_threshold_is_configurable():
    df = pd.DataFrame({'EQUIPMENT_ID': ['A', 'B'], 'ACTUAL_WORK_IN_MINUTES': [100, 200]})
    labeled = label_major_breakdowns(df, threshold=150)

    assert labeled['major_breakdown'].tolist() == [False, True]
