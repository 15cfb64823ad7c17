import pandas as pd
import pytest

from pipeline_validation import ValidationError
from workorders import load_work_orders, save_work_orders, clean_work_orders


def test_headers_are_normalized(work_orders_csv):
    df = load_work_orders(work_orders_csv)

    assert 'ACTUAL_WORK_IN_MINUTES' in df.columns
    assert 'EQUIPMENT_ID' in df.columns
    assert len(df) == 200


def test_identifiers_keep_leading_zeros(work_orders_csv):
    df = load_work_orders(work_orders_csv)

    ids = df['EQUIPMENT_ID'].dropna()
    assert ids.str.startswith('00').all()
    assert df['ORDER_ID'].iloc[0] == '0000000'


def test_missing_file_raises(tmp_path):
    with pytest.raises(ValidationError, match='not found'):
        load_work_orders(tmp_path / 'missing.csv')


def test_missing_required_column_raises(tmp_path):
    path = tmp_path / 'orders.csv'
    pd.DataFrame({'EQUIPMENT_ID': ['A']}).to_csv(path, index=False)

    with pytest.raises(ValidationError, match='ACTUAL_WORK_IN_MINUTES'):
        load_work_orders(path)


def test_stale_label_is_dropped(tmp_path):
    path = tmp_path / 'orders.csv'
    pd.DataFrame({
        'EQUIPMENT_ID': ['A'],
        'ACTUAL_WORK_IN_MINUTES': [90],
        'major_breakdown': [False],
    }).to_csv(path, index=False)

    assert 'major_breakdown' not in load_work_orders(path).columns


def test_cleaned_hand_off_round_trip(work_orders_csv, tmp_path):
    cleaned = clean_work_orders(load_work_orders(work_orders_csv), drop_columns=['ORDER_ID'])
    path = save_work_orders(cleaned, tmp_path / 'data' / 'cleaned.csv')

    reloaded = clean_work_orders(load_work_orders(path), drop_columns=[])

    assert len(reloaded) == len(cleaned) == 196
    assert reloaded['EQUIPMENT_ID'].tolist() == cleaned['EQUIPMENT_ID'].tolist()
    assert 'PLANT_ID' in reloaded.columns
