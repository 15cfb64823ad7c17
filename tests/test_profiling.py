import pandas as pd
import pytest

from workorders.profiling import (
    profile_missing_values,
    summarize_downtime,
    plant_breakdown_frequency,
    maintenance_type_distribution,
    activity_type_breakdown,
    top_equipment_by_downtime,
    monthly_work_order_trend,
)


@pytest.fixture
def work_orders():
    return pd.DataFrame({
        'PLANT_ID': ['P1', 'P1', 'P2', 'P2', 'P2', 'P3'],
        'EQUIPMENT_ID': ['E1', 'E1', 'E2', 'E3', 'E3', 'E4'],
        'MAINTENANCE_TYPE_DESCRIPTION': ['Corrective', 'Preventive', 'Corrective', 'Corrective', None, 'Preventive'],
        'MAINTENANCE_ACTIVITY_TYPE': ['Unplanned', 'Planned', 'Unplanned', 'Unplanned', 'Planned', 'Planned'],
        'EXECUTION_START_DATE': ['2021-01-05', '2021-01-20', '2021-02-03', 'bad date', '2021-02-28', '2021-03-01'],
        'ACTUAL_WORK_IN_MINUTES': [120.0, 30.0, 90.0, 61.0, 60.0, 15.0],
    })


def test_missing_values_only_lists_gappy_columns(work_orders):
    missing = profile_missing_values(work_orders)

    assert missing['Feature'].tolist() == ['MAINTENANCE_TYPE_DESCRIPTION']
    assert missing['Missing_Count'].iloc[0] == 1


def test_downtime_summary(work_orders):
    summary = summarize_downtime(work_orders)

    assert summary['count'] == 6
    assert summary['total'] == pytest.approx(376.0)
    assert summary['over_threshold'] == 3
    assert summary['over_threshold_pct'] == pytest.approx(50.0)


def test_plant_breakdown_frequency_ranking(work_orders):
    plants = plant_breakdown_frequency(work_orders)

    assert plants['PLANT_ID'].tolist() == ['P2', 'P1', 'P3']
    p2 = plants.iloc[0]
    assert p2['Work_Orders'] == 3
    assert p2['Major_Breakdowns'] == 2
    assert p2['Breakdown_Rate_Pct'] == pytest.approx(200 / 3)
    assert p2['Total_Downtime_Min'] == pytest.approx(211.0)


def test_maintenance_type_distribution(work_orders):
    types = maintenance_type_distribution(work_orders)

    assert types['MAINTENANCE_TYPE_DESCRIPTION'].tolist()[0] == 'Corrective'
    assert '(missing)' in types['MAINTENANCE_TYPE_DESCRIPTION'].tolist()
    assert types['Count'].sum() == len(work_orders)
    assert types['Percent'].sum() == pytest.approx(100.0)


def test_activity_type_breakdown(work_orders):
    table = activity_type_breakdown(work_orders).set_index('MAINTENANCE_ACTIVITY_TYPE')

    assert table.loc['Unplanned', 'Major'] == 3
    assert table.loc['Planned', 'Minor'] == 3
    assert table.loc['Planned', 'Major_Rate_Pct'] == 0.0


def test_top_equipment_by_downtime(work_orders):
    top = top_equipment_by_downtime(work_orders, n=2)

    assert top['EQUIPMENT_ID'].tolist() == ['E1', 'E3']
    assert top['Total_Downtime_Min'].tolist() == [150.0, 121.0]


def test_monthly_trend_skips_unparseable_dates(work_orders):
    trend = monthly_work_order_trend(work_orders)

    assert [str(month) for month in trend['Month']] == ['2021-01', '2021-02', '2021-03']
    assert trend['Work_Orders'].tolist() == [2, 2, 1]
    assert trend['Major_Breakdowns'].tolist() == [1, 1, 0]
