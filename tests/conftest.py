"""
Shared fixtures: small synthetic work order exports.
"""

import numpy as np
import pandas as pd
import pytest

from workorders import make_rng

MAINTENANCE_TYPES = ['Corrective', 'Preventive', 'Inspection', 'Calibration']
ACTIVITY_TYPES = ['Unplanned', 'Planned']


@pytest.fixture
def scenario_work_orders():
    """Five raw work orders: two blank-ish ids, one malformed duration."""
    return pd.DataFrame({
        'ORDER_ID': ['1001', '1002', '1003', '1004', '1005'],
        'PLANT_ID': ['P1', 'P1', 'P2', 'P2', 'P3'],
        'EQUIPMENT_ID': ['A', 'B', '', 'D', 'C'],
        'ACTUAL_WORK_IN_MINUTES': ['30', '60', '90', '120', 'abc'],
    })


@pytest.fixture
def raw_work_orders():
    """
    200 raw work orders where corrective/unplanned work runs long.

    Contains a handful of unusable rows (missing duration, blank and 'NA'
    equipment ids) so cleaning has something to do.
    """
    gen = np.random.default_rng(7)
    n = 200

    maintenance = gen.choice(MAINTENANCE_TYPES, size=n)
    activity = np.where(maintenance == 'Corrective', 'Unplanned', 'Planned')
    base = np.where(maintenance == 'Corrective', 150.0, 25.0)
    durations = np.round(base + gen.normal(0, 15, size=n), 1)

    start = pd.Timestamp('2021-01-01') + pd.to_timedelta(gen.integers(0, 365, size=n), unit='D')

    df = pd.DataFrame({
        'ORDER_ID': [f"{i:07d}" for i in range(n)],
        'PLANT_ID': gen.choice(['P01', 'P02', 'P03'], size=n),
        'EQUIPMENT_ID': [f"00{i:04d}" for i in gen.integers(0, 25, size=n)],
        'MAINTENANCE_TYPE_DESCRIPTION': maintenance,
        'MAINTENANCE_ACTIVITY_TYPE': activity,
        'EXECUTION_START_DATE': start.strftime('%Y-%m-%d'),
        'ACTUAL_WORK_IN_MINUTES': durations.astype(object),
    })
    df.loc[3, 'ACTUAL_WORK_IN_MINUTES'] = None
    df.loc[5, 'EQUIPMENT_ID'] = ''
    df.loc[8, 'EQUIPMENT_ID'] = 'NA'
    df.loc[13, 'EQUIPMENT_ID'] = None
    return df


@pytest.fixture
def modeling_work_orders(raw_work_orders):
    """Cleaned and labeled work orders ready for sampling."""
    from workorders import clean_work_orders, label_major_breakdowns
    return label_major_breakdowns(clean_work_orders(raw_work_orders))


@pytest.fixture
def rng():
    return make_rng(42)


@pytest.fixture
def work_orders_csv(tmp_path, raw_work_orders):
    """Raw export written with messy headers, as it comes out of the source system."""
    path = tmp_path / 'IWC_Work_Orders.csv'
    messy = raw_work_orders.rename(columns={
        'ACTUAL_WORK_IN_MINUTES': ' actual work in minutes ',
        'EQUIPMENT_ID': 'Equipment-ID',
    })
    messy.to_csv(path, index=False)
    return path
