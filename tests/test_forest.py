from types import SimpleNamespace

import numpy as np
import pandas as pd
import pytest

from pipeline_validation import ValidationError
from workorders import (
    make_rng,
    sample_work_orders,
    split_train_test,
    train_breakdown_forest,
    save_model,
    load_model,
)
from workorders.forest import IMPORTANCE_COLUMNS, oob_error_rate, select_feature_columns


@pytest.fixture
def split(modeling_work_orders):
    rng = make_rng(42)
    sampled = sample_work_orders(modeling_work_orders, rng=rng)
    return split_train_test(sampled, rng=rng)


@pytest.fixture
def forest(split):
    return train_breakdown_forest(split.train, ntree=25, mtry=3, rng=make_rng(42), n_jobs=1)


def test_feature_columns_exclude_duration_and_label(modeling_work_orders):
    features = select_feature_columns(modeling_work_orders)

    assert 'ACTUAL_WORK_IN_MINUTES' not in features
    assert 'major_breakdown' not in features
    assert 'MAINTENANCE_TYPE_DESCRIPTION' in features


def test_leaky_feature_is_rejected(modeling_work_orders):
    df = modeling_work_orders.assign(ACTUAL_WORK_HOURS=1.0)

    with pytest.raises(ValidationError, match='ACTUAL_WORK_HOURS'):
        select_feature_columns(df)


def test_no_features_left_is_rejected():
    df = pd.DataFrame({'ACTUAL_WORK_IN_MINUTES': [1.0], 'major_breakdown': [False]})

    with pytest.raises(ValidationError):
        select_feature_columns(df)


def test_forest_shape(forest):
    assert forest.ntree == 25
    assert forest.model.max_features == 3
    assert list(forest.classes) == [False, True]
    assert 'EXECUTION_START_DATE_MONTH' in forest.feature_names
    assert 0.0 <= forest.oob_error <= 1.0


def test_importance_table(forest):
    importance = forest.importance

    assert list(importance.columns) == IMPORTANCE_COLUMNS
    assert sorted(importance['Feature']) == sorted(forest.feature_names)
    mda = importance['MEAN_DECREASE_ACCURACY'].to_numpy()
    assert np.all(mda[:-1] >= mda[1:])
    assert (importance['MEAN_DECREASE_GINI'] >= 0).all()
    assert (importance['MDA_STD'] >= 0).all()


def test_maintenance_type_drives_breakdowns(forest):
    top = forest.importance['Feature'].head(2).tolist()

    assert {'MAINTENANCE_TYPE_DESCRIPTION', 'MAINTENANCE_ACTIVITY_TYPE'} & set(top)


def test_predict_is_majority_vote(forest, split):
    votes = forest.predict_votes(split.test)
    predicted = forest.predict(split.test)

    assert (votes.sum(axis=1) == forest.ntree).all()
    assert predicted.tolist() == (votes[:, 1] > votes[:, 0]).tolist()
    assert predicted.index.equals(split.test.index)
    assert predicted.name == 'major_breakdown'


def test_same_seed_same_forest(split):
    first = train_breakdown_forest(split.train, ntree=10, rng=make_rng(5), n_jobs=1)
    second = train_breakdown_forest(split.train, ntree=10, rng=make_rng(5), n_jobs=1)

    pd.testing.assert_frame_equal(first.importance, second.importance)
    assert first.predict(split.test).tolist() == second.predict(split.test).tolist()


def test_mtry_is_clipped_to_feature_count(split):
    forest = train_breakdown_forest(split.train, ntree=5, mtry=50, rng=make_rng(1), n_jobs=1)

    assert forest.model.max_features == len(forest.feature_names)


@pytest.mark.parametrize('ntree, mtry', [(0, 3), (10, 0)])
def test_invalid_hyperparameters(split, ntree, mtry):
    with pytest.raises(ValueError):
        train_breakdown_forest(split.train, ntree=ntree, mtry=mtry, n_jobs=1)


def test_training_requires_label(split):
    with pytest.raises(ValidationError):
        train_breakdown_forest(split.train.drop(columns=['major_breakdown']), ntree=5, n_jobs=1)


def test_unseen_levels_still_predict(forest, split):
    test = split.test.copy()
    test['EQUIPMENT_ID'] = 'NEVER_SEEN'

    assert len(forest.predict(test)) == len(test)


def test_save_and_load_round_trip(forest, split, tmp_path):
    path = save_model(forest, tmp_path / 'models' / 'breakdown_forest.pkl')
    loaded = load_model(path)

    assert path.exists()
    assert loaded.predict(split.test).tolist() == forest.predict(split.test).tolist()
    assert loaded.encoder.category_levels == forest.encoder.category_levels


def test_oob_error_is_nan_without_out_of_bag_rows():
    train = pd.DataFrame({
        'EQUIPMENT_ID': ['A'],
        'MAINTENANCE_TYPE_DESCRIPTION': ['Corrective'],
        'ACTUAL_WORK_IN_MINUTES': [90.0],
        'major_breakdown': pd.Categorical([True], categories=[False, True]),
    })
    forest = train_breakdown_forest(train, ntree=10, rng=make_rng(1), n_jobs=1)

    assert np.isnan(forest.oob_error)


def test_oob_error_skips_rows_without_votes():
    model = SimpleNamespace(oob_decision_function_=np.array([
        [0.8, 0.2],
        [0.3, 0.7],
        [0.0, 0.0],
        [0.6, 0.4],
    ]))
    y_codes = np.array([0, 0, 1, 0])

    assert oob_error_rate(model, y_codes) == pytest.approx(1 / 3)


def test_oob_error_matches_oob_score_when_every_row_is_out_of_bag(split):
    forest = train_breakdown_forest(split.train, ntree=60, rng=make_rng(3), n_jobs=1)

    assert (forest.model.oob_decision_function_.sum(axis=1) > 0).all()
    assert forest.oob_error == pytest.approx(1.0 - forest.model.oob_score_)
