import numpy as np
import pandas as pd
import pytest

from pipeline_validation import InsufficientRowsError
from workorders import (
    make_rng,
    sample_work_orders,
    split_train_test,
    train_breakdown_forest,
    evaluate_model,
)
from workorders.evaluation import build_confusion_matrix, class_error_rates


def _labeled(modeling_work_orders):
    rng = make_rng(42)
    split = split_train_test(sample_work_orders(modeling_work_orders, rng=rng), rng=rng)
    forest = train_breakdown_forest(split.train, ntree=25, rng=rng, n_jobs=1)
    return forest, split


def test_confusion_matrix_layout():
    confusion = build_confusion_matrix([False, False, True, True, True], [False, True, True, True, False])

    assert confusion.index.name == 'actual'
    assert confusion.columns.name == 'predicted'
    assert confusion.to_numpy().tolist() == [[1, 1], [1, 2]]


def test_confusion_matrix_keeps_absent_class():
    confusion = build_confusion_matrix([False, False], [False, False])

    assert confusion.shape == (2, 2)
    assert confusion.to_numpy().tolist() == [[2, 0], [0, 0]]


def test_class_error_rates():
    confusion = build_confusion_matrix([False, False, False, False, True, True],
                                       [False, False, False, True, True, False])
    errors = class_error_rates(confusion)

    assert errors.iloc[0] == pytest.approx(0.25)
    assert errors.iloc[1] == pytest.approx(0.5)


def test_class_error_is_nan_for_empty_class():
    errors = class_error_rates(build_confusion_matrix([False], [False]))

    assert errors.iloc[0] == 0.0
    assert np.isnan(errors.iloc[1])


def test_report_is_consistent(modeling_work_orders):
    forest, split = _labeled(modeling_work_orders)
    report = evaluate_model(forest, split.test)
    cm = report.confusion.to_numpy()

    assert report.n_test == len(split.test)
    assert report.accuracy == pytest.approx((cm[0, 0] + cm[1, 1]) / cm.sum())
    assert report.accuracy > 0.8
    assert report.oob_error == forest.oob_error

    mda = report.importance['MEAN_DECREASE_ACCURACY'].to_numpy()
    assert np.all(mda[:-1] >= mda[1:])


def test_metrics_row(modeling_work_orders):
    forest, split = _labeled(modeling_work_orders)
    metrics = evaluate_model(forest, split.test).metrics()

    assert metrics['Test_Rows'] == len(split.test)
    assert (metrics['True_Negatives'] + metrics['False_Positives']
            + metrics['False_Negatives'] + metrics['True_Positives']) == len(split.test)
    row = pd.DataFrame([metrics])
    assert len(row) == 1


def test_unseen_levels_are_reported_not_fatal(modeling_work_orders, caplog):
    forest, split = _labeled(modeling_work_orders)
    test = split.test.assign(EQUIPMENT_ID='NEW-0001')

    with caplog.at_level('WARNING'):
        report = evaluate_model(forest, test)

    assert report.n_test == len(test)
    assert 'EQUIPMENT_ID' in caplog.text


def test_empty_test_partition_is_rejected(modeling_work_orders):
    forest, split = _labeled(modeling_work_orders)

    with pytest.raises(InsufficientRowsError):
        evaluate_model(forest, split.test.iloc[0:0])
