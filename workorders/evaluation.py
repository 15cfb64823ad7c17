"""
Held-out evaluation of the breakdown classifier.

Reports only: poor results never trigger retraining.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, confusion_matrix

from config import MIN_TEST_RECORDS
from logger import get_logger
from pipeline_validation import validate_min_rows, validate_required_columns

logger = get_logger(__name__)

CLASS_LABELS = [False, True]


@dataclass
class EvaluationReport:
    confusion: pd.DataFrame     # rows = actual, columns = predicted
    accuracy: float
    class_error: pd.Series      # misclassified-in-class / total-in-class
    importance: pd.DataFrame    # sorted by MEAN_DECREASE_ACCURACY, descending
    oob_error: float

    @property
    def n_test(self):
        return int(self.confusion.to_numpy().sum())

    def metrics(self):
        """Flat metric dict for logging and CSV export."""
        cm = self.confusion.to_numpy()
        return {
            'Test_Rows': self.n_test,
            'Accuracy': self.accuracy,
            'OOB_Error': self.oob_error,
            'True_Negatives': int(cm[0, 0]),
            'False_Positives': int(cm[0, 1]),
            'False_Negatives': int(cm[1, 0]),
            'True_Positives': int(cm[1, 1]),
            'Class_Error_Minor': float(self.class_error.iloc[0]),
            'Class_Error_Major': float(self.class_error.iloc[1]),
        }


def build_confusion_matrix(y_true, y_pred):
    """2×2 actual × predicted counts over [False, True]."""
    matrix = confusion_matrix(np.asarray(y_true, dtype=bool), np.asarray(y_pred, dtype=bool),
                              labels=CLASS_LABELS)
    return pd.DataFrame(
        matrix,
        index=pd.Index(CLASS_LABELS, name='actual'),
        columns=pd.Index(CLASS_LABELS, name='predicted'),
    )


def class_error_rates(confusion):
    """Per actual class: misclassified / total in class (NaN for an empty class)."""
    totals = confusion.sum(axis=1)
    correct = pd.Series(np.diag(confusion.to_numpy()), index=confusion.index)
    return ((totals - correct) / totals.replace(0, np.nan)).rename('class_error')


def evaluate_model(model, test):
    """
    Score a trained BreakdownForest on the test partition.

    Raises:
        InsufficientRowsError: If the test partition is empty
    """
    validate_min_rows(test, MIN_TEST_RECORDS, 'splitting (test partition)')
    validate_required_columns(test, 'test partition', [model.label_col])

    unseen = model.encoder.count_unseen_levels(test)
    if unseen:
        summary = ', '.join(f"{col}={count:,}" for col, count in unseen.items())
        logger.warning(f"Test values never seen in training mapped to {model.encoder.unknown_level}: {summary}")

    y_true = test[model.label_col].astype(bool).to_numpy()
    y_pred = model.predict(test).to_numpy(dtype=bool)

    confusion = build_confusion_matrix(y_true, y_pred)
    accuracy = float(accuracy_score(y_true, y_pred))

    report = EvaluationReport(
        confusion=confusion,
        accuracy=accuracy,
        class_error=class_error_rates(confusion),
        importance=model.importance.sort_values(
            'MEAN_DECREASE_ACCURACY', ascending=False, ignore_index=True
        ),
        oob_error=model.oob_error,
    )
    logger.info(f"Test accuracy: {accuracy:.4f} on {len(test):,} work orders")
    return report
