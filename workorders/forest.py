"""
RANDOM FOREST BREAKDOWN CLASSIFIER

Trains a scikit-learn RandomForestClassifier on encoded work orders and adds
what the plain estimator does not give directly:

- majority-vote prediction over the trees' class votes
- mean decrease in accuracy: per tree, out-of-bag accuracy lost when one
  feature is permuted among that tree's out-of-bag rows, averaged over trees
- mean decrease in Gini: unnormalized impurity decrease per feature,
  averaged over trees

The trained BreakdownForest keeps the fitted encoder but no training rows.
"""

import pickle
from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier

from config import (
    NTREE,
    MTRY,
    N_JOBS,
    DURATION_COLUMN,
    LABEL_COLUMN,
    MAX_CATEGORY_LEVELS,
)
from column_mapping import detect_leakage_pattern
from logger import get_logger
from pipeline_validation import ValidationError, validate_min_rows, validate_required_columns
from workorders.encoding import CategoryEncoder
from workorders.sampling import make_rng

logger = get_logger(__name__)

IMPORTANCE_COLUMNS = ['Feature', 'MEAN_DECREASE_ACCURACY', 'MDA_STD', 'MEAN_DECREASE_GINI']


class BreakdownForest:
    """Trained ensemble, its encoder and its feature importances."""

    def __init__(self, model, encoder, importance, oob_error, label_col=LABEL_COLUMN):
        self.model = model
        self.encoder = encoder
        self.importance = importance
        self.oob_error = oob_error
        self.label_col = label_col

    @property
    def feature_columns(self):
        return self.encoder.feature_columns

    @property
    def feature_names(self):
        return self.encoder.output_columns

    @property
    def classes(self):
        return self.model.classes_

    @property
    def ntree(self):
        return len(self.model.estimators_)

    def encode(self, df):
        return self.encoder.transform(df).to_numpy(dtype=np.float32)

    def predict_votes(self, df):
        """Return an (n_rows, n_classes) array of tree vote counts."""
        return _tree_votes(self.model, self.encode(df))

    def predict(self, df):
        """Majority-vote class per row; ties go to the first class (False)."""
        votes = self.predict_votes(df)
        return pd.Series(self.classes[np.argmax(votes, axis=1)], index=df.index, name=self.label_col)


def select_feature_columns(df, duration_col=DURATION_COLUMN, label_col=LABEL_COLUMN):
    """
    All columns except the duration and the label.

    Raises:
        ValidationError: If no features remain or a remaining column leaks the target
    """
    features = [col for col in df.columns if col not in (duration_col, label_col)]
    if not features:
        raise ValidationError("No feature columns left after removing duration and label")

    leaky = [col for col in features if detect_leakage_pattern(col)[0]]
    if leaky:
        raise ValidationError(f"Feature columns leak the breakdown label: {', '.join(leaky)}")

    return features


def train_breakdown_forest(train, ntree=NTREE, mtry=MTRY, rng=None,
                           duration_col=DURATION_COLUMN, label_col=LABEL_COLUMN,
                           n_jobs=N_JOBS, max_levels=MAX_CATEGORY_LEVELS):
    """
    Fit the breakdown random forest on the training partition.

    Args:
        train: Labeled, complete training work orders
        ntree: Number of trees
        mtry: Features considered per split (clipped to the feature count)
        rng: numpy Generator used for the forest seed and importance permutations

    Returns:
        BreakdownForest
    """
    if ntree < 1 or mtry < 1:
        raise ValueError(f"ntree and mtry must be positive, got ntree={ntree}, mtry={mtry}")
    if rng is None:
        rng = make_rng()

    validate_required_columns(train, 'training partition', [label_col])
    validate_min_rows(train, 1, 'splitting (training partition)')

    feature_columns = select_feature_columns(train, duration_col, label_col)
    encoder = CategoryEncoder(max_levels=max_levels)
    X = encoder.fit_transform(train, feature_columns).to_numpy(dtype=np.float32)
    y = train[label_col].astype(bool).to_numpy()

    n_features = X.shape[1]
    max_features = min(mtry, n_features)
    if max_features < mtry:
        logger.warning(f"mtry={mtry} exceeds {n_features} features, using {max_features}")

    model = RandomForestClassifier(
        n_estimators=ntree,
        max_features=max_features,
        bootstrap=True,
        oob_score=True,
        random_state=int(rng.integers(np.iinfo(np.int32).max)),
        n_jobs=n_jobs,
    )
    logger.info(f"Training random forest: {ntree} trees, mtry={max_features}, "
                f"{len(X):,} rows × {n_features} features")
    model.fit(X, y)

    y_codes = np.searchsorted(model.classes_, y)
    mda, mda_std = oob_permutation_importance(model, X, y_codes, rng)
    importance = pd.DataFrame({
        'Feature': encoder.output_columns,
        'MEAN_DECREASE_ACCURACY': mda,
        'MDA_STD': mda_std,
        'MEAN_DECREASE_GINI': gini_importance(model),
    }).sort_values('MEAN_DECREASE_ACCURACY', ascending=False, ignore_index=True)

    oob_error = oob_error_rate(model, y_codes)
    logger.info(f"Random forest trained: OOB error {oob_error:.4f}")

    return BreakdownForest(model, encoder, importance, oob_error, label_col=label_col)


def oob_permutation_importance(model, X, y_codes, rng):
    """
    Per-tree out-of-bag permutation importance.

    Returns:
        (mean, std) arrays of accuracy decrease per feature; trees without
        out-of-bag rows are skipped
    """
    n_rows, n_features = X.shape
    drops = []

    for tree, in_bag in zip(model.estimators_, model.estimators_samples_):
        oob = np.ones(n_rows, dtype=bool)
        oob[in_bag] = False
        if not oob.any():
            continue

        X_oob = X[oob].copy()
        y_oob = y_codes[oob]
        baseline = np.mean(tree.predict(X_oob) == y_oob)

        tree_drops = np.empty(n_features)
        for j in range(n_features):
            original = X_oob[:, j].copy()
            X_oob[:, j] = rng.permutation(original)
            tree_drops[j] = baseline - np.mean(tree.predict(X_oob) == y_oob)
            X_oob[:, j] = original
        drops.append(tree_drops)

    if not drops:
        logger.warning("No out-of-bag rows available, permutation importance is zero")
        return np.zeros(n_features), np.zeros(n_features)

    drops = np.vstack(drops)
    return drops.mean(axis=0), drops.std(axis=0)


def oob_error_rate(model, y_codes):
    """
    Misclassification rate over rows that received out-of-bag votes.

    NaN when no row was ever left out of a bootstrap sample (tiny training sets).
    """
    decision = model.oob_decision_function_
    has_oob = decision.sum(axis=1) > 0
    if not has_oob.any():
        logger.warning("No out-of-bag rows available, OOB error is undefined")
        return float('nan')
    if not has_oob.all():
        logger.debug(f"{int((~has_oob).sum()):,} training rows never out-of-bag, excluded from OOB error")

    predicted = np.argmax(decision[has_oob], axis=1)
    return float(np.mean(predicted != y_codes[has_oob]))


def gini_importance(model):
    """Unnormalized Gini decrease per feature, averaged over trees."""
    per_tree = [tree.tree_.compute_feature_importances(normalize=False) for tree in model.estimators_]
    return np.mean(per_tree, axis=0)


def _tree_votes(model, X):
    # Trees are fit on class indices, so their predictions index model.classes_
    votes = np.zeros((X.shape[0], len(model.classes_)), dtype=int)
    rows = np.arange(X.shape[0])
    for tree in model.estimators_:
        votes[rows, tree.predict(X).astype(int)] += 1
    return votes


def save_model(forest, path):
    """Pickle a BreakdownForest (encoder included)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        pickle.dump(forest, f)
    logger.info(f"Saved model to {path}")
    return path


def load_model(path):
    with open(path, 'rb') as f:
        return pickle.load(f)
