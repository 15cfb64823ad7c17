"""
Sampling and train/test splitting of labeled work orders.

All randomness flows through an explicit numpy Generator so a run is
reproducible from its seed without touching global random state.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd

from config import SAMPLE_SIZE, TRAIN_RATIO, RANDOM_STATE, MIN_ROWS_FOR_TRAINING
from logger import get_logger
from pipeline_validation import validate_min_rows

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrainTestSplit:
    """Disjoint train/test partitions of one sampled dataset."""
    train: pd.DataFrame
    test: pd.DataFrame

    @property
    def n_rows(self):
        return len(self.train) + len(self.test)


def make_rng(seed=RANDOM_STATE):
    """Create the generator shared by sampling, splitting and training."""
    return np.random.default_rng(seed)


def sample_work_orders(df, sample_size=SAMPLE_SIZE, rng=None,
                       min_rows=MIN_ROWS_FOR_TRAINING):
    """
    Draw a uniform random sample without replacement, then keep complete rows only.

    A sample_size larger than the dataset returns the whole dataset (in
    sampled order, no duplicates).

    Raises:
        InsufficientRowsError: If fewer than min_rows complete rows survive
        ValueError: If sample_size is not positive
    """
    if sample_size <= 0:
        raise ValueError(f"sample_size must be positive, got {sample_size}")
    if rng is None:
        rng = make_rng()

    validate_min_rows(df, min_rows, 'cleaning')

    n = min(sample_size, len(df))
    if n < sample_size:
        logger.info(f"Requested sample of {sample_size:,} exceeds {len(df):,} rows, using all rows")

    sampled = df.sample(n=n, replace=False, random_state=rng)
    complete = sampled.dropna(how='any')

    logger.info(
        f"Sampled {n:,} work orders, {len(complete):,} complete "
        f"({n - len(complete):,} dropped for missing values)"
    )
    validate_min_rows(complete, min_rows, 'cleaning and sampling')
    return complete


def split_train_test(df, train_ratio=TRAIN_RATIO, rng=None):
    """
    Partition rows into train (floor(n * train_ratio) rows) and test (the rest).

    Row positions are drawn without replacement and without stratification.
    Both partitions keep at least one row.

    Raises:
        InsufficientRowsError: If df has fewer than 2 rows
        ValueError: If train_ratio is not strictly between 0 and 1
    """
    if not 0 < train_ratio < 1:
        raise ValueError(f"train_ratio must be between 0 and 1, got {train_ratio}")
    if rng is None:
        rng = make_rng()

    validate_min_rows(df, 2, 'sampling')

    n = len(df)
    n_train = min(max(int(n * train_ratio), 1), n - 1)

    train_positions = rng.choice(n, size=n_train, replace=False)
    is_train = np.zeros(n, dtype=bool)
    is_train[train_positions] = True

    split = TrainTestSplit(train=df.iloc[np.sort(train_positions)], test=df.iloc[~is_train])
    logger.info(f"Train/test split: {len(split.train):,} / {len(split.test):,}")
    return split
