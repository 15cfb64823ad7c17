"""
FEATURE ENCODING FOR THE BREAKDOWN CLASSIFIER

Turns a work order frame into a numeric matrix with a mapping learned on the
training partition only, so the test partition (and any later scoring) is
encoded exactly as training was:

- numeric columns pass through (missing → training median)
- date columns become _YEAR / _MONTH / _DAYOFWEEK numeric features
- everything else is categorical: one fitted OrdinalEncoder per column keeps
  at most MAX_CATEGORY_LEVELS codes; rare, missing and never-seen values all
  share the last code (UNKNOWN)
"""

import numpy as np
import pandas as pd
from sklearn.preprocessing import OrdinalEncoder

from config import DATE_COLUMNS, MAX_CATEGORY_LEVELS, UNKNOWN_LEVEL
from logger import get_logger
from workorders.date_parser import parse_date_column

logger = get_logger(__name__)

DATE_PARTS = ('YEAR', 'MONTH', 'DAYOFWEEK')

# Placeholder for unknown / missing values before they are folded into the UNKNOWN code
_UNSET_CODE = -1


class CategoryEncoder:
    """
    Column-wise encoder fitted on training work orders.

    Attributes (after fit):
        feature_columns: input columns, in order
        numeric_medians: {column: median} for numeric columns
        date_columns: columns expanded into date parts
        category_encoders: {column: fitted OrdinalEncoder}
        category_levels: {column: [level, ...]} kept levels, ordered by code
        output_columns: names of the encoded matrix columns
    """

    def __init__(self, max_levels=MAX_CATEGORY_LEVELS, date_columns=DATE_COLUMNS,
                 unknown_level=UNKNOWN_LEVEL):
        if max_levels < 1:
            raise ValueError(f"max_levels must be at least 1, got {max_levels}")
        self.max_levels = max_levels
        self.candidate_date_columns = list(date_columns)
        self.unknown_level = unknown_level
        self.feature_columns = None
        self.numeric_medians = {}
        self.date_columns = []
        self.category_encoders = {}
        self.category_levels = {}
        self.output_columns = []

    @property
    def is_fitted(self):
        return self.feature_columns is not None

    def fit(self, df, feature_columns):
        self.feature_columns = list(feature_columns)
        self.numeric_medians = {}
        self.date_columns = []
        self.category_encoders = {}
        self.category_levels = {}
        self.output_columns = []

        for col in self.feature_columns:
            series = df[col]
            if col in self.candidate_date_columns:
                self.date_columns.append(col)
                dates = parse_date_column(series)
                for part in DATE_PARTS:
                    name = f"{col}_{part}"
                    values = _date_part(dates, part)
                    self.numeric_medians[name] = _median_or_zero(values)
                    self.output_columns.append(name)
            elif pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
                self.numeric_medians[col] = _median_or_zero(series)
                self.output_columns.append(col)
            else:
                # max_categories counts the infrequent group, which doubles as UNKNOWN
                encoder = OrdinalEncoder(
                    handle_unknown='use_encoded_value',
                    unknown_value=_UNSET_CODE,
                    encoded_missing_value=_UNSET_CODE,
                    max_categories=self.max_levels,
                )
                encoder.fit(_as_levels(series).to_frame(col))
                self.category_encoders[col] = encoder
                self.category_levels[col] = _kept_levels(encoder)
                self.output_columns.append(col)

                n_levels = len(_seen_levels(encoder))
                if n_levels > len(self.category_levels[col]):
                    logger.debug(
                        f"{col}: {n_levels:,} levels, keeping {len(self.category_levels[col])} "
                        f"(rest → {self.unknown_level})"
                    )

        logger.info(
            f"Encoder fitted: {len(self.feature_columns)} input columns → "
            f"{len(self.output_columns)} features "
            f"({len(self.category_encoders)} categorical, {len(self.date_columns)} date)"
        )
        return self

    def transform(self, df):
        """Encode df into a float DataFrame with output_columns, aligned to df.index."""
        if not self.is_fitted:
            raise RuntimeError("CategoryEncoder must be fitted before transform")

        missing = [col for col in self.feature_columns if col not in df.columns]
        if missing:
            raise KeyError(f"Columns missing for encoding: {missing}")

        encoded = {}
        for col in self.feature_columns:
            series = df[col]
            if col in self.date_columns:
                dates = parse_date_column(series)
                for part in DATE_PARTS:
                    name = f"{col}_{part}"
                    encoded[name] = _date_part(dates, part).fillna(self.numeric_medians[name])
            elif col in self.category_encoders:
                encoded[col] = self._encode_categorical(col, series)
            else:
                values = pd.to_numeric(series, errors='coerce')
                encoded[col] = values.fillna(self.numeric_medians[col])

        return pd.DataFrame(encoded, index=df.index)[self.output_columns].astype(float)

    def fit_transform(self, df, feature_columns):
        return self.fit(df, feature_columns).transform(df)

    def unknown_code(self, col):
        return len(self.category_levels[col])

    def _encode_categorical(self, col, series):
        codes = self.category_encoders[col].transform(_as_levels(series).to_frame(col))[:, 0]
        codes[codes == _UNSET_CODE] = self.unknown_code(col)
        return pd.Series(codes, index=series.index)

    def count_unseen_levels(self, df):
        """Count values per categorical column that never appeared in training."""
        counts = {}
        for col, encoder in self.category_encoders.items():
            values = _as_levels(df[col]).dropna()
            unseen = int((~values.isin(_seen_levels(encoder))).sum())
            if unseen:
                counts[col] = unseen
        return counts


def _as_levels(series):
    # One dtype for the encoder: strings, with real NaN for missing
    return series.astype(str).where(series.notna(), np.nan).astype(object)


def _seen_levels(encoder):
    return [level for level in encoder.categories_[0] if not pd.isna(level)]


def _kept_levels(encoder):
    infrequent = encoder.infrequent_categories_[0]
    rare = set() if infrequent is None else set(infrequent)
    return [level for level in _seen_levels(encoder) if level not in rare]


def _date_part(dates, part):
    if part == 'YEAR':
        return dates.dt.year.astype(float)
    if part == 'MONTH':
        return dates.dt.month.astype(float)
    return dates.dt.dayofweek.astype(float)


def _median_or_zero(values):
    median = pd.to_numeric(values, errors='coerce').median()
    return 0.0 if pd.isna(median) else float(median)
