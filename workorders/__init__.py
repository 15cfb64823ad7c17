"""
Work Order Breakdown Analysis
=============================
Cleaning, labeling, sampling, random forest training and evaluation for
maintenance work orders, plus the EDA tables behind the profiling step.
"""

from .date_parser import parse_date_flexible, parse_date_column
from .loading import load_work_orders, save_work_orders
from .cleaning import clean_work_orders, label_major_breakdowns
from .sampling import TrainTestSplit, make_rng, sample_work_orders, split_train_test
from .encoding import CategoryEncoder
from .forest import BreakdownForest, train_breakdown_forest, save_model, load_model
from .evaluation import EvaluationReport, evaluate_model

__all__ = [
    'parse_date_flexible',
    'parse_date_column',
    'load_work_orders',
    'save_work_orders',
    'clean_work_orders',
    'label_major_breakdowns',
    'TrainTestSplit',
    'make_rng',
    'sample_work_orders',
    'split_train_test',
    'CategoryEncoder',
    'BreakdownForest',
    'train_breakdown_forest',
    'save_model',
    'load_model',
    'EvaluationReport',
    'evaluate_model',
]
