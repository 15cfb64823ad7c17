"""
LOGGING UTILITY
IWC Work Order Breakdown Analysis

One shared log file (logs/pipeline.log) plus a terse console
stream. Library modules only call get_logger(__name__); the step scripts call
setup_logging() once and use the helpers below for run banners, work order
snapshots and classifier metrics.

Author: Data Analytics Team
Date: 2026-10-19
"""

import logging
import math
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd

from config import (
    LOG_FILE,
    LOG_LEVEL,
    LOG_FORMAT,
    LOG_DATE_FORMAT,
    CONSOLE_LOG_LEVEL,
    DURATION_COLUMN,
    EQUIPMENT_ID_COLUMN,
    LABEL_COLUMN,
    BREAKDOWN_THRESHOLD_MINUTES,
    RANDOM_STATE,
)


def setup_logging(log_file=None, log_level=None, console_level=None):
    """
    Route all pipeline loggers to a detailed file handler and a short console handler.

    Calling it again replaces the previous handlers, so each step script can
    call it unconditionally.

    Returns:
        logging.Logger: the root logger
    """
    log_file = Path(log_file or LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel((log_level or LOG_LEVEL).upper())
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel((console_level or CONSOLE_LOG_LEVEL).upper())
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    root_logger.addHandler(console_handler)

    return root_logger


def get_logger(name):
    return logging.getLogger(name)


def log_script_start(logger, script_name, script_version="1.0"):
    """Banner for a step script, with the run's label threshold and seed."""
    logger.info("="*80)
    logger.info(f"{script_name} v{script_version} - STARTED {datetime.now():%Y-%m-%d %H:%M:%S}")
    logger.info(f"Major breakdown: {DURATION_COLUMN} > {BREAKDOWN_THRESHOLD_MINUTES} min | seed {RANDOM_STATE}")
    logger.info("="*80)


def log_script_end(logger, script_name, start_time=None):
    logger.info("="*80)
    if start_time:
        logger.info(f"{script_name} - COMPLETED in {datetime.now() - start_time}")
    else:
        logger.info(f"{script_name} - COMPLETED")
    logger.info("="*80)


def log_dataframe_info(logger, df, name="Work orders"):
    """
    Log a work order snapshot: size, distinct equipment, unusable durations
    and, once labeled, the major breakdown share.
    """
    logger.info(f"{name}: {len(df):,} rows × {len(df.columns)} columns")

    if EQUIPMENT_ID_COLUMN in df.columns:
        logger.info(f"{name}: {df[EQUIPMENT_ID_COLUMN].nunique():,} distinct equipment")

    if DURATION_COLUMN in df.columns:
        n_unusable = int(pd.to_numeric(df[DURATION_COLUMN], errors='coerce').isna().sum())
        if n_unusable:
            logger.info(f"{name}: {n_unusable:,} missing or non-numeric durations")

    if LABEL_COLUMN in df.columns and len(df):
        n_major = int(df[LABEL_COLUMN].astype(bool).sum())
        logger.info(f"{name}: {n_major:,} major breakdowns ({n_major / len(df) * 100:.1f}%)")

    logger.debug(f"{name} memory usage: {df.memory_usage(deep=True).sum() / 1024**2:.2f} MB")


def log_model_metrics(logger, model_name, metrics_dict):
    """
    Log classifier metrics, one per line; undefined values (NaN) show as n/a.
    """
    logger.info(f"{model_name} Performance:")
    for metric_name, value in metrics_dict.items():
        if isinstance(value, float):
            shown = 'n/a' if math.isnan(value) else f"{value:.4f}"
        else:
            shown = value
        logger.info(f"  {metric_name}: {shown}")