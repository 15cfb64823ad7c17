"""
PIPELINE VALIDATION MODULE
IWC Work Order Breakdown Analysis

This module provides validation functions to ensure data integrity
between pipeline steps. Catches errors early before they cascade.

Usage:
    from pipeline_validation import validate_step_output, ValidationError

    try:
        validate_step_output(step=1, check_files=True)
    except ValidationError as e:
        logger.error(f"Validation failed: {e}")
        sys.exit(1)

Author: Data Analytics Team
Date: 2026-10-19
"""

import pandas as pd
from pathlib import Path
from typing import List, Dict, Optional
import sys

from config import (
    CLEANED_FILE,
    MODEL_FILE,
    CONFUSION_MATRIX_FILE,
    FEATURE_IMPORTANCE_FILE,
    MODEL_METRICS_FILE,
    PLANT_BREAKDOWN_FILE,
    MAINTENANCE_TYPE_FILE,
    DURATION_COLUMN,
    EQUIPMENT_ID_COLUMN,
    PLANT_ID_COLUMN,
    MIN_CLEANED_RECORDS,
)


class ValidationError(Exception):
    """Custom exception for pipeline validation failures."""
    pass


class InsufficientRowsError(ValidationError):
    """Raised when too few rows survive filtering to continue."""
    pass


# ============================================================================
# STEP-SPECIFIC VALIDATION SCHEMAS
# ============================================================================

STEP_VALIDATIONS = {
    1: {
        'name': 'Data Profiling',
        'outputs': [CLEANED_FILE],
        'checks': [
            {'file': CLEANED_FILE, 'min_rows': MIN_CLEANED_RECORDS,
             'required_columns': [EQUIPMENT_ID_COLUMN, DURATION_COLUMN],
             'non_null_columns': [EQUIPMENT_ID_COLUMN, DURATION_COLUMN]}
        ]
    },
    2: {
        'name': 'Exploratory Data Analysis',
        'outputs': [PLANT_BREAKDOWN_FILE, MAINTENANCE_TYPE_FILE],
        'checks': [
            {'file': PLANT_BREAKDOWN_FILE, 'min_rows': 1,
             'required_columns': [PLANT_ID_COLUMN, 'Work_Orders', 'Major_Breakdowns']}
        ]
    },
    3: {
        'name': 'Breakdown Classifier',
        'outputs': [MODEL_FILE, CONFUSION_MATRIX_FILE, FEATURE_IMPORTANCE_FILE, MODEL_METRICS_FILE],
        'checks': [
            {'file': FEATURE_IMPORTANCE_FILE, 'min_rows': 1,
             'required_columns': ['Feature', 'MEAN_DECREASE_ACCURACY', 'MEAN_DECREASE_GINI']},
            {'file': MODEL_METRICS_FILE, 'expected_rows': 1,
             'required_columns': ['Accuracy', 'Test_Rows'],
             'non_null_columns': ['Accuracy', 'Test_Rows']}
        ]
    },
}


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def validate_file_exists(file_path: Path) -> None:
    """Validate that a file exists."""
    if not Path(file_path).exists():
        raise ValidationError(f"Required file not found: {file_path}")


def validate_dataframe_shape(df: pd.DataFrame, name: str,
                             min_rows: Optional[int] = None,
                             max_rows: Optional[int] = None,
                             expected_rows: Optional[int] = None) -> None:
    """Validate DataFrame dimensions."""
    rows = len(df)

    if min_rows is not None and rows < min_rows:
        raise ValidationError(f"{name}: Too few rows ({rows} < {min_rows})")

    if max_rows is not None and rows > max_rows:
        raise ValidationError(f"{name}: Too many rows ({rows} > {max_rows})")

    if expected_rows is not None and rows != expected_rows:
        raise ValidationError(f"{name}: Expected {expected_rows} rows, got {rows}")


def validate_required_columns(df: pd.DataFrame, name: str,
                              required_columns: List[str]) -> None:
    """Validate that required columns exist."""
    missing_cols = [col for col in required_columns if col not in df.columns]
    if missing_cols:
        raise ValidationError(
            f"{name}: Missing required columns: {', '.join(missing_cols)}"
        )


def validate_min_rows(df: pd.DataFrame, min_rows: int, stage: str) -> None:
    """
    Fail fast when a filtering stage leaves too few rows.

    Raises:
        InsufficientRowsError: If len(df) < min_rows
    """
    if len(df) < min_rows:
        raise InsufficientRowsError(
            f"insufficient rows after {stage}: {len(df)} remaining, "
            f"at least {min_rows} required"
        )


def validate_no_nulls_in_key_columns(df: pd.DataFrame, name: str,
                                     key_columns: List[str]) -> None:
    """Validate that key columns have no null values."""
    for col in key_columns:
        if col in df.columns:
            null_count = df[col].isnull().sum()
            if null_count > 0:
                raise ValidationError(
                    f"{name}: Column '{col}' has {null_count} null values"
                )


def validate_step_output(step: int, check_files: bool = True, verbose: bool = True) -> Dict:
    """
    Validate output files and data quality for a pipeline step.

    Args:
        step: Step number (1-3)
        check_files: Whether to validate file contents (slower but thorough)
        verbose: Print validation progress

    Returns:
        Dict with validation results

    Raises:
        ValidationError: If validation fails
    """
    if step not in STEP_VALIDATIONS:
        raise ValueError(f"Invalid step number: {step}. Must be 1-{len(STEP_VALIDATIONS)}.")

    validation = STEP_VALIDATIONS[step]
    results = {
        'step': step,
        'name': validation['name'],
        'files_validated': [],
        'checks_passed': 0,
    }

    if verbose:
        print(f"\n🔍 Validating Step {step}: {validation['name']}...")

    for output_file in validation['outputs']:
        try:
            validate_file_exists(output_file)
        except ValidationError as e:
            raise ValidationError(f"Step {step} validation failed: {e}") from e
        results['files_validated'].append(str(output_file))
        if verbose:
            print(f"  ✓ File exists: {Path(output_file).name}")

    if check_files:
        for check in validation['checks']:
            file_path = Path(check['file'])
            df = pd.read_csv(file_path)

            validate_dataframe_shape(
                df, file_path.name,
                min_rows=check.get('min_rows'),
                max_rows=check.get('max_rows'),
                expected_rows=check.get('expected_rows')
            )

            if 'required_columns' in check:
                validate_required_columns(df, file_path.name, check['required_columns'])

            if 'non_null_columns' in check:
                validate_no_nulls_in_key_columns(df, file_path.name, check['non_null_columns'])

            results['checks_passed'] += 1
            if verbose:
                print(f"  ✓ Data validation passed: {file_path.name} ({df.shape[0]} rows, {df.shape[1]} cols)")

    if verbose:
        print(f"✅ Step {step} validation complete: {results['checks_passed']} checks passed")

    return results


def validate_or_exit(step: int, verbose: bool = True) -> None:
    """Validate step output, exit if validation fails."""
    try:
        validate_step_output(step, check_files=True, verbose=verbose)
    except ValidationError as e:
        print(f"\n❌ VALIDATION FAILED: {e}", file=sys.stderr)
        print(f"Pipeline cannot continue. Fix errors in step {step}.", file=sys.stderr)
        sys.exit(1)


# ============================================================================
# MAIN - FOR TESTING
# ============================================================================

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Validate breakdown pipeline outputs')
    parser.add_argument('--step', type=int, help='Validate specific step (1-3)')
    parser.add_argument('--all', action='store_true', help='Validate all steps')
    parser.add_argument('--quick', action='store_true', help='Quick validation (files only)')

    args = parser.parse_args()

    try:
        if args.all:
            for step in STEP_VALIDATIONS:
                validate_step_output(step, check_files=not args.quick, verbose=True)
        elif args.step:
            validate_step_output(args.step, check_files=not args.quick, verbose=True)
        else:
            print("Usage: python pipeline_validation.py --step 3")
            print("       python pipeline_validation.py --all")
            sys.exit(1)

    except ValidationError as e:
        print(f"\n❌ Validation failed: {e}", file=sys.stderr)
        sys.exit(1)
