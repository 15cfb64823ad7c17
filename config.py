"""
CENTRALIZED CONFIGURATION
IWC Work Order Breakdown Analysis

This file contains all configuration parameters used across the pipeline.
Update values here instead of modifying individual scripts.

Author: Data Analytics Team
Date: 2026-10-19
Version: 1.0
"""

from pathlib import Path

# ============================================================================
# FILE PATHS
# ============================================================================

# Data directories
DATA_DIR = Path('data')
OUTPUT_DIR = Path('outputs')
MODEL_DIR = Path('models')
RESULTS_DIR = Path('results')
REPORTS_DIR = Path('reports')

# Input files
INPUT_FILE = DATA_DIR / 'IWC_Work_Orders.csv'

# Hand-off between profiling and modeling
CLEANED_FILE = DATA_DIR / 'cleaned_IWC_Work_Orders.csv'

# Output files
MODEL_FILE = MODEL_DIR / 'breakdown_forest.pkl'
CONFUSION_MATRIX_FILE = RESULTS_DIR / 'confusion_matrix.csv'
FEATURE_IMPORTANCE_FILE = RESULTS_DIR / 'feature_importance.csv'
MODEL_METRICS_FILE = RESULTS_DIR / 'model_metrics.csv'
PLANT_BREAKDOWN_FILE = RESULTS_DIR / 'plant_breakdown_frequency.csv'
MAINTENANCE_TYPE_FILE = RESULTS_DIR / 'maintenance_type_distribution.csv'
ACTIVITY_TYPE_FILE = RESULTS_DIR / 'activity_type_breakdown.csv'
DOWNTIME_SUMMARY_FILE = RESULTS_DIR / 'downtime_summary.csv'
TOP_EQUIPMENT_FILE = RESULTS_DIR / 'top_equipment_by_downtime.csv'
MONTHLY_TREND_FILE = RESULTS_DIR / 'monthly_work_order_trend.csv'
PROFILING_REPORT_FILE = REPORTS_DIR / 'data_quality_report.txt'

# ============================================================================
# COLUMN ROLES
# ============================================================================

DURATION_COLUMN = 'ACTUAL_WORK_IN_MINUTES'
EQUIPMENT_ID_COLUMN = 'EQUIPMENT_ID'
PLANT_ID_COLUMN = 'PLANT_ID'
ORDER_ID_COLUMN = 'ORDER_ID'
MAINTENANCE_TYPE_COLUMN = 'MAINTENANCE_TYPE_DESCRIPTION'
ACTIVITY_TYPE_COLUMN = 'MAINTENANCE_ACTIVITY_TYPE'
EXECUTION_START_COLUMN = 'EXECUTION_START_DATE'
LABEL_COLUMN = 'major_breakdown'

# Identifier columns removed before modeling (PLANT_ID is kept for EDA)
ID_COLUMNS_TO_DROP = [ORDER_ID_COLUMN, PLANT_ID_COLUMN]

# Equipment id values treated as missing (after whitespace strip)
MISSING_ID_TOKENS = ['', 'NA']

# Date columns expanded to year/month/day-of-week features
DATE_COLUMNS = [
    'EXECUTION_START_DATE',
    'EXECUTION_FINISH_DATE',
    'EQUIP_VALID_FROM',
    'EQUIP_VALID_TO',
]

# ============================================================================
# LABEL CONFIGURATION
# ============================================================================

# Work orders longer than this many minutes are major breakdowns
# NOTE: business convention, not derived from the data
BREAKDOWN_THRESHOLD_MINUTES = 60

# ============================================================================
# MODEL CONFIGURATION
# ============================================================================

# Random seed for reproducibility
RANDOM_STATE = 42

# Sampling and split
SAMPLE_SIZE = 100_000
TRAIN_RATIO = 0.8
MIN_ROWS_FOR_TRAINING = 2

# Random forest hyperparameters
NTREE = 100   # Ensemble size
MTRY = 3      # Features considered per split
N_JOBS = -1   # Parallel tree construction

# Categorical encoding
MAX_CATEGORY_LEVELS = 50   # Codes per categorical column, __UNKNOWN__ included
UNKNOWN_LEVEL = '__UNKNOWN__'

# ============================================================================
# PIPELINE VALIDATION
# ============================================================================

MIN_CLEANED_RECORDS = 2
MIN_TEST_RECORDS = 1

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

# Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
LOG_LEVEL = 'INFO'

# Log file location
LOG_DIR = Path('logs')
LOG_FILE = LOG_DIR / 'pipeline.log'

# Log format
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Console logging
CONSOLE_LOG_LEVEL = 'INFO'

# ============================================================================
# VISUALIZATION CONFIGURATION
# ============================================================================

# Plot style
PLOT_STYLE = 'seaborn-v0_8-whitegrid'

# Figure size (inches)
FIGURE_SIZE = (12, 6)

# DPI for saved figures
FIGURE_DPI = 300

# Bars shown in ranked charts
TOP_N_PLOT = 20

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def create_directories():
    """Create all required directories if they don't exist."""
    directories = [
        DATA_DIR,
        OUTPUT_DIR,
        MODEL_DIR,
        RESULTS_DIR,
        REPORTS_DIR,
        LOG_DIR,
        OUTPUT_DIR / 'eda',
        OUTPUT_DIR / 'model_evaluation',
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def print_config_summary():
    """Print configuration summary."""
    print("="*80)
    print(" "*25 + "PIPELINE CONFIGURATION")
    print("="*80)
    print(f"\nFiles:")
    print(f"  Input: {INPUT_FILE}")
    print(f"  Cleaned: {CLEANED_FILE}")
    print(f"  Model: {MODEL_FILE}")
    print(f"\nLabel:")
    print(f"  Major breakdown: {DURATION_COLUMN} > {BREAKDOWN_THRESHOLD_MINUTES} min")
    print(f"\nModeling:")
    print(f"  Random State: {RANDOM_STATE}")
    print(f"  Sample Size: {SAMPLE_SIZE:,}")
    print(f"  Train Ratio: {TRAIN_RATIO*100:.0f}%")
    print(f"  Random Forest: ntree={NTREE}, mtry={MTRY}")
    print(f"  Max Category Levels: {MAX_CATEGORY_LEVELS}")
    print("="*80)


if __name__ == '__main__':
    # Test configuration by printing summary
    print_config_summary()

    # Create directories
    print("\nCreating directories...")
    create_directories()
    print("✓ All directories created")
