"""
MAJOR BREAKDOWN CLASSIFIER
IWC Work Order Breakdown Analysis (v1.0)

Purpose:
- Predict whether a work order is a major breakdown
  (ACTUAL_WORK_IN_MINUTES > 60) from categorical/operational features
- Random forest (ntree=100, mtry=3) with majority-vote prediction
- Evaluate on a held-out partition: confusion matrix, accuracy,
  per-class error, feature importance

Strategy:
- Uniform random sample of 100,000 cleaned work orders (complete rows only)
- 80/20 train/test split, no stratification
- Category mapping learned on the training partition and saved with the model;
  unseen test levels fall into an UNKNOWN bucket
- Importance: mean decrease accuracy (OOB permutation) and mean decrease Gini

Input:  data/cleaned_IWC_Work_Orders.csv
Output: models/breakdown_forest.pkl, results/*.csv, outputs/model_evaluation/*.png

Author: Data Analytics Team
Date: 2026
"""

import sys
from datetime import datetime

import pandas as pd

from config import (
    CLEANED_FILE,
    MODEL_FILE,
    OUTPUT_DIR,
    CONFUSION_MATRIX_FILE,
    FEATURE_IMPORTANCE_FILE,
    MODEL_METRICS_FILE,
    BREAKDOWN_THRESHOLD_MINUTES,
    SAMPLE_SIZE,
    TRAIN_RATIO,
    RANDOM_STATE,
    NTREE,
    MTRY,
    create_directories,
    print_config_summary,
)
from column_mapping import format_feature_importance
from logger import (
    setup_logging,
    get_logger,
    log_script_start,
    log_script_end,
    log_dataframe_info,
    log_model_metrics,
)
from pipeline_validation import ValidationError
from workorders import (
    load_work_orders,
    clean_work_orders,
    label_major_breakdowns,
    make_rng,
    sample_work_orders,
    split_train_test,
    train_breakdown_forest,
    evaluate_model,
    save_model,
)
from workorders.plots import apply_plot_style, plot_confusion_matrix, plot_feature_importance

SCRIPT_NAME = 'Breakdown Classifier'
EVAL_DIR = OUTPUT_DIR / 'model_evaluation'

# Display settings
pd.set_option('display.max_columns', None)
pd.set_option('display.width', None)


def main():
    create_directories()
    setup_logging()
    logger = get_logger(__name__)
    start_time = datetime.now()
    log_script_start(logger, SCRIPT_NAME)
    apply_plot_style()

    print("="*100)
    print(" "*30 + "MAJOR BREAKDOWN CLASSIFIER")
    print(" "*30 + f"Random Forest | > {BREAKDOWN_THRESHOLD_MINUTES} min")
    print("="*100)
    print_config_summary()

    rng = make_rng(RANDOM_STATE)

    # ============================================================================
    # STEP 1: LOAD & CLEAN
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 1: LOADING CLEANED WORK ORDERS")
    print("="*100)

    df = load_work_orders(CLEANED_FILE)
    df = clean_work_orders(df)
    log_dataframe_info(logger, df, "Modeling work orders")
    print(f"\n✓ Loaded: {df.shape[0]:,} work orders × {df.shape[1]} columns")

    # ============================================================================
    # STEP 2: LABEL
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 2: CREATING MAJOR BREAKDOWN LABEL")
    print("="*100)

    df = label_major_breakdowns(df)
    dist = df['major_breakdown'].value_counts()
    pos_rate = dist.get(True, 0) / max(len(df), 1) * 100
    print(f"\n  Major (True): {dist.get(True, 0):,} ({pos_rate:.1f}%)")
    print(f"  Minor (False): {dist.get(False, 0):,} ({100-pos_rate:.1f}%)")

    if len(df) and (pos_rate < 5 or pos_rate > 95):
        logger.warning(f"Severe class imbalance ({pos_rate:.1f}% major breakdowns)")
        print(f"  ⚠️  WARNING: Severe class imbalance ({pos_rate:.1f}% positive)")

    # ============================================================================
    # STEP 3: SAMPLE & SPLIT
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 3: SAMPLING & TRAIN/TEST SPLIT")
    print("="*100)

    sampled = sample_work_orders(df, sample_size=SAMPLE_SIZE, rng=rng)
    split = split_train_test(sampled, train_ratio=TRAIN_RATIO, rng=rng)

    print(f"\n✓ Sample: {len(sampled):,} complete work orders")
    print(f"   Training set: {len(split.train):,} ({len(split.train)/split.n_rows*100:.1f}%)")
    print(f"   Test set: {len(split.test):,} ({len(split.test)/split.n_rows*100:.1f}%)")

    # ============================================================================
    # STEP 4: TRAIN
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 4: TRAINING RANDOM FOREST")
    print("="*100)

    model = train_breakdown_forest(split.train, ntree=NTREE, mtry=MTRY, rng=rng)
    print(f"\n✓ Trained {model.ntree} trees on {len(model.feature_names)} features")
    print(f"   OOB error: {model.oob_error:.4f}")
    save_model(model, MODEL_FILE)
    print(f"✓ Saved: {MODEL_FILE}")

    # ============================================================================
    # STEP 5: EVALUATE
    # ============================================================================
    print("\n" + "="*100)
    print("STEP 5: EVALUATION ON TEST SET")
    print("="*100)

    report = evaluate_model(model, split.test)
    metrics = report.metrics()
    log_model_metrics(logger, 'Random Forest', metrics)

    print(f"\nConfusion Matrix (rows = actual, columns = predicted):")
    print(report.confusion.to_string())
    print(f"\n✅ Accuracy: {report.accuracy:.4f}")
    print(f"   Class error (minor): {metrics['Class_Error_Minor']:.4f}")
    print(f"   Class error (major): {metrics['Class_Error_Major']:.4f}")

    importance = format_feature_importance(report.importance)
    print(f"\nFeature Importance (by mean decrease accuracy):")
    for i, row in enumerate(importance.itertuples(index=False), 1):
        print(f"  {i:2d}. {row.Display_Name:<45} MDA {row.MEAN_DECREASE_ACCURACY:>8.4f}  "
              f"Gini {row.MEAN_DECREASE_GINI:>8.4f}")

    report.confusion.to_csv(CONFUSION_MATRIX_FILE)
    importance.to_csv(FEATURE_IMPORTANCE_FILE, index=False)
    pd.DataFrame([metrics]).to_csv(MODEL_METRICS_FILE, index=False)
    print(f"\n✓ Saved: {CONFUSION_MATRIX_FILE}")
    print(f"✓ Saved: {FEATURE_IMPORTANCE_FILE}")
    print(f"✓ Saved: {MODEL_METRICS_FILE}")

    print(f"✓ Saved: {plot_confusion_matrix(report.confusion, EVAL_DIR / 'confusion_matrix.png')}")
    print(f"✓ Saved: {plot_feature_importance(report.importance, EVAL_DIR / 'feature_importance.png')}")

    print("\n" + "="*100)
    print(" "*35 + "BREAKDOWN CLASSIFIER COMPLETE")
    print("="*100)
    log_script_end(logger, SCRIPT_NAME, start_time)
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except ValidationError as e:
        get_logger(__name__).error(f"{SCRIPT_NAME} failed: {e}")
        print(f"\n❌ VALIDATION FAILED: {e}", file=sys.stderr)
        sys.exit(1)
