"""
Figures for the EDA and model evaluation steps.

Every helper saves one PNG, closes its figure and returns the saved path.
"""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from config import (
    DURATION_COLUMN,
    PLANT_ID_COLUMN,
    MAINTENANCE_TYPE_COLUMN,
    BREAKDOWN_THRESHOLD_MINUTES,
    FIGURE_SIZE,
    FIGURE_DPI,
    PLOT_STYLE,
    TOP_N_PLOT,
)
from column_mapping import get_display_name


def apply_plot_style():
    plt.style.use(PLOT_STYLE)
    sns.set_palette("husl")


def _save(fig, path, dpi):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_downtime_distribution(df, path, threshold=BREAKDOWN_THRESHOLD_MINUTES,
                               duration_col=DURATION_COLUMN, dpi=FIGURE_DPI):
    """Histogram of work duration on a log axis with the breakdown threshold marked."""
    durations = df[duration_col].dropna()
    durations = durations[durations > 0]

    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    if len(durations):
        bins = np.logspace(np.log10(durations.min()), np.log10(durations.max()) + 1e-9, 50)
        ax.hist(durations, bins=bins, color='steelblue', edgecolor='white')
        ax.set_xscale('log')
    ax.axvline(threshold, color='crimson', linestyle='--', linewidth=2,
               label=f'Major breakdown threshold ({threshold} min)')
    ax.set_xlabel(get_display_name(duration_col), fontsize=11)
    ax.set_ylabel('Work Orders', fontsize=11)
    ax.set_title('Work Duration Distribution', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(axis='y', alpha=0.3)
    return _save(fig, path, dpi)


def plot_plant_breakdowns(plant_table, path, plant_col=PLANT_ID_COLUMN, top_n=TOP_N_PLOT, dpi=FIGURE_DPI):
    """Horizontal bars of major breakdowns per plant (output of plant_breakdown_frequency)."""
    top = plant_table.head(top_n)

    fig, axes = plt.subplots(1, 2, figsize=(16, 6))

    ax = axes[0]
    ax.barh(top[plant_col].astype(str), top['Major_Breakdowns'], color='coral')
    ax.set_xlabel('Major Breakdowns', fontsize=11)
    ax.set_ylabel(get_display_name(plant_col), fontsize=11)
    ax.set_title('Major Breakdowns by Plant', fontsize=13, fontweight='bold')
    ax.invert_yaxis()
    ax.grid(axis='x', alpha=0.3)

    ax = axes[1]
    ax.barh(top[plant_col].astype(str), top['Breakdown_Rate_Pct'], color='steelblue')
    ax.set_xlabel('Breakdown Rate (%)', fontsize=11)
    ax.set_title('Breakdown Rate by Plant', fontsize=13, fontweight='bold')
    ax.invert_yaxis()
    ax.grid(axis='x', alpha=0.3)

    return _save(fig, path, dpi)


def plot_maintenance_types(type_table, path, type_col=MAINTENANCE_TYPE_COLUMN, top_n=TOP_N_PLOT, dpi=FIGURE_DPI):
    """Work order counts and mean downtime per maintenance type."""
    top = type_table.head(top_n)

    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    sns.barplot(x=top['Count'], y=top[type_col].astype(str), ax=axes[0], color='steelblue')
    axes[0].set_xlabel('Work Orders', fontsize=11)
    axes[0].set_ylabel(get_display_name(type_col), fontsize=11)
    axes[0].set_title('Maintenance Type Distribution', fontsize=13, fontweight='bold')

    sns.barplot(x=top['Mean_Downtime_Min'], y=top[type_col].astype(str), ax=axes[1], color='coral')
    axes[1].set_xlabel('Mean Downtime (min)', fontsize=11)
    axes[1].set_ylabel('')
    axes[1].set_title('Mean Downtime by Maintenance Type', fontsize=13, fontweight='bold')

    return _save(fig, path, dpi)


def plot_monthly_trend(trend_table, path, dpi=FIGURE_DPI):
    """Monthly work orders with major breakdowns overlaid."""
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    months = trend_table['Month'].astype(str)
    ax.plot(months, trend_table['Work_Orders'], marker='o', label='Work Orders')
    ax.plot(months, trend_table['Major_Breakdowns'], marker='s', color='crimson', label='Major Breakdowns')
    ax.set_xlabel('Execution Month', fontsize=11)
    ax.set_ylabel('Count', fontsize=11)
    ax.set_title('Monthly Work Order Trend', fontsize=14, fontweight='bold')
    ax.tick_params(axis='x', rotation=90)
    ax.legend()
    ax.grid(alpha=0.3)
    return _save(fig, path, dpi)


def plot_confusion_matrix(confusion, path, dpi=FIGURE_DPI):
    """Heatmap of the actual × predicted confusion matrix."""
    fig, ax = plt.subplots(figsize=(6, 5))
    labels = ['Minor', 'Major']
    sns.heatmap(confusion.to_numpy(), annot=True, fmt='d', cmap='Blues', cbar=False,
                xticklabels=labels, yticklabels=labels, ax=ax)
    ax.set_xlabel('Predicted', fontsize=11)
    ax.set_ylabel('Actual', fontsize=11)
    ax.set_title('Confusion Matrix (Test Set)', fontsize=13, fontweight='bold')
    return _save(fig, path, dpi)


def plot_feature_importance(importance, path, top_n=TOP_N_PLOT, dpi=FIGURE_DPI):
    """Side-by-side mean decrease accuracy / Gini bars (importance table from the forest)."""
    top = importance.head(top_n)

    fig, axes = plt.subplots(1, 2, figsize=(16, max(4, 0.4 * len(top) + 2)))
    axes[0].barh(top['Feature'], top['MEAN_DECREASE_ACCURACY'],
                 xerr=top['MDA_STD'] if 'MDA_STD' in top else None, color='steelblue')
    axes[0].set_xlabel('Mean Decrease Accuracy', fontsize=11)
    axes[0].set_title('Permutation Importance (OOB)', fontsize=13, fontweight='bold')
    axes[0].invert_yaxis()
    axes[0].grid(axis='x', alpha=0.3)

    by_gini = top.sort_values('MEAN_DECREASE_GINI', ascending=False)
    axes[1].barh(by_gini['Feature'], by_gini['MEAN_DECREASE_GINI'], color='coral')
    axes[1].set_xlabel('Mean Decrease Gini', fontsize=11)
    axes[1].set_title('Impurity Importance', fontsize=13, fontweight='bold')
    axes[1].invert_yaxis()
    axes[1].grid(axis='x', alpha=0.3)

    return _save(fig, path, dpi)
