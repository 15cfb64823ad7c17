"""
IWC WORK ORDER PIPELINE RUNNER WITH LOGGING v1.0

This script runs the whole breakdown analysis and captures all outputs.

PIPELINE FLOW (3 STEPS):
    1. Data Profiling        → Profile raw export, clean, write hand-off CSV
    2. Exploratory Analysis  → Downtime, plant, maintenance-type tables + plots
    3. Breakdown Classifier  → Random forest: sample, split, train, evaluate

Usage:
    python run_pipeline.py

Output:
    - Individual log files for each step in logs/run_TIMESTAMP/
    - Master log file with all outputs combined
    - Summary report with execution times
"""

import subprocess
import sys
import time
from datetime import datetime
from pathlib import Path

from pipeline_validation import validate_step_output, ValidationError

PIPELINE_STEPS = [
    {
        'step': 1,
        'name': 'Data Profiling',
        'script': '01_data_profiling.py',
        'description': 'Profile raw work orders and write the cleaned hand-off file'
    },
    {
        'step': 2,
        'name': 'Exploratory Analysis',
        'script': '02_eda.py',
        'description': 'Downtime, plant breakdown frequency, maintenance types'
    },
    {
        'step': 3,
        'name': 'Breakdown Classifier',
        'script': '03_breakdown_classifier.py',
        'description': 'Train and evaluate the major breakdown random forest'
    },
]


def run_step(step_info, log_dir, master_log_path):
    """Run one step script, write its logs and return (returncode, duration)."""
    step_num = step_info['step']
    script = step_info['script']
    log_file = log_dir / f"{script.replace('.py', '.log')}"

    step_start = time.time()
    result = subprocess.run(
        [sys.executable, script],
        capture_output=True,
        text=True,
        encoding='utf-8',
        errors='replace'
    )
    step_duration = time.time() - step_start

    header = (
        f"STEP {step_num}: {step_info['name']}\n"
        f"Script: {script}\n"
        f"Duration: {step_duration:.1f} seconds\n"
        + "="*100 + "\n\n"
    )

    with open(log_file, 'w', encoding='utf-8') as f:
        f.write(header)
        f.write("STDOUT:\n")
        f.write(result.stdout)
        if result.stderr:
            f.write("\n\nSTDERR:\n")
            f.write(result.stderr)

    with open(master_log_path, 'a', encoding='utf-8') as f:
        f.write(f"\n{'='*100}\n")
        f.write(header)
        f.write(result.stdout)
        if result.stderr:
            f.write("\n\nSTDERR:\n")
            f.write(result.stderr)
        f.write("\n")

    return result.returncode, step_duration, log_file


def write_summary(summary_path, start_time, step_times, status):
    total_duration = time.time() - start_time
    with open(summary_path, 'w', encoding='utf-8') as f:
        f.write("="*100 + "\n")
        f.write("IWC WORK ORDER PIPELINE EXECUTION SUMMARY\n")
        f.write("="*100 + "\n\n")
        f.write(f"Started:  {datetime.fromtimestamp(start_time).strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"Finished: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"Total Duration: {total_duration:.1f} seconds ({total_duration/60:.1f} minutes)\n\n")

        f.write("STEP EXECUTION TIMES:\n")
        f.write("-"*100 + "\n")
        f.write(f"{'Step':<6} {'Name':<35} {'Duration (s)':<15} {'Status':<10}\n")
        f.write("-"*100 + "\n")
        for step_time in step_times:
            f.write(f"{step_time['step']:<6} {step_time['name']:<35} "
                    f"{step_time['duration']:>13.1f}s  {step_time['status']:<10}\n")
        f.write("-"*100 + "\n")
        f.write(f"{'TOTAL':<42} {total_duration:>13.1f}s  {status:<10}\n")
        f.write("-"*100 + "\n")
    return total_duration


def run_pipeline():
    """Run the complete pipeline with logging."""

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_dir = Path(f'logs/run_{timestamp}')
    log_dir.mkdir(parents=True, exist_ok=True)

    master_log_path = log_dir / 'pipeline_master.log'
    summary_path = log_dir / 'pipeline_summary.txt'

    print("="*100)
    print("                    IWC WORK ORDER PIPELINE EXECUTION")
    print("="*100)
    print(f"\n📂 Log directory: {log_dir}")
    print(f"⏰ Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print()

    with open(master_log_path, 'w', encoding='utf-8') as f:
        f.write("="*100 + "\n")
        f.write("IWC WORK ORDER PIPELINE EXECUTION LOG\n")
        f.write("="*100 + "\n")
        f.write(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write("\n")

    start_time = time.time()
    step_times = []

    for step_info in PIPELINE_STEPS:
        step_num = step_info['step']

        print(f"[STEP {step_num}/{len(PIPELINE_STEPS)}] {step_info['name']}")
        print(f"  → {step_info['description']}")
        print(f"  → Running {step_info['script']}...")

        returncode, step_duration, log_file = run_step(step_info, log_dir, master_log_path)
        step_times.append({
            'step': step_num,
            'name': step_info['name'],
            'duration': step_duration,
            'status': 'SUCCESS' if returncode == 0 else 'FAILED'
        })

        if returncode != 0:
            print(f"  ✗ FAILED (exit code: {returncode})")
            print(f"  → Check log file: {log_file}")
            print(f"\n❌ Pipeline failed at step {step_num}")
            write_summary(summary_path, start_time, step_times, 'FAILED')
            return False

        print(f"  ✓ Completed ({step_duration:.1f}s)")

        try:
            print(f"  → Validating outputs...")
            validate_step_output(step_num, check_files=True, verbose=False)
            print(f"  ✓ Validation passed")
        except ValidationError as e:
            print(f"  ✗ VALIDATION FAILED: {e}")
            print(f"\n❌ Pipeline stopped - data validation failed at step {step_num}")
            step_times[-1]['status'] = 'INVALID'
            write_summary(summary_path, start_time, step_times, 'FAILED')
            return False

        print()

    total_duration = write_summary(summary_path, start_time, step_times, 'SUCCESS')

    print("="*100)
    print("                    PIPELINE COMPLETED SUCCESSFULLY")
    print("="*100)
    print()
    print(f"⏰ Total Duration: {total_duration:.1f} seconds ({total_duration/60:.1f} minutes)")
    print()
    print("📂 LOG FILES:")
    print(f"   • Individual logs: {log_dir}/*.log")
    print(f"   • Master log: {master_log_path}")
    print(f"   • Summary: {summary_path}")
    print()
    print("📊 KEY OUTPUT FILES:")
    print("   • data/cleaned_IWC_Work_Orders.csv")
    print("   • results/*.csv")
    print("   • models/breakdown_forest.pkl")
    print("   • outputs/*/*.png")
    print()

    return True


if __name__ == '__main__':
    try:
        success = run_pipeline()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\n⚠️  Pipeline interrupted by user")
        sys.exit(1)
