"""
Revenue Export Verification Script

Checks the daily revenue workbook written by the export task.
Run from project root: python scripts/verify.py [path/to/daily_revenue.xlsx]
"""

import os
import sys
from datetime import datetime

import pandas as pd

EXCEL_FILE = os.path.join("data", "daily_revenue.xlsx")

REQUIRED_COLUMNS = [
    "date",
    "order_count",
    "total_revenue",
    "platform_revenue",
    "restaurant_revenue",
]

TOLERANCE = 0.01


def verify_excel(path: str = EXCEL_FILE) -> bool:
    """Verify the revenue workbook after an export."""

    print("=" * 60)
    print("REVENUE EXPORT VERIFICATION")
    print("=" * 60)
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"File: {path}")
    print("=" * 60)

    if not os.path.exists(path):
        print("\nExport file not found!")
        print("   Trigger it first: POST /api/admin/reports/export")
        return False

    df = pd.read_excel(path, engine="openpyxl")
    print(f"\nDays exported: {len(df)}")

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        print(f"\nMissing columns: {missing}")
        return False
    print("All required columns present")

    ok = True

    duplicates = df["date"].duplicated().sum()
    if duplicates > 0:
        print(f"\n{duplicates} duplicate days found!")
        ok = False

    dates = list(df["date"])
    if dates != sorted(dates, reverse=True):
        print("\nDays are not ordered newest first!")
        ok = False

    # platform + restaurant must add back up to the day's total
    drift = (df["platform_revenue"] + df["restaurant_revenue"] - df["total_revenue"]).abs()
    bad_rows = df[drift > TOLERANCE]
    if len(bad_rows) > 0:
        print(f"\nCommission split does not add up on {len(bad_rows)} days:")
        print(bad_rows[REQUIRED_COLUMNS].to_string(index=False))
        ok = False
    else:
        print("Commission split adds up on every day")

    print("\nREVENUE:")
    print(f"   Total: {df['total_revenue'].sum():.2f}")
    print(f"   Platform: {df['platform_revenue'].sum():.2f}")
    print(f"   Restaurants: {df['restaurant_revenue'].sum():.2f}")
    print(f"   Orders: {int(df['order_count'].sum())}")

    print("\nLATEST DAYS:")
    print("-" * 60)
    print(df[REQUIRED_COLUMNS].head(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("VERIFICATION PASSED" if ok else "VERIFICATION FAILED")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else EXCEL_FILE
    sys.exit(0 if verify_excel(target) else 1)
