"""
Export utilities for scraped records.
"""
from typing import Iterable, List

import pandas as pd

from .models import ListingRecord


COLUMNS = [
    "adId", "title", "priceRaw", "priceEUR", "year", "mileageKm", "fuel",
    "transmission", "body", "options", "date", "sellerName", "sellerCity",
    "url", "listUrlUsed", "scrapedAt", "sameAsLast",
]


def records_to_frame(records: Iterable[ListingRecord]) -> pd.DataFrame:
    """One row per record; options joined with '|'."""
    rows: List[dict] = []
    for r in records:
        row = r.to_dict()
        row["options"] = "|".join(r.options) if r.options else ""
        row["sameAsLast"] = r.same_as_last
        rows.append(row)
    return pd.DataFrame(rows, columns=COLUMNS)


def save_output_rows(records: List[ListingRecord], out_path: str, logger=None):
    """Save records to CSV, Excel or JSON depending on the extension."""
    df = records_to_frame(records)
    lower = out_path.lower()
    if lower.endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    elif lower.endswith(".json"):
        df.to_json(out_path, orient="records", force_ascii=False, indent=2)
    else:
        df.to_csv(out_path, index=False)

    if logger:
        logger.info(f">>> Saved {len(df)} rows to {out_path}")
    else:
        print(f">>> Saved {len(df)} rows to {out_path}")
    return df
