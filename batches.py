"""
Batch normalization: turn a flat list of YC companies into time-ordered batches.

Each batch label like "Summer 2014" gets a decimal year (2014.5) so batches can be
plotted on a continuous axis. Records whose batch does not look like "<Season> <Year>"
are dropped from the analysis set.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

import pandas as pd

import config
from app_logging import get_logger

log = get_logger()

BATCH_PATTERN = re.compile(r"(winter|spring|summer|fall) \d{4}", re.IGNORECASE | re.ASCII)


@dataclass(frozen=True)
class Company:
    name: str
    description: str
    batch_label: str


@dataclass(frozen=True)
class Batch:
    label: str
    decimal_year: float
    companies: Tuple[Company, ...]


def parse_batch(label: str) -> float:
    """Map "Season YYYY" to year + season offset. Never raises; bad input yields 0 or offset 0."""
    parts = label.strip().split(" ")
    if len(parts) != 2:
        log.warning("Unexpected batch format: %s", label)
        return 0.0

    season, year_text = parts[0].lower(), parts[1]
    try:
        year = int(year_text)
    except ValueError:
        log.warning("Could not parse year from batch: %s", label)
        return 0.0

    offset = config.SEASON_OFFSETS.get(season)
    if offset is None:
        log.warning("Unknown season in batch: %s", label)
        offset = 0.0
    return year + offset


def is_valid_batch(label) -> bool:
    return isinstance(label, str) and BATCH_PATTERN.fullmatch(label) is not None


def to_companies(records) -> List[Company]:
    companies = []
    for r in records:
        batch = r.get("batch")
        if not is_valid_batch(batch):
            continue
        companies.append(Company(
            name=r.get("name", "") or "",
            description=r.get("long_description") or "",
            batch_label=batch,
        ))
    return companies


def group_batches(records) -> List[Batch]:
    """Group valid records by exact batch label and sort the groups by decimal year."""
    companies = to_companies(records)
    if not companies:
        return []

    df = pd.DataFrame({
        "label": [c.batch_label for c in companies],
        "idx": range(len(companies)),
    })
    groups = df.groupby("label", sort=False)["idx"].agg(list).reset_index()
    groups["decimal_year"] = groups["label"].map(parse_batch)
    # stable sort: equal decimal years keep first-seen order
    groups = groups.sort_values("decimal_year", kind="stable")

    return [
        Batch(
            label=row.label,
            decimal_year=float(row.decimal_year),
            companies=tuple(companies[i] for i in row.idx),
        )
        for row in groups.itertuples(index=False)
    ]


def batch_summary(batches) -> pd.DataFrame:
    return pd.DataFrame({
        "batch": [b.label for b in batches],
        "decimal_year": [b.decimal_year for b in batches],
        "companies": [len(b.companies) for b in batches],
    })
