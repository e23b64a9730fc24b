"""
Word-frequency correlation engine.

For a search word, computes the share of companies in each batch whose description
contains it, then a least-squares slope and a Pearson correlation against decimal year
(both from scipy.stats.linregress).

The significance flag is a coarse two-bucket approximation, not a real t-distribution
p-value: |t| > 2.0 reports p = 0.01, anything else reports p = 0.5.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import stats

from tokenizer import normalize_term, tokenize

SIGNIFICANCE_T = 2.0
SIGNIFICANT_P = 0.01
NOT_SIGNIFICANT_P = 0.5
ALPHA = 0.05


@dataclass(frozen=True)
class BatchPoint:
    decimal_year: float
    ratio: float
    label: str


@dataclass(frozen=True)
class CorrelationResult:
    word: str
    points: Tuple[BatchPoint, ...]
    correlation: float
    p_value: float
    is_significant: bool
    slope: float
    max_ratio: float
    no_results: bool = False

    @property
    def ratios(self):
        return [p.ratio for p in self.points]

    @property
    def decimal_years(self):
        return [p.decimal_year for p in self.points]

    @property
    def batch_labels(self):
        return [p.label for p in self.points]

    def to_dict(self):
        return {
            "word": self.word,
            "ratios": self.ratios,
            "decimalYears": self.decimal_years,
            "correlation": self.correlation,
            "pValue": self.p_value,
            "isSignificant": self.is_significant,
            "slope": self.slope,
            "maxRatio": self.max_ratio,
            "batchLabels": self.batch_labels,
            "noResults": self.no_results,
        }


def batch_ratio(batch, term):
    """Share of the batch whose description contains `term` as a whole word, any case."""
    term = normalize_term(term)
    total = len(batch.companies)
    if total == 0 or not term:
        return 0.0
    matches = sum(1 for c in batch.companies if term in tokenize(c.description))
    return matches / total


def _all_equal(values) -> bool:
    return bool(np.ptp(values) == 0)


def pearson_test(xs: Sequence[float], ys: Sequence[float]):
    """Return (r, p_value, is_significant); degenerate input gives (0, 1, False)."""
    n = len(xs)
    if n != len(ys) or n < 3:
        return 0.0, 1.0, False
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    # a zero sum of squares on either side has no correlation to test
    if _all_equal(x) or _all_equal(y):
        return 0.0, 1.0, False

    r = float(stats.linregress(x, y).rvalue)
    residual = 1 - r * r
    t = math.inf if residual <= 0 else abs(r) * math.sqrt((n - 2) / residual)
    p_value = SIGNIFICANT_P if t > SIGNIFICANCE_T else NOT_SIGNIFICANT_P
    return r, p_value, p_value < ALPHA


def regression_slope(xs: Sequence[float], ys: Sequence[float]) -> float:
    if len(xs) == 0 or len(xs) != len(ys):
        return 0.0
    x = np.asarray(xs, dtype=float)
    # identical years leave no run to fit (and linregress refuses them)
    if _all_equal(x):
        return 0.0
    return float(stats.linregress(x, np.asarray(ys, dtype=float)).slope)


def correlate_series(word, points) -> CorrelationResult:
    points = tuple(points)
    max_ratio = max((p.ratio for p in points), default=0.0)
    if max_ratio == 0:
        return CorrelationResult(
            word=word,
            points=points,
            correlation=0.0,
            p_value=1.0,
            is_significant=False,
            slope=0.0,
            max_ratio=0.0,
            no_results=True,
        )

    xs = [p.decimal_year for p in points]
    ys = [p.ratio for p in points]
    r, p_value, significant = pearson_test(xs, ys)
    return CorrelationResult(
        word=word,
        points=points,
        correlation=r,
        p_value=p_value,
        is_significant=significant,
        slope=regression_slope(xs, ys),
        max_ratio=max_ratio,
    )


def correlate_word(term, batches) -> Optional[CorrelationResult]:
    """Analyze one search word across time-ordered batches; an empty term means no query."""
    word = normalize_term(term)
    if not word:
        return None
    points = [BatchPoint(b.decimal_year, batch_ratio(b, word), b.label) for b in batches]
    return correlate_series(word, points)


def timed_correlate(term, batches):
    """Run correlate_word and return (result, elapsed milliseconds)."""
    start = time.perf_counter()
    result = correlate_word(term, batches)
    elapsed_ms = (time.perf_counter() - start) * 1000
    return result, elapsed_ms


def trend_endpoints(result):
    """Trend line through the mean point with the fitted slope, spanning the year extent."""
    if result is None or len(result.points) < 2:
        return None
    xs = result.decimal_years
    ys = result.ratios
    mean_x = sum(xs) / len(xs)
    mean_y = sum(ys) / len(ys)
    lo, hi = min(xs), max(xs)
    return (
        (lo, mean_y + result.slope * (lo - mean_x)),
        (hi, mean_y + result.slope * (hi - mean_x)),
    )
