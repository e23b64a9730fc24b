"""
Vocabulary-wide trend scan: which description words are rising or falling across batches.

Runs the same per-batch ratio and correlation math as a single search, for every word
used by at least `min_companies` companies.
"""
import numpy as np
import pandas as pd
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from app_logging import get_logger
from correlation import BatchPoint, correlate_series
from tokenizer import tokenize

log = get_logger()

COLUMNS = ["word", "total", "slope", "correlation", "p_value", "is_significant", "direction"]


def ratio_matrix(batches, min_companies=10):
    """Return (terms, totals, ratios[batch, term]); totals counts companies using each term."""
    descriptions = [c.description for b in batches for c in b.companies]
    if not descriptions:
        return [], np.zeros(0), np.zeros((len(batches), 0))

    vectorizer = CountVectorizer(tokenizer=tokenize, lowercase=False, token_pattern=None,
                                 binary=True, min_df=min_companies)
    try:
        X = vectorizer.fit_transform(descriptions)
    except ValueError as e:
        # empty vocabulary, or min_df higher than the number of descriptions
        log.info("No terms to scan: %s", e)
        return [], np.zeros(0), np.zeros((len(batches), 0))

    # batch x company indicator, so one sparse product gives match counts per batch
    rows, cols = [], []
    start = 0
    for i, b in enumerate(batches):
        n = len(b.companies)
        rows.extend([i] * n)
        cols.extend(range(start, start + n))
        start += n
    membership = sparse.csr_matrix(
        (np.ones(len(rows)), (rows, cols)), shape=(len(batches), len(descriptions))
    )

    counts = np.asarray((membership @ X).todense(), dtype=float)
    sizes = np.asarray(membership.sum(axis=1), dtype=float)
    ratios = np.divide(counts, sizes, out=np.zeros_like(counts), where=sizes > 0)
    totals = np.asarray(X.sum(axis=0)).ravel()
    return list(vectorizer.get_feature_names_out()), totals, ratios


def trend_direction(result):
    if not result.is_significant:
        return "stable"
    return "rising" if result.slope > 0 else "falling"


def rising_words(batches, top_n=20, min_companies=10):
    terms, totals, ratios = ratio_matrix(batches, min_companies)

    rows = []
    for j, term in enumerate(terms):
        points = [BatchPoint(b.decimal_year, float(ratios[i, j]), b.label) for i, b in enumerate(batches)]
        result = correlate_series(term, points)
        rows.append({
            "word": term,
            "total": int(totals[j]),
            "slope": result.slope,
            "correlation": result.correlation,
            "p_value": result.p_value,
            "is_significant": result.is_significant,
            "direction": trend_direction(result),
        })

    df = pd.DataFrame(rows, columns=COLUMNS)
    if df.empty:
        return df
    df["abs_slope"] = df["slope"].abs()
    df = df.sort_values(["abs_slope", "word"], ascending=[False, True], kind="stable")
    return df.drop(columns="abs_slope").head(top_n).reset_index(drop=True)
