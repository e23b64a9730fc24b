"""
Fetch the full YC company list from the yc-oss mirror and cache the fields the word search needs.
"""
import json
import ssl
import urllib.error
import urllib.request

import certifi

import config
from app_logging import get_logger

ssl_context = ssl.create_default_context(cafile=certifi.where())
log = get_logger()


class DataFetchError(RuntimeError):
    """The upstream company dataset could not be fetched or decoded."""


def fetch_raw_companies(url=config.DATA_URL, timeout=config.FETCH_TIMEOUT):
    req = urllib.request.Request(url, headers={
        "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)",
        "Accept": "application/json",
    })
    try:
        with urllib.request.urlopen(req, context=ssl_context, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            if status != 200:
                raise DataFetchError(f"Failed to fetch YC companies: {status}")
            data = json.loads(resp.read().decode("utf-8"))
    except urllib.error.URLError as e:
        raise DataFetchError(f"Failed to fetch YC companies: {e}") from e
    except json.JSONDecodeError as e:
        raise DataFetchError(f"JSON parse error: {e}") from e

    if not isinstance(data, list):
        raise DataFetchError(f"Expected a list of companies, got {type(data).__name__}")
    log.info("Fetched %d companies from %s", len(data), url)
    return data


def slim_company(raw):
    """Keep only the fields the batch normalizer reads."""
    return {
        "name": raw.get("name", "") or "",
        "long_description": raw.get("long_description") or "",
        "batch": raw.get("batch", ""),
    }


def load_companies(cache_path=config.CACHE_FILE, refresh=False, url=config.DATA_URL):
    """Return slimmed company records, reading the JSON cache when present."""
    if cache_path.exists() and not refresh:
        with open(cache_path) as f:
            companies = json.load(f)
        log.debug("Loaded %d companies from cache %s", len(companies), cache_path)
        return companies

    companies = [slim_company(c) for c in fetch_raw_companies(url)]

    cache_path.parent.mkdir(parents=True, exist_ok=True)
    with open(cache_path, "w") as f:
        json.dump(companies, f, indent=2)
    log.info("Cached %d companies to %s", len(companies), cache_path)
    return companies


if __name__ == "__main__":
    companies = load_companies(refresh=True)

    print(f"\n{'='*50}")
    print(f"Total companies: {len(companies)}")

    from collections import Counter
    batch_counts = Counter(c["batch"] for c in companies)
    for b, n in batch_counts.most_common(10):
        print(f"  {b}: {n}")
