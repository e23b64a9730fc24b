"""
Shared constants for the YC word correlation tools: data source, cache paths, chart geometry.
"""
import os
from pathlib import Path

DATA_URL = os.environ.get("YC_WORDS_DATA_URL", "https://yc-oss.github.io/api/companies/all.json")
FETCH_TIMEOUT = 30

DATA_DIR = Path(os.environ.get("YC_WORDS_DATA_DIR", "data"))
CACHE_FILE = DATA_DIR / "yc_companies.json"
OUTPUT_FILE = DATA_DIR / "word_chart.html"

SEASON_OFFSETS = {
    "winter": 0.0,
    "spring": 0.25,
    "summer": 0.5,
    "fall": 0.75,
}

# ─── CHART ───
CHART_WIDTH = 800
CHART_HEIGHT = 400
CHART_MARGIN = {"top": 20, "right": 30, "bottom": 60, "left": 90}
LABEL_VALUE_OFFSET = 18

YC_ORANGE = "#f26522"
