"""
Render a word correlation result as an SVG chart embedded in a standalone HTML page.

The statistic labels are placed by label_layout in plot-area coordinates. Hover state is
an explicit ChartView value: the tooltip is derived from `hovered_point_index` at render
time instead of being attached to the page and removed again.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from html import escape
from typing import Dict, List, Optional, Tuple

import config
from correlation import trend_endpoints
from label_layout import STAT_LABELS, LayoutConfig, layout_labels

Point = Tuple[float, float]


@dataclass(frozen=True)
class ChartGeometry:
    width: int = config.CHART_WIDTH
    height: int = config.CHART_HEIGHT
    margin: Dict[str, int] = field(default_factory=lambda: dict(config.CHART_MARGIN))

    @property
    def inner_width(self):
        return self.width - self.margin["left"] - self.margin["right"]

    @property
    def inner_height(self):
        return self.height - self.margin["top"] - self.margin["bottom"]


@dataclass(frozen=True)
class ChartView:
    result: object
    processing_time_ms: Optional[float] = None
    hovered_point_index: Optional[int] = None


def linear_scale(domain, output):
    """Map domain -> output linearly; a zero-width domain maps to the middle of the output."""
    d0, d1 = domain
    r0, r1 = output
    if d1 == d0:
        mid = (r0 + r1) / 2
        return lambda v: mid
    k = (r1 - r0) / (d1 - d0)
    return lambda v: r0 + (v - d0) * k


def scales(result, geometry):
    years = result.decimal_years
    x = linear_scale((min(years), max(years)) if years else (0, 0), (0, geometry.inner_width))
    y = linear_scale((0, result.max_ratio), (geometry.inner_height, 0))
    return x, y


def project_points(result, geometry) -> List[Point]:
    x, y = scales(result, geometry)
    return [(x(p.decimal_year), y(p.ratio)) for p in result.points]


def chart_polylines(result, geometry) -> List[List[Point]]:
    lines = [project_points(result, geometry)]
    ends = trend_endpoints(result)
    if ends is not None:
        x, y = scales(result, geometry)
        lines.append([(x(a), y(b)) for a, b in ends])
    return lines


def format_p_value(p):
    return "<0.001" if p < 0.001 else f"{p:.3f}"


def format_stats(result, processing_time_ms) -> List[Tuple[str, str]]:
    values = {
        "Correlation": f"{result.correlation:.3f}",
        "P-Value": format_p_value(result.p_value),
        "Max Frequency": f"{result.max_ratio * 100:.1f}%",
        "Processing Time": f"{processing_time_ms:.1f}ms" if processing_time_ms is not None else "N/A",
    }
    return [(label, values[label]) for label in STAT_LABELS]


def tooltip_for(view: ChartView):
    """Tooltip content for the hovered point, or None."""
    i = view.hovered_point_index
    if i is None or not 0 <= i < len(view.result.points):
        return None
    point = view.result.points[i]
    return {"index": i, "title": point.label, "text": f"Frequency: {point.ratio * 100:.1f}%"}


def year_ticks(years, max_ticks=12):
    if not years:
        return []
    lo, hi = math.ceil(min(years)), math.floor(max(years))
    if hi < lo:
        return []
    step = max(1, math.ceil((hi - lo + 1) / max_ticks))
    return list(range(lo, hi + 1, step))


def ratio_ticks(max_ratio, count=5):
    if max_ratio <= 0:
        return [0.0]
    return [max_ratio * i / count for i in range(count + 1)]


def _path(points):
    return " ".join(("M" if i == 0 else "L") + f"{x:.2f},{y:.2f}" for i, (x, y) in enumerate(points))


def render_svg(view: ChartView, geometry: Optional[ChartGeometry] = None,
               layout_config: Optional[LayoutConfig] = None) -> str:
    geometry = geometry or ChartGeometry()
    result = view.result
    w, h = geometry.inner_width, geometry.inner_height
    x, y = scales(result, geometry)
    polylines = chart_polylines(result, geometry)
    points = polylines[0]

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{geometry.width}" height="{geometry.height}" '
        f'font-family="sans-serif" font-size="12">',
        f'<g transform="translate({geometry.margin["left"]},{geometry.margin["top"]})">',
    ]

    # ── axes ──
    parts.append(f'<line x1="0" y1="{h}" x2="{w}" y2="{h}" stroke="white"/>')
    parts.append(f'<line x1="0" y1="0" x2="0" y2="{h}" stroke="white"/>')
    for year in year_ticks(result.decimal_years):
        tx = x(year)
        parts.append(f'<line x1="{tx:.2f}" y1="{h}" x2="{tx:.2f}" y2="{h + 6}" stroke="white"/>')
        parts.append(f'<text x="{tx:.2f}" y="{h + 20}" fill="white" text-anchor="middle">{year}</text>')
    for ratio in ratio_ticks(result.max_ratio):
        ty = y(ratio)
        parts.append(f'<line x1="-6" y1="{ty:.2f}" x2="0" y2="{ty:.2f}" stroke="white"/>')
        parts.append(f'<text x="-9" y="{ty + 4:.2f}" fill="white" text-anchor="end">{ratio * 100:.1f}%</text>')
    parts.append(
        f'<text transform="rotate(-90)" x="{-h / 2:.2f}" y="{-geometry.margin["left"] + 20}" fill="white" '
        f'text-anchor="middle">Ratio of YC companies described with "{escape(result.word)}" (%)</text>'
    )
    parts.append(
        f'<text x="{w / 2:.2f}" y="{h + geometry.margin["bottom"] - 10}" fill="white" text-anchor="middle">Year</text>'
    )

    # ── series ──
    parts.append(f'<path d="{_path(points)}" fill="none" stroke="white" stroke-width="2"/>')
    for point, (px, py) in zip(result.points, points):
        parts.append(
            f'<circle class="dot" cx="{px:.2f}" cy="{py:.2f}" r="4" fill="white">'
            f'<title>{escape(point.label)}: {point.ratio * 100:.1f}%</title></circle>'
        )
    if len(polylines) > 1:
        parts.append(
            f'<path d="{_path(polylines[1])}" fill="none" stroke="white" stroke-width="2" stroke-dasharray="5,5"/>'
        )

    # ── stat labels ──
    positions = layout_labels(w, h, polylines, layout_config)
    for label, value in format_stats(result, view.processing_time_ms):
        lx, ly = positions[label]
        parts.append(
            f'<text x="{lx:.2f}" y="{ly:.2f}" fill="white" text-anchor="middle" font-weight="bold">{label}</text>'
        )
        parts.append(
            f'<text x="{lx:.2f}" y="{ly + config.LABEL_VALUE_OFFSET:.2f}" fill="white" '
            f'text-anchor="middle">{escape(value)}</text>'
        )

    # ── tooltip ──
    tip = tooltip_for(view)
    if tip is not None:
        px, py = points[tip["index"]]
        parts.append(f'<g class="tooltip" transform="translate({px + 10:.2f},{py - 28:.2f})">')
        parts.append('<rect width="130" height="38" rx="4" fill="rgba(0,0,0,0.8)"/>')
        parts.append(f'<text x="8" y="15" fill="white">{escape(tip["title"])}</text>')
        parts.append(f'<text x="8" y="31" fill="white">{tip["text"]}</text>')
        parts.append('</g>')

    parts.append('</g></svg>')
    return "\n".join(parts)


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<style>
  * {{ margin: 0; padding: 0; box-sizing: border-box; }}
  body {{ font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif; background: {bg}; color: #fff; }}
  .container {{ max-width: 1000px; margin: 0 auto; padding: 32px 24px; display: flex; flex-direction: column; align-items: center; gap: 24px; }}
  h2 {{ font-size: 1.8rem; font-weight: 800; }}
  .card {{ border: 2px solid #fff; border-radius: 12px; padding: 24px; }}
  .card h3 {{ font-size: 1.2rem; font-weight: 600; margin-bottom: 16px; }}
  .muted {{ color: #ddd; font-size: 0.85rem; margin-top: 8px; }}
</style>
</head>
<body>
<div class="container">
  <h2>YC Word Correlation</h2>
  {body}
</div>
</body>
</html>
"""


def render_page(view: ChartView, geometry: Optional[ChartGeometry] = None,
                layout_config: Optional[LayoutConfig] = None) -> str:
    word = escape(view.result.word)
    body = f"""<div class="card">
    <h3>Analysis Results for &quot;{word}&quot;</h3>
    {render_svg(view, geometry, layout_config)}
  </div>"""
    return PAGE_TEMPLATE.format(title=f"YC Word Correlation: {word}", bg=config.YC_ORANGE, body=body)


def render_no_results_page(word, processing_time_ms=None) -> str:
    word = escape(word)
    timing = ""
    if processing_time_ms is not None:
        timing = f'<p class="muted">Processing time: {processing_time_ms:.1f}ms</p>'
    body = f"""<div class="card">
    <p>Word &quot;{word}&quot; not found in any company descriptions. Try a different word or check your spelling.</p>
    {timing}
  </div>"""
    return PAGE_TEMPLATE.format(title=f"YC Word Correlation: {word}", bg=config.YC_ORANGE, body=body)
