"""
Force-directed placement of the statistic labels drawn on top of the word chart.

Four labels start at the quadrant centres of the plot area and are relaxed for a fixed
number of ticks so they keep clear of each other, of the plotted line (data points plus
densely interpolated samples along each segment), and of the canvas edges.

Every force is a pure step `(nodes, obstacles, config, alpha) -> nodes`. One tick applies
FORCES in order, then integrates velocities into positions. Order matters: later forces
see velocities already changed by earlier ones. There is no randomness, so the same
canvas and line always produce the same layout.

A label whose escape ray from the centre lands in a corner the line also reaches tries
fixed rings of targets around itself instead. After the last tick labels are clamped
into the safe rectangle and any label still on the line or on another label is moved to
the nearest spot that is free of both.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

STAT_LABELS = ("Correlation", "P-Value", "Max Frequency", "Processing Time")


@dataclass(frozen=True)
class LayoutNode:
    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def pinned(self):
        return self.fx is not None


@dataclass(frozen=True)
class LayoutConfig:
    width: float
    height: float
    ticks: int = 500
    collision_radius: float = 70.0
    collide_iterations: int = 3
    collide_strength: float = 1.0
    center_strength: float = 0.05
    axis_strength: float = 0.02
    margin: float = 30.0
    margin_push: float = 0.1
    line_threshold: float = 30.0
    repulsion_radius: float = 60.0
    repulsion_strength: float = 1.5
    edge_margin: float = 60.0
    edge_strength: float = 1.0
    velocity_decay: float = 0.4
    alpha_decay: float = 1 - 0.001 ** (1 / 300)
    alpha_target: float = 0.0
    final_margin: float = 40.0
    samples_per_segment: int = 20
    escape_angles: int = 24
    escape_rings: int = 24

    @property
    def center(self):
        return self.width / 2, self.height / 2


def initial_nodes(width, height, ids: Sequence[str] = STAT_LABELS) -> Tuple[LayoutNode, ...]:
    """Quadrant centres: top-left, top-right, bottom-left, bottom-right."""
    starts = [
        (width * 0.2, height * 0.2),
        (width * 0.8, height * 0.2),
        (width * 0.2, height * 0.8),
        (width * 0.8, height * 0.8),
    ]
    return tuple(LayoutNode(id=i, x=x, y=y) for i, (x, y) in zip(ids, starts))


def build_obstacles(polylines: Iterable[Sequence[Tuple[float, float]]], samples_per_segment=20) -> np.ndarray:
    """Vertices of every polyline plus `samples_per_segment` interior samples per segment."""
    chunks = []
    t = np.arange(1, samples_per_segment + 1) / (samples_per_segment + 1)
    for line in polylines:
        pts = np.asarray(line, dtype=float).reshape(-1, 2)
        if len(pts) == 0:
            continue
        chunks.append(pts)
        for a, b in zip(pts[:-1], pts[1:]):
            chunks.append(a + np.outer(t, b - a))
    if not chunks:
        return np.empty((0, 2))
    return np.vstack(chunks)


def clearances(points, obstacles) -> np.ndarray:
    """Distance from each (x, y) in `points` to its nearest obstacle point."""
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(obstacles) == 0:
        return np.full(len(points), np.inf)
    dx = points[:, None, 0] - obstacles[None, :, 0]
    dy = points[:, None, 1] - obstacles[None, :, 1]
    return np.min(np.hypot(dx, dy), axis=1)


def escape_candidates(x, y, config, margin) -> np.ndarray:
    """Rings of targets around (x, y), nearest ring first, clamped into the `margin` box."""
    angles = 2 * np.pi * np.arange(config.escape_angles) / config.escape_angles
    steps = config.line_threshold / 2 * np.arange(1, config.escape_rings + 1)
    xs = np.clip(x + np.outer(steps, np.cos(angles)).ravel(), margin, config.width - margin)
    ys = np.clip(y + np.outer(steps, np.sin(angles)).ravel(), margin, config.height - margin)
    return np.column_stack([xs, ys])


def fit_scores(points, others, obstacles, config) -> np.ndarray:
    """Worst of line clearance and label spacing, each relative to its limit; >= 1 means it fits."""
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    score = clearances(points, obstacles) / config.line_threshold
    for ox, oy in others:
        score = np.minimum(score, np.hypot(points[:, 0] - ox, points[:, 1] - oy) / config.collision_radius)
    return score


def find_escape(x, y, others, obstacles, config, margin) -> Tuple[float, float]:
    """First candidate clear of the line and of the `others` labels, else the best one found."""
    candidates = escape_candidates(x, y, config, margin)
    score = fit_scores(candidates, others, obstacles, config)
    fits = np.flatnonzero(score >= 1.0)
    i = int(fits[0]) if len(fits) else int(np.argmax(score))
    return float(candidates[i, 0]), float(candidates[i, 1])


# ─── FORCES ───

def center_force(nodes, obstacles, config, alpha):
    cx, cy = config.center
    mean_x = sum(n.x for n in nodes) / len(nodes)
    mean_y = sum(n.y for n in nodes) / len(nodes)
    sx = (cx - mean_x) * config.center_strength
    sy = (cy - mean_y) * config.center_strength
    return tuple(replace(n, x=n.x + sx, y=n.y + sy) for n in nodes)


def collide_force(nodes, obstacles, config, alpha):
    """Keep label centres at least `collision_radius` apart, judged on predicted positions."""
    r = config.collision_radius
    vel = [[n.vx, n.vy] for n in nodes]
    for _ in range(config.collide_iterations):
        for i in range(len(nodes)):
            for j in range(i + 1, len(nodes)):
                dx = (nodes[j].x + vel[j][0]) - (nodes[i].x + vel[i][0])
                dy = (nodes[j].y + vel[j][1]) - (nodes[i].y + vel[i][1])
                d = math.hypot(dx, dy)
                if d >= r:
                    continue
                if d == 0:
                    # coincident: separate along a direction fixed by the pair's indices
                    angle = (i + 1) * (j + 1)
                    dx, dy, d = math.cos(angle) * 1e-6, math.sin(angle) * 1e-6, 1e-6
                l = (r - d) / d * config.collide_strength * 0.5
                vel[i][0] -= dx * l
                vel[i][1] -= dy * l
                vel[j][0] += dx * l
                vel[j][1] += dy * l
    return tuple(replace(n, vx=v[0], vy=v[1]) for n, v in zip(nodes, vel))


def axis_force(nodes, obstacles, config, alpha):
    cx, cy = config.center
    k = config.axis_strength * alpha
    return tuple(replace(n, vx=n.vx + (cx - n.x) * k, vy=n.vy + (cy - n.y) * k) for n in nodes)


def margin_force(nodes, obstacles, config, alpha):
    m = config.margin
    out = []
    for n in nodes:
        x, y, vx, vy = n.x, n.y, n.vx, n.vy
        if x < m:
            vx += (m - x) * config.margin_push
            x = m
        elif x > config.width - m:
            vx -= (x - (config.width - m)) * config.margin_push
            x = config.width - m
        if y < m:
            vy += (m - y) * config.margin_push
            y = m
        elif y > config.height - m:
            vy -= (y - (config.height - m)) * config.margin_push
            y = config.height - m
        out.append(replace(n, x=x, y=y, vx=vx, vy=vy))
    return tuple(out)


def line_avoid_force(nodes, obstacles, config, alpha):
    """Pin a label that sits on the line further out along the ray from the canvas centre."""
    if len(obstacles) == 0:
        return nodes
    cx, cy = config.center
    m = config.margin
    out = []
    for i, n in enumerate(nodes):
        nearest = float(clearances((n.x, n.y), obstacles)[0])
        if nearest >= config.line_threshold:
            out.append(replace(n, fx=None, fy=None))
            continue
        ux, uy = n.x - cx, n.y - cy
        length = math.hypot(ux, uy)
        if length == 0:
            ux, uy, length = 0.0, -1.0, 1.0
        step = config.line_threshold - nearest + config.line_threshold
        fx = min(max(n.x + ux / length * step, m), config.width - m)
        fy = min(max(n.y + uy / length * step, m), config.height - m)
        if clearances((fx, fy), obstacles)[0] < config.line_threshold:
            # the ray ran into a corner the line also reaches
            others = [(o.x, o.y) for j, o in enumerate(nodes) if j != i]
            fx, fy = find_escape(n.x, n.y, others, obstacles, config, m)
        out.append(replace(n, fx=fx, fy=fy))
    return tuple(out)


def point_repulsion_force(nodes, obstacles, config, alpha):
    """Sum a push away from every obstacle point inside `repulsion_radius`."""
    if len(obstacles) == 0:
        return nodes
    radius = config.repulsion_radius
    out = []
    for n in nodes:
        dx = n.x - obstacles[:, 0]
        dy = n.y - obstacles[:, 1]
        d = np.hypot(dx, dy)
        near = (d < radius) & (d > 0)
        if not near.any():
            out.append(n)
            continue
        weight = (radius - d[near]) / radius * config.repulsion_strength
        out.append(replace(
            n,
            vx=n.vx + float(np.sum(dx[near] / d[near] * weight)),
            vy=n.vy + float(np.sum(dy[near] / d[near] * weight)),
        ))
    return tuple(out)


def edge_repulsion_force(nodes, obstacles, config, alpha):
    e = config.edge_margin
    k = config.edge_strength
    out = []
    for n in nodes:
        vx, vy = n.vx, n.vy
        if n.x < e:
            vx += (e - n.x) / e * k
        if n.x > config.width - e:
            vx -= (n.x - (config.width - e)) / e * k
        if n.y < e:
            vy += (e - n.y) / e * k
        if n.y > config.height - e:
            vy -= (n.y - (config.height - e)) / e * k
        out.append(replace(n, vx=vx, vy=vy))
    return tuple(out)


FORCES = (
    center_force,
    collide_force,
    axis_force,
    margin_force,
    line_avoid_force,
    point_repulsion_force,
    edge_repulsion_force,
)


def integrate(nodes, config):
    out = []
    for n in nodes:
        if n.pinned:
            out.append(replace(n, x=n.fx, y=n.fy, vx=0.0, vy=0.0))
            continue
        vx = n.vx * (1 - config.velocity_decay)
        vy = n.vy * (1 - config.velocity_decay)
        out.append(replace(n, x=n.x + vx, y=n.y + vy, vx=vx, vy=vy))
    return tuple(out)


def simulate(nodes, obstacles, config: LayoutConfig, ticks: Optional[int] = None):
    """Run exactly `ticks` ticks (config.ticks by default); no convergence check."""
    nodes = tuple(nodes)
    if not nodes:
        return nodes
    obstacles = np.asarray(obstacles, dtype=float).reshape(-1, 2)
    alpha = 1.0
    for _ in range(config.ticks if ticks is None else ticks):
        alpha += (config.alpha_target - alpha) * config.alpha_decay
        for force in FORCES:
            nodes = force(nodes, obstacles, config, alpha)
        nodes = integrate(nodes, config)
    return nodes


def clamp_final(nodes, config):
    m = config.final_margin
    return tuple(
        replace(
            n,
            x=min(max(n.x, m), config.width - m),
            y=min(max(n.y, m), config.height - m),
        )
        for n in nodes
    )


def settle_labels(nodes, obstacles, config):
    """Move any label still on the line or on another label to the nearest free spot.

    One pass is enough: a moved label fits against the current position of every other
    label, so labels checked earlier stay valid.
    """
    obstacles = np.asarray(obstacles, dtype=float).reshape(-1, 2)
    nodes = list(nodes)
    for i, n in enumerate(nodes):
        others = [(o.x, o.y) for j, o in enumerate(nodes) if j != i]
        if fit_scores((n.x, n.y), others, obstacles, config)[0] >= 1.0:
            continue
        x, y = find_escape(n.x, n.y, others, obstacles, config, config.final_margin)
        nodes[i] = replace(n, x=x, y=y, vx=0.0, vy=0.0, fx=None, fy=None)
    return tuple(nodes)


def layout_labels(width, height, polylines, config: Optional[LayoutConfig] = None) -> Dict[str, Tuple[float, float]]:
    """Final (x, y) per statistic label, keyed in STAT_LABELS order."""
    config = config or LayoutConfig(width=width, height=height)
    obstacles = build_obstacles(polylines, config.samples_per_segment)
    nodes = simulate(initial_nodes(width, height), obstacles, config)
    nodes = settle_labels(clamp_final(nodes, config), obstacles, config)
    return {n.id: (n.x, n.y) for n in nodes}
