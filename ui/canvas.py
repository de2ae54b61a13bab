"""
canvas.py — SVG Bar Renderer
=============================
Pure rendering function: Snapshot → SVG string.

The renderer consumes:
  • snapshot – the read-only view produced by the replay engine
  • config   – visual config (canvas size, colors, fonts, …)

And produces an SVG string ready to inject into the DOM.

Design decisions:
  - NO mutation.  The caller passes in everything and gets back a string.
  - State-based coloring is a dict lookup: BarState → hex color.
    TASK_OWNED bars take their task's color from `task_colors`.
  - Bars lent to a temp region are drawn hollow.
  - Temp regions sit in a strip under the bars, one row per task.
  - In parallel mode a thin underline shows which task owns each
    segment at the current merge level.
"""

from typing import Dict, List, Optional

from algorithms.parallel_merge import segment_owners
from bars import BarState
from engine.replay import AnimationDescriptor, Snapshot


# ---------------------------------------------------------------------------
# Visual Config: color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 900
    height: int = 520
    bg:     str = "#0d1117"

    # bar colors (state → fill)
    bar_colors: Dict[str, str] = {
        "idle":       "#30363d",   # grey
        "comparing":  "#f59e0b",   # amber
        "swapping":   "#f43f5e",   # rose
        "sourcing":   "#06b6d4",   # teal
        "sorted":     "#10b981",   # emerald
    }

    # one color per simulated task (wraps past 8)
    task_colors: List[str] = [
        "#0ea5e9", "#a855f7", "#f97316", "#22c55e",
        "#ec4899", "#eab308", "#14b8a6", "#6366f1",
    ]

    # bars
    bar_area_top:    int = 20
    bar_area_height: int = 300
    bar_gap:         int = 4
    bar_label_color: str = "#e6edf3"
    bar_label_size:  int = 11

    # ownership underline
    underline_height: int = 4

    # temp regions
    temp_top:        int = 350
    temp_row_height: int = 18
    temp_cell_width: int = 30
    temp_bg:         str = "#161b22"
    temp_border:     str = "#30363d"
    temp_text:       str = "#7d8590"

    # animation ghost
    ghost_color:   str   = "#e6edf3"
    ghost_opacity: float = 0.35


CONFIG = CanvasConfig()


def task_color(task_id: Optional[int], config: CanvasConfig = CONFIG) -> str:
    if task_id is None:
        return config.bar_colors["idle"]
    return config.task_colors[task_id % len(config.task_colors)]


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(snapshot: Snapshot, config: CanvasConfig = CONFIG, show_temp: bool = True) -> str:
    """
    Returns an SVG string.

    Args:
        snapshot  : Current engine snapshot.
        config    : Visual config.
        show_temp : If True, render the temp-region strip.
    """
    svg_parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
    ]

    n = len(snapshot.values)
    if n:
        slot = config.width / n
        for idx in range(n):
            svg_parts.append(_render_bar(snapshot, idx, slot, config))

        if snapshot.extra.get("parallel") and not snapshot.finished:
            svg_parts.append(_render_ownership(snapshot, slot, config))

        if snapshot.animation is not None:
            svg_parts.append(_render_ghost(snapshot.animation, slot, config))

    if show_temp:
        svg_parts.append(_render_temp_regions(snapshot, config))

    svg_parts.append("</svg>")
    return "\n".join(svg_parts)


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------
def _bar_height(value: int, max_value: int, config: CanvasConfig) -> float:
    return config.bar_area_height * value / max(1, max_value)


def _render_bar(snapshot: Snapshot, idx: int, slot: float, config: CanvasConfig) -> str:
    value = snapshot.values[idx]
    state = snapshot.states[idx]
    if state == BarState.TASK_OWNED:
        fill = task_color(snapshot.task_ids[idx], config)
    else:
        fill = config.bar_colors.get(state.value, config.bar_colors["idle"])

    h = _bar_height(value, snapshot.max_value, config)
    x = idx * slot + config.bar_gap / 2
    y = config.bar_area_top + config.bar_area_height - h
    w = max(1.0, slot - config.bar_gap)

    if snapshot.vacated[idx]:
        body = (
            f'  <rect x="{x:.1f}" y="{y:.1f}" width="{w:.1f}" height="{h:.1f}" '
            f'fill="none" stroke="{fill}" stroke-width="1.5" stroke-dasharray="4 3"/>'
        )
    else:
        body = f'  <rect x="{x:.1f}" y="{y:.1f}" width="{w:.1f}" height="{h:.1f}" fill="{fill}" rx="2"/>'

    return "\n".join([
        f'<g class="bar" data-index="{idx}" data-state="{state.value}">',
        body,
        f'  <text x="{x + w / 2:.1f}" y="{y - 4:.1f}" text-anchor="middle" '
        f'font-size="{config.bar_label_size}" font-family="\'JetBrains Mono\', monospace" '
        f'fill="{config.bar_label_color}">{value}</text>',
        '</g>',
    ])


def _render_ownership(snapshot: Snapshot, slot: float, config: CanvasConfig) -> str:
    owners = segment_owners(
        len(snapshot.values),
        snapshot.extra.get("task_count", 1),
        snapshot.counters.current_merge_level,
    )
    y = config.bar_area_top + config.bar_area_height + 4
    parts = ['<g class="ownership">']
    for idx, task in enumerate(owners):
        parts.append(
            f'  <rect x="{idx * slot:.1f}" y="{y}" width="{slot:.1f}" '
            f'height="{config.underline_height}" fill="{task_color(task, config)}"/>'
        )
    parts.append('</g>')
    return "\n".join(parts)


def _render_ghost(anim: AnimationDescriptor, slot: float, config: CanvasConfig) -> str:
    """A faint bar at the moving value's destination."""
    h = config.bar_area_height * anim.source_height_normalized
    if anim.is_temp_push:
        x = config.bar_gap + anim.temp_target_index * config.temp_cell_width
        y = config.temp_top + anim.task_id * config.temp_row_height
        return (
            f'<rect class="ghost" x="{x}" y="{y}" width="{config.temp_cell_width - 2}" '
            f'height="{config.temp_row_height - 2}" fill="{config.ghost_color}" '
            f'opacity="{config.ghost_opacity}"/>'
        )
    x = anim.target_index * slot + config.bar_gap / 2
    y = config.bar_area_top + config.bar_area_height - h
    return (
        f'<rect class="ghost" x="{x:.1f}" y="{y:.1f}" width="{max(1.0, slot - config.bar_gap):.1f}" '
        f'height="{h:.1f}" fill="{config.ghost_color}" opacity="{config.ghost_opacity}"/>'
    )


# ---------------------------------------------------------------------------
# Temp regions
# ---------------------------------------------------------------------------
def _render_temp_regions(snapshot: Snapshot, config: CanvasConfig) -> str:
    parts = ['<g class="temp-regions">']
    for row, values in enumerate(snapshot.temp_regions):
        y = config.temp_top + row * config.temp_row_height
        parts.append(
            f'  <rect x="0" y="{y}" width="{config.width}" height="{config.temp_row_height - 2}" '
            f'fill="{config.temp_bg}" stroke="{config.temp_border}" stroke-width="1"/>'
        )
        color = task_color(row, config) if len(snapshot.temp_regions) > 1 else config.bar_colors["sourcing"]
        for k, value in enumerate(values):
            x = config.bar_gap + k * config.temp_cell_width
            parts.append(
                f'  <text x="{x + config.temp_cell_width / 2:.1f}" y="{y + 12}" text-anchor="middle" '
                f'font-size="10" font-family="\'JetBrains Mono\', monospace" fill="{color}">{value}</text>'
            )
    parts.append('</g>')
    return "\n".join(parts)
