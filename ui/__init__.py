"""
ui/
---
Presentation layer.

    from ui import render_canvas
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import render_canvas, CanvasConfig, task_color

from ui.controls import (
    playback_controls,
    algorithm_selector,
    counters_panel,
    temp_panel,
    comparison_panel,
    pseudocode_viewer,
)

__all__ = [
    "render_canvas",
    "CanvasConfig",
    "task_color",
    "playback_controls",
    "algorithm_selector",
    "counters_panel",
    "temp_panel",
    "comparison_panel",
    "pseudocode_viewer",
]
