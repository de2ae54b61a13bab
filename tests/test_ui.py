from ui import render_canvas, task_color, temp_panel, pseudocode_viewer
from ui.canvas import CONFIG

from conftest import build_engine


def test_canvas_draws_one_group_per_bar():
    engine = build_engine("bubble", [3, 1, 2])
    svg = render_canvas(engine.snapshot())
    assert svg.count('class="bar"') == 3
    assert svg.endswith("</svg>")


def test_canvas_marks_compare_state():
    engine = build_engine("bubble", [3, 1, 2])
    engine.step()
    svg = render_canvas(engine.snapshot())
    assert svg.count('data-state="comparing"') == 2


def test_task_color_cycles():
    assert task_color(None) == CONFIG.bar_colors["idle"]
    assert task_color(0) == task_color(len(CONFIG.task_colors))


def test_temp_panel_and_pseudocode():
    assert "7" in temp_panel([[7, 9]])
    html = pseudocode_viewer(["a", "b"], current_line=1)
    assert "b" in html
