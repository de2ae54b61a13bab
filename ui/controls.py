"""
controls.py — Side Panels
==========================
HTML fragments for everything around the bar canvas.  Each function
reads the values it is given and returns a string; the Flask routes
splice the fragments into the page or ship them back in JSON so the
browser can swap them in place.

Panels:
  • playback_controls   – play/pause/step/reset/speed
  • algorithm_selector  – mode dropdown + task-count picker
  • counters_panel      – comparisons, operations, memory, time, merge level
  • temp_panel          – pending values per temp region
  • comparison_panel    – side-by-side metrics of two runs
  • pseudocode_viewer   – listing with the line of the last action lit
"""

from typing import List, Optional

from algorithms import AlgoInfo
from engine import MAX_TASKS, ComparisonResult, Counters, SPEED_PRESETS


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_paused: bool = False,
    cursor: int = 0,
    total: int = 0,
    speed: str = "medium",
    is_finished: bool = False,
) -> str:
    play_icon  = "▶" if is_paused else "⏸"
    play_label = "Play" if is_paused else "Pause"

    options = []
    for preset in SPEED_PRESETS:
        sel = 'selected' if preset == speed else ''
        options.append(f'<option value="{preset}" {sel}>{preset.capitalize()}</option>')

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-play" title="{play_label}">{play_icon}</button>
        <button id="btn-step" title="Apply one action">⏭</button>
        <button id="btn-reset" title="Draw new values">🔀</button>
      </div>
      <div class="step-info">
        Action <span id="cursor">{cursor}</span> / <span id="total">{total}</span>
        {' <span class="finished-badge">SORTED</span>' if is_finished else ''}
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">
          {''.join(options)}
        </select>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(
    algorithms: List[AlgoInfo],
    selected_key: str = "merge",
    task_count: int = MAX_TASKS,
    show_tasks: bool = False,
) -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        options.append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )

    task_block = ""
    if show_tasks:
        task_options = []
        for count in range(1, MAX_TASKS + 1):
            sel = 'selected' if count == task_count else ''
            task_options.append(f'<option value="{count}" {sel}>{count}</option>')
        task_block = f"""
        <div class="task-picker">
          <label>Tasks:</label>
          <select id="task-selector">
            {''.join(task_options)}
          </select>
        </div>
        """

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector">
        {''.join(options)}
      </select>
      {task_block}
    </div>
    """


# ---------------------------------------------------------------------------
# Counters Panel
# ---------------------------------------------------------------------------
def counters_panel(counters: Optional[Counters] = None, label: str = "") -> str:
    if counters is None:
        return """
        <div class="panel counters-panel">
          <h3>📊 Counters</h3>
          <p class="placeholder">Nothing replayed yet.</p>
        </div>
        """

    return f"""
    <div class="panel counters-panel">
      <h3>📊 Counters — {label}</h3>
      <table>
        <tr><td>Comparisons:</td><td><strong>{counters.comparisons}</strong></td></tr>
        <tr><td>Operations:</td><td><strong>{counters.operations}</strong></td></tr>
        <tr><td>Memory:</td><td><strong>{counters.current_memory} B</strong></td></tr>
        <tr><td>Peak Memory:</td><td><strong>{counters.peak_memory} B</strong></td></tr>
        <tr><td>Elapsed:</td><td><strong>{counters.elapsed_time:.2f} s</strong></td></tr>
        <tr><td>Merge Level:</td><td><strong>{counters.current_merge_level}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Temp Regions Panel
# ---------------------------------------------------------------------------
def temp_panel(regions: List[List[int]]) -> str:
    rows = []
    for task_id, values in enumerate(regions):
        pending = ", ".join(str(v) for v in values) or "—"
        rows.append(f"<tr><td>Task {task_id}</td><td>{pending}</td></tr>")

    return f"""
    <div class="panel temp-panel">
      <h3>🧮 Temp Regions</h3>
      <table>
        {''.join(rows)}
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_panel(comp: Optional[ComparisonResult] = None) -> str:
    if not comp:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Comparison Mode</h3>
          <p class="placeholder">Replay two algorithms on the same values to compare.</p>
          <button id="btn-compare" class="btn-secondary">Compare</button>
        </div>
        """

    left  = comp.left
    right = comp.right

    def winner_badge(winner_label):
        if winner_label == "tie":
            return "🟰 Tie"
        return f"👑 {winner_label}"

    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ Comparison: {left.label} vs {right.label}</h3>
      <table class="comparison-table">
        <thead>
          <tr>
            <th>Metric</th>
            <th>{left.label}</th>
            <th>{right.label}</th>
            <th>Winner</th>
          </tr>
        </thead>
        <tbody>
          <tr>
            <td>Comparisons</td>
            <td>{left.comparisons}</td>
            <td>{right.comparisons}</td>
            <td>{winner_badge(comp.winner_comparisons)}</td>
          </tr>
          <tr>
            <td>Operations</td>
            <td>{left.operations}</td>
            <td>{right.operations}</td>
            <td>{winner_badge(comp.winner_operations)}</td>
          </tr>
          <tr>
            <td>Peak Memory</td>
            <td>{left.peak_memory} B</td>
            <td>{right.peak_memory} B</td>
            <td>{winner_badge(comp.winner_memory)}</td>
          </tr>
          <tr>
            <td>Actions</td>
            <td>{left.total_actions}</td>
            <td>{right.total_actions}</td>
            <td>—</td>
          </tr>
        </tbody>
      </table>
    </div>
    """

# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def pseudocode_viewer(lines: List[str], current_line: int = -1) -> str:
    """
    Numbered listing of `lines`.  `current_line` is the index the last
    applied action maps to, or -1 before the first action.
    """
    rows = []
    for number, text in enumerate(lines):
        lit = " active" if number == current_line else ""
        rows.append(
            f'<div class="code-line{lit}" data-line="{number}">'
            f'<span class="gutter">{number + 1:>2}</span>{_escape(text)}</div>'
        )

    return f"""
    <div class="code-block" data-current="{current_line}">
      {''.join(rows) or '<div class="code-line">no listing</div>'}
    </div>
    """
