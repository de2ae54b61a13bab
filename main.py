"""
main.py — Sort Replay Visualizer Flask App
============================================
The web server that hosts the replay core.

Routes:
  GET  /               – main UI
  GET  /api/state      – current snapshot (for polling)
  POST /api/tick       – feed an elapsed-time delta {dt}
  POST /api/step       – apply one action now
  POST /api/play       – toggle play/pause
  POST /api/mode       – switch algorithm {mode}
  POST /api/reset      – draw fresh values
  POST /api/tasks      – set the simulated task count {count}
  POST /api/speed      – pick a speed preset {speed}
  GET  /api/compare    – replay two modes on the current values {left, right}

State management:
  One ModeController per app, kept in app.config["CONTROLLER"].  The
  browser drives time: it posts the real frame delta to /api/tick and
  the engine decides whether an action is due.

Configuration (defaults below, override with SORTVIZ_* env vars):
  ARRAY_SIZE, TASK_COUNT, MODE, SEED
"""

import logging
import math

from flask import Flask, current_app, jsonify, render_template_string, request

from algorithms import list_algorithms
from engine import (
    ConfigurationError,
    DEFAULT_ARRAY_SIZE,
    InvariantViolation,
    MAX_TASKS,
    ModeController,
    Recorder,
    compare,
)
from ui import (
    algorithm_selector,
    comparison_panel,
    counters_panel,
    pseudocode_viewer,
    playback_controls,
    render_canvas,
    temp_panel,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config=None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(
        ARRAY_SIZE=DEFAULT_ARRAY_SIZE,
        TASK_COUNT=MAX_TASKS,
        MODE="merge",
        SEED=None,
    )
    app.config.from_prefixed_env("SORTVIZ")
    if config:
        app.config.update(config)

    app.config["CONTROLLER"] = ModeController(
        size=int(app.config["ARRAY_SIZE"]),
        mode=app.config["MODE"],
        task_count=int(app.config["TASK_COUNT"]),
        seed=app.config["SEED"],
    )

    _register_routes(app)
    return app


def get_controller() -> ModeController:
    return current_app.config["CONTROLLER"]


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------
def state_payload(ctl: ModeController) -> dict:
    with ctl.lock:
        snap = ctl.snapshot()
        info = ctl.info
        speed = ctl.speed
    payload = snap.to_dict()
    payload["svg"] = render_canvas(snap)
    payload["counters_html"] = counters_panel(snap.counters, info.label)
    payload["temp_html"] = temp_panel([list(r) for r in snap.temp_regions])
    payload["pseudocode"] = pseudocode_viewer(
        info.pseudocode, current_line=info.line_for(snap.last_kind),
    )
    payload["speed"] = speed
    return payload


def selector_html(ctl: ModeController) -> str:
    return algorithm_selector(
        algorithms=list_algorithms(),
        selected_key=ctl.mode,
        task_count=ctl.task_count,
        show_tasks=ctl.info.is_parallel,
    )


def parse_dt(raw) -> float:
    try:
        dt = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError("dt must be a number")
    if not math.isfinite(dt):
        raise ConfigurationError(f"dt must be finite, got {dt}")
    if dt < 0:
        raise ConfigurationError(f"dt must not be negative, got {dt}")
    return dt


def default_opponent(left: str, current: str) -> str:
    """The active mode, or the first registered one that differs from `left`."""
    if current != left:
        return current
    return next(info.key for info in list_algorithms() if info.key != left)


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


# ---------------------------------------------------------------------------
# Routes
#
# The dev server is threaded, so every route that mutates the controller
# holds `ctl.lock` until its response payload is built.
# ---------------------------------------------------------------------------
def _register_routes(app: Flask) -> None:

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(err):
        return jsonify({"error": str(err)}), 400

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(err):
        logger.error("replay aborted: %s", err)
        return jsonify({"error": "internal replay error", "detail": str(err)}), 500

    @app.route("/")
    def index():
        ctl = get_controller()
        with ctl.lock:
            snap = ctl.snapshot()
            playback = playback_controls(
                is_paused=snap.paused,
                cursor=snap.cursor,
                total=snap.total,
                speed=ctl.speed,
                is_finished=snap.finished,
            )
            selector = selector_html(ctl)
            label, pseudocode = ctl.info.label, ctl.info.pseudocode

        return render_template_string(
            INDEX_TEMPLATE,
            svg=render_canvas(snap),
            playback=playback,
            algo_selector=selector,
            counters=counters_panel(snap.counters, label),
            temp=temp_panel([list(r) for r in snap.temp_regions]),
            pseudocode=pseudocode_viewer(pseudocode),
            comparison=comparison_panel(),
        )

    @app.route("/api/state", methods=["GET"])
    def api_state():
        return jsonify(state_payload(get_controller()))

    @app.route("/api/tick", methods=["POST"])
    def api_tick():
        dt  = parse_dt(_json_body().get("dt", 0.0))
        ctl = get_controller()
        with ctl.lock:
            applied = ctl.tick(dt)
            payload = state_payload(ctl)
        payload["applied"] = applied
        return jsonify(payload)

    @app.route("/api/step", methods=["POST"])
    def api_step():
        ctl = get_controller()
        with ctl.lock:
            applied = ctl.step()
            payload = state_payload(ctl)
        payload["applied"] = applied
        return jsonify(payload)

    @app.route("/api/play", methods=["POST"])
    def api_play():
        paused = get_controller().toggle_play()
        return jsonify({"paused": paused})

    @app.route("/api/mode", methods=["POST"])
    def api_mode():
        mode = _json_body().get("mode")
        if not mode:
            raise ConfigurationError("mode is required")
        ctl = get_controller()
        with ctl.lock:
            changed = ctl.set_mode(mode)
            payload = state_payload(ctl)
            payload["algo_selector"] = selector_html(ctl)
        payload["changed"] = changed
        return jsonify(payload)

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        ctl = get_controller()
        with ctl.lock:
            ctl.reset()
            payload = state_payload(ctl)
        return jsonify(payload)

    @app.route("/api/tasks", methods=["POST"])
    def api_tasks():
        try:
            count = int(_json_body().get("count", 0))
        except (TypeError, ValueError):
            raise ConfigurationError("count must be an integer")
        ctl = get_controller()
        with ctl.lock:
            changed = ctl.set_task_count(count)
            payload = state_payload(ctl)
        payload["changed"] = changed
        return jsonify(payload)

    @app.route("/api/speed", methods=["POST"])
    def api_speed():
        ctl = get_controller()
        with ctl.lock:
            ctl.set_speed(_json_body().get("speed", "medium"))
            speed, interval = ctl.speed, ctl.step_interval
        return jsonify({"speed": speed, "step_interval": interval})

    @app.route("/api/compare", methods=["GET"])
    def api_compare():
        ctl  = get_controller()
        left = request.args.get("left", "bubble")
        with ctl.lock:
            values = ctl.values_copy()
            tasks  = ctl.task_count
            right  = request.args.get("right") or default_opponent(left, ctl.mode)

        # headless runs on private engines, no lock needed
        recorders = []
        for mode in (left, right):
            rec = Recorder()
            rec.start(mode, values, task_count=tasks)
            rec.run_to_completion()
            recorders.append(rec)

        result = compare(*recorders)
        return jsonify({
            "left":       result.left.__dict__,
            "right":      result.right.__dict__,
            "winner_comparisons": result.winner_comparisons,
            "winner_operations":  result.winner_operations,
            "winner_memory":      result.winner_memory,
            "html":       comparison_panel(result),
        })


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sort Replay Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
    }

    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 340px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    #main { flex: 1; display: flex; flex-direction: column; padding: 16px; gap: 16px; }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 8px;
      padding: 12px;
      margin-bottom: 12px;
    }
    .panel h3 { font-size: 14px; margin-bottom: 8px; }
    .panel table { width: 100%; font-size: 13px; color: var(--text-secondary); }
    .button-row { display: flex; gap: 8px; margin-bottom: 8px; }
    button, select {
      background: var(--bg-dark);
      color: var(--text-primary);
      border: 1px solid var(--border);
      border-radius: 6px;
      padding: 6px 10px;
    }
    .finished-badge { color: #10b981; font-weight: 700; }
    .code-block { font-family: 'JetBrains Mono', monospace; font-size: 12px; }
    .code-line { padding: 1px 6px; color: var(--text-secondary); white-space: pre; }
    .code-line.active { background: rgba(14, 165, 233, 0.2); color: var(--text-primary); }
    .code-line .gutter { color: var(--text-secondary); opacity: .5; margin-right: 10px; }
    .placeholder { color: var(--text-secondary); font-size: 13px; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="algo-panel">{{ algo_selector|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="counters">{{ counters|safe }}</div>
    <div id="temp">{{ temp|safe }}</div>
    <div id="comparison">{{ comparison|safe }}</div>
  </div>

  <div id="main">
    <div id="canvas-svg">{{ svg|safe }}</div>
    <div class="panel"><div id="pseudocode">{{ pseudocode|safe }}</div></div>
  </div>

  <script>
    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data),
      });
      return await res.json();
    }

    function render(data) {
      if (data.svg) document.getElementById('canvas-svg').innerHTML = data.svg;
      if (data.counters_html) document.getElementById('counters').innerHTML = data.counters_html;
      if (data.temp_html) document.getElementById('temp').innerHTML = data.temp_html;
      if (data.pseudocode) document.getElementById('pseudocode').innerHTML = data.pseudocode;
      if (data.algo_selector) {
        document.getElementById('algo-panel').innerHTML = data.algo_selector;
        bindSelectors();
      }
      const cursor = document.getElementById('cursor');
      const total = document.getElementById('total');
      if (cursor) cursor.textContent = data.cursor;
      if (total) total.textContent = data.total;
    }

    // The browser supplies real elapsed time; the engine gates actions.
    let last = performance.now();
    let busy = false;
    async function loop(now) {
      const dt = (now - last) / 1000;
      last = now;
      if (!busy) {
        busy = true;
        try {
          const data = await post('/api/tick', {dt: dt});
          if (data.applied) render(data);
        } finally {
          busy = false;
        }
      }
      requestAnimationFrame(loop);
    }
    requestAnimationFrame(loop);

    function bindSelectors() {
      document.getElementById('algo-selector')?.addEventListener('change', async (e) => {
        render(await post('/api/mode', {mode: e.target.value}));
      });
      document.getElementById('task-selector')?.addEventListener('change', async (e) => {
        render(await post('/api/tasks', {count: +e.target.value}));
      });
    }
    bindSelectors();

    document.getElementById('btn-play')?.addEventListener('click', async () => {
      await post('/api/play', {});
    });
    document.getElementById('btn-step')?.addEventListener('click', async () => {
      render(await post('/api/step', {}));
    });
    document.getElementById('btn-reset')?.addEventListener('click', async () => {
      render(await post('/api/reset', {}));
    });
    document.getElementById('speed-selector')?.addEventListener('change', async (e) => {
      await post('/api/speed', {speed: e.target.value});
    });
    document.getElementById('btn-compare')?.addEventListener('click', async () => {
      const res = await fetch('/api/compare?left=bubble&right=merge');
      const data = await res.json();
      if (data.html) document.getElementById('comparison').innerHTML = data.html;
    });
  </script>
</body>
</html>
"""


app = create_app()


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("=" * 60)
    print("  Sort Replay Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)
