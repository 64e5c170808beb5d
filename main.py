"""
main.py — Algorithm Replay Visualizer Flask App
================================================
The web server that exposes one live visualizer Session per browser.

Routes:
  GET    /                    – main UI
  GET    /api/algorithms      – registry cards
  POST   /api/session         – activate a visualizer (destroys the previous one)
  DELETE /api/session         – destroy the current visualizer
  POST   /api/run             – validate input, record the trace, enter RUNNING
  POST   /api/step            – advance one event
  POST   /api/play            – start continuous play
  POST   /api/pause           – stop play, cancel everything in flight
  POST   /api/end             – apply every remaining event
  POST   /api/reset           – back to INPUT
  POST   /api/speed           – set the 1–10 speed dial
  POST   /api/camera/drag     – pan the tree camera (complete phase only)
  POST   /api/camera/zoom     – zoom the tree camera (complete phase only)
  POST   /api/resize          – report a new surface size
  GET    /api/state           – tick the clock, return the frame snapshot
  GET    /api/example         – example input for an algorithm
  GET    /api/random          – random input for an algorithm

State management:
  The Flask session only carries an opaque client id.  The Session objects
  (scheduler, interpreter, camera, …) live in an in-process SessionStore
  keyed by that id, so nothing about a run is serialised into the cookie.
"""

from flask import Flask, render_template_string, request, jsonify, session
import logging
import random
import secrets

from algorithms import get_algorithm, list_algorithms
from engine import CONFIG, SessionStore
from ui import InputError, example_payload, parse_inputs, random_payload


logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = secrets.token_hex(32)

SESSIONS = SessionStore()


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def client_id() -> str:
    """Opaque per-browser id, created on first use."""
    if "client_id" not in session:
        session["client_id"] = secrets.token_hex(16)
    return session["client_id"]


def current_session():
    return SESSIONS.get(client_id())


def no_session():
    return jsonify({"error": "No active visualizer; POST /api/session first"}), 404


def payload() -> dict:
    return request.get_json(silent=True) or {}


def surface_from(data, default=CONFIG.viewport):
    try:
        width = int(data.get("width", default[0]))
        height = int(data.get("height", default[1]))
    except (TypeError, ValueError):
        raise InputError("width and height must be integers") from None
    if width <= 0 or height <= 0:
        raise InputError("width and height must be positive")
    return width, height


def seed_from(data):
    """Optional integer seed for the pivot source; `type=int` semantics like /api/random."""
    seed = data.get("seed")
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, (int, str)):
        raise InputError("seed must be an integer")
    try:
        return int(seed)
    except ValueError:
        raise InputError("seed must be an integer") from None


def result(ok: bool, s):
    return jsonify({"ok": ok, "state": s.snapshot()})


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    return render_template_string(INDEX_TEMPLATE, algorithms=list_algorithms())


@app.route("/api/algorithms")
def api_algorithms():
    return jsonify([
        {
            "key":              a.key,
            "label":            a.label,
            "view":             a.view,
            "tags":             a.tags,
            "pseudocode":       a.pseudocode,
            "has_tree_camera":  a.has_tree_camera,
            "has_sweep_cursor": a.has_sweep_cursor,
            "complexity_time":  a.complexity_time,
            "complexity_space": a.complexity_space,
            "description":      a.description,
        }
        for a in list_algorithms()
    ])


# ---------------------------------------------------------------------------
# API: Session lifecycle
# ---------------------------------------------------------------------------
@app.route("/api/session", methods=["POST"])
def api_session_create():
    data = payload()
    algo_key = data.get("algo", "")
    if get_algorithm(algo_key) is None:
        return jsonify({"error": f"Unknown algorithm: {algo_key}"}), 404

    try:
        surface = surface_from(data)
        seed = seed_from(data)
    except InputError as e:
        logger.warning("rejected session options: %s", e)
        return jsonify({"error": str(e)}), 400

    rng = random.Random(seed) if seed is not None else None
    s = SESSIONS.activate(client_id(), algo_key, surface, rng=rng)
    return jsonify(s.snapshot())


@app.route("/api/session", methods=["DELETE"])
def api_session_destroy():
    return jsonify({"destroyed": SESSIONS.destroy(client_id())})


@app.route("/api/run", methods=["POST"])
def api_run():
    s = current_session()
    if s is None:
        return no_session()

    try:
        inputs = parse_inputs(s.info.key, payload())
    except InputError as e:
        logger.warning("rejected %s input: %s", s.info.key, e)
        return jsonify({"error": str(e)}), 400

    s.run(inputs)
    return jsonify(s.snapshot())


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@app.route("/api/step", methods=["POST"])
def api_step():
    s = current_session()
    return result(s.step(), s) if s else no_session()


@app.route("/api/play", methods=["POST"])
def api_play():
    s = current_session()
    return result(s.play(), s) if s else no_session()


@app.route("/api/pause", methods=["POST"])
def api_pause():
    s = current_session()
    return result(s.pause(), s) if s else no_session()


@app.route("/api/end", methods=["POST"])
def api_end():
    s = current_session()
    return result(s.jump_to_end(), s) if s else no_session()


@app.route("/api/reset", methods=["POST"])
def api_reset():
    s = current_session()
    return result(s.reset(), s) if s else no_session()


@app.route("/api/speed", methods=["POST"])
def api_speed():
    s = current_session()
    if s is None:
        return no_session()
    try:
        speed = int(payload().get("speed", CONFIG.speed_default))
    except (TypeError, ValueError):
        logger.warning("rejected speed: %r", payload().get("speed"))
        return jsonify({"error": "speed must be an integer"}), 400
    s.set_speed(speed)
    return jsonify(s.snapshot())


# ---------------------------------------------------------------------------
# API: Camera & surface
# ---------------------------------------------------------------------------
@app.route("/api/camera/drag", methods=["POST"])
def api_camera_drag():
    s = current_session()
    if s is None:
        return no_session()
    data = payload()
    try:
        dx, dy = float(data.get("dx", 0)), float(data.get("dy", 0))
    except (TypeError, ValueError):
        return jsonify({"error": "dx and dy must be numbers"}), 400
    return result(s.drag(dx, dy), s)


@app.route("/api/camera/zoom", methods=["POST"])
def api_camera_zoom():
    s = current_session()
    if s is None:
        return no_session()
    direction = payload().get("direction", "in")
    if direction not in ("in", "out"):
        return jsonify({"error": "direction must be 'in' or 'out'"}), 400
    return result(s.zoom(direction == "in"), s)


@app.route("/api/resize", methods=["POST"])
def api_resize():
    s = current_session()
    if s is None:
        return no_session()
    try:
        width, height = surface_from(payload(), default=s.surface)
    except InputError as e:
        logger.warning("rejected surface: %s", e)
        return jsonify({"error": str(e)}), 400
    s.resize(width, height)
    return jsonify(s.snapshot())


# ---------------------------------------------------------------------------
# API: Frame pull
# ---------------------------------------------------------------------------
@app.route("/api/state")
def api_state():
    s = current_session()
    if s is None:
        return no_session()
    s.tick()
    return jsonify(s.snapshot())


# ---------------------------------------------------------------------------
# API: Example & random inputs
# ---------------------------------------------------------------------------
def _viewport_args():
    return surface_from(request.args)


@app.route("/api/example")
def api_example():
    algo_key = request.args.get("algo", "")
    if get_algorithm(algo_key) is None:
        return jsonify({"error": f"Unknown algorithm: {algo_key}"}), 404
    try:
        return jsonify(example_payload(algo_key, _viewport_args()))
    except InputError as e:
        return jsonify({"error": str(e)}), 400


@app.route("/api/random")
def api_random():
    algo_key = request.args.get("algo", "")
    if get_algorithm(algo_key) is None:
        return jsonify({"error": f"Unknown algorithm: {algo_key}"}), 404
    seed = request.args.get("seed", type=int)
    try:
        return jsonify(random_payload(algo_key, seed=seed, viewport=_viewport_args()))
    except InputError as e:
        return jsonify({"error": str(e)}), 400


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Algorithm Replay Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
      --accent-amber: #f59e0b;
    }

    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
    }

    #sidebar { width: 340px; padding: 24px 16px; border-right: 1px solid var(--border); overflow-y: auto; }
    #main { flex: 1; display: flex; flex-direction: column; padding: 16px; gap: 12px; }
    select, textarea, input, button {
      width: 100%; margin: 4px 0; padding: 6px;
      background: var(--bg-panel); color: var(--text-primary);
      border: 1px solid var(--border); border-radius: 6px;
    }
    textarea { height: 120px; font-family: monospace; }
    .row { display: flex; gap: 6px; }
    #status { color: var(--accent-amber); min-height: 1.5em; }
    #pseudocode { font-family: monospace; background: var(--bg-panel); padding: 8px; border-radius: 8px; }
    #pseudocode .active { color: var(--accent-cyan); font-weight: bold; }
    #frame { flex: 1; overflow: auto; font-family: monospace; font-size: 12px; color: var(--text-secondary); }
  </style>
</head>
<body>
  <div id="sidebar">
    <h3>Algorithm</h3>
    <select id="algo">
      {% for a in algorithms %}
      <option value="{{ a.key }}">{{ a.label }}</option>
      {% endfor %}
    </select>
    <h3>Input (JSON)</h3>
    <textarea id="input"></textarea>
    <div class="row">
      <button id="example">Example</button>
      <button id="random">Random</button>
    </div>
    <button id="run">Run</button>
    <div class="row">
      <button id="step">Step</button>
      <button id="play">Play</button>
      <button id="pause">Pause</button>
    </div>
    <div class="row">
      <button id="end">End</button>
      <button id="reset">Reset</button>
    </div>
    <label>Speed <input id="speed" type="range" min="1" max="10" value="5"></label>
  </div>
  <div id="main">
    <div id="status"></div>
    <div id="pseudocode"></div>
    <pre id="frame"></pre>
  </div>
  <script>
    const $ = (id) => document.getElementById(id);
    const post = (url, body) => fetch(url, {
      method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body || {}),
    }).then(r => r.json());
    const surface = () => `width=${$('main').clientWidth}&height=${$('main').clientHeight}`;

    function render(state) {
      if (!state || state.error) { $('status').textContent = state ? state.error : ''; return; }
      const line = state.state ? state.state.line : -1;
      $('status').textContent = `${state.phase} · ${state.position}/${state.total} · ${state.status}`;
      $('pseudocode').innerHTML = state.pseudocode
        .map((l, i) => `<div class="${i === line ? 'active' : ''}">${l}</div>`).join('');
      $('frame').textContent = JSON.stringify(state.state, null, 2);
    }

    async function activate() {
      render(await post('/api/session', {algo: $('algo').value,
        width: $('main').clientWidth, height: $('main').clientHeight}));
      const ex = await fetch(`/api/example?algo=${$('algo').value}&${surface()}`).then(r => r.json());
      $('input').value = JSON.stringify(ex, null, 1);
    }

    $('algo').addEventListener('change', activate);
    $('example').onclick = async () => {
      const ex = await fetch(`/api/example?algo=${$('algo').value}&${surface()}`).then(r => r.json());
      $('input').value = JSON.stringify(ex, null, 1);
    };
    $('random').onclick = async () => {
      const rnd = await fetch(`/api/random?algo=${$('algo').value}&${surface()}`).then(r => r.json());
      $('input').value = JSON.stringify(rnd, null, 1);
    };
    $('run').onclick = async () => {
      let body;
      try { body = JSON.parse($('input').value); } catch (e) { $('status').textContent = e.message; return; }
      render(await post('/api/run', body));
    };
    for (const op of ['step', 'play', 'pause', 'end', 'reset']) {
      $(op).onclick = async () => render((await post(`/api/${op}`)).state);
    }
    $('speed').addEventListener('input', async (e) => render(await post('/api/speed', {speed: +e.target.value})));

    setInterval(async () => {
      const r = await fetch('/api/state');
      if (r.ok) render(await r.json());
    }, 100);

    activate();
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    print("=" * 60)
    print("  Algorithm Replay Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)
