"""The single preview page.

The page is a thin surface over the controller: it posts keystrokes, submits
and iframe outcomes to the server and re-renders from the SSE change feed.
It holds no state of its own beyond the last snapshot it received.
"""

from html import escape

PAGE_TITLE = "Iframe Preview"

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<style>
  body {{ margin: 0; padding: 2rem; background: #d9d9d9; font-family: system-ui, sans-serif; }}
  main {{ max-width: 56rem; margin: 0 auto; display: grid; gap: 2rem; }}
  .card {{ background: #fff; border-radius: .5rem; box-shadow: 0 4px 12px rgba(0,0,0,.15); padding: 1.5rem; }}
  .row {{ display: flex; gap: .75rem; }}
  #url-input {{ flex: 1; padding: .75rem 1rem; border: 1px solid #d1d5db; border-radius: .5rem; font-size: 1rem; }}
  #load-button {{ padding: .75rem 1.5rem; background: #2563eb; color: #fff; border: 0; border-radius: .5rem; cursor: pointer; }}
  #load-button:hover {{ background: #1d4ed8; }}
  .stage {{ height: 600px; border: 1px solid #d1d5db; border-radius: .5rem; position: relative; overflow: hidden; }}
  .placeholder {{ display: flex; align-items: center; justify-content: center; height: 100%; background: #f9fafb; color: #6b7280; }}
  .spinner-wrap {{ position: absolute; inset: 0; display: flex; flex-direction: column; align-items: center; justify-content: center; background: #f9fafb; z-index: 1; }}
  .spinner {{ width: 2rem; height: 2rem; border-radius: 50%; border-bottom: 2px solid #2563eb; animation: spin 1s linear infinite; }}
  @keyframes spin {{ to {{ transform: rotate(360deg); }} }}
  .error-panel {{ display: flex; flex-direction: column; align-items: center; justify-content: center; height: 100%; background: #fef2f2; color: #dc2626; text-align: center; padding: 0 1rem; }}
  .error-panel ul {{ color: #4b5563; font-size: .875rem; text-align: left; }}
  iframe {{ width: 100%; height: 600px; border: 0; }}
  #logs {{ background: #111827; border-radius: .5rem; padding: 1rem; height: 300px; overflow-y: auto; font: .875rem ui-monospace, monospace; }}
  .log {{ display: flex; gap: .5rem; margin-bottom: .5rem; }}
  .log .ts {{ color: #9ca3af; }}
  .log.success {{ color: #4ade80; }}
  .log.error {{ color: #f87171; }}
  .log.info {{ color: #60a5fa; }}
  .log .sev {{ font-weight: 600; }}
  .hidden {{ display: none; }}
</style>
</head>
<body>
<main>
  <section class="card">
    <label for="url-input">Enter the URL to embed:</label>
    <div class="row">
      <input id="url-input" type="text" placeholder="https://example.com" value="{raw_input}">
      <button id="load-button" type="button">Load</button>
    </div>
  </section>

  <section class="card">
    <h2>Iframe Preview</h2>
    <div class="stage" id="stage">
      <div class="placeholder" id="state-idle">Enter a valid URL and click "Load" to see the preview</div>
      <div class="spinner-wrap hidden" id="state-loading"><div class="spinner"></div><p>Loading...</p></div>
      <div class="error-panel hidden" id="state-failed">
        <h3>Failed to load the iframe</h3>
        <p>Could not load the content of the URL: <span id="failed-url"></span></p>
        <p>Possible causes:</p>
        <ul>
          <li>The URL does not allow being embedded (X-Frame-Options)</li>
          <li>CORS or security restrictions</li>
          <li>The page does not exist or is unreachable</li>
          <li>Timeout while loading the content</li>
        </ul>
      </div>
      <iframe id="frame" class="hidden" title="Preview"></iframe>
    </div>
  </section>

  <section class="card">
    <h2>Logs</h2>
    <div id="logs"><p class="ts" id="no-logs">No logs yet...</p></div>
  </section>
</main>
<script>
(function () {{
  const input = document.getElementById("url-input");
  const frame = document.getElementById("frame");
  const logs = document.getElementById("logs");
  let renderedGeneration = null;

  function post(path, body) {{
    return fetch(path, {{
      method: "POST",
      headers: {{"Content-Type": "application/json"}},
      body: JSON.stringify(body),
    }});
  }}

  function show(id) {{
    for (const el of ["state-idle", "state-loading", "state-failed"]) {{
      document.getElementById(el).classList.toggle("hidden", el !== id);
    }}
  }}

  function render(state) {{
    if (state.phase === "idle") {{
      show("state-idle");
      frame.classList.add("hidden");
      frame.removeAttribute("src");
      renderedGeneration = null;
      return;
    }}
    if (state.phase === "failed") {{
      show("state-failed");
      document.getElementById("failed-url").textContent = state.target;
      frame.classList.add("hidden");
      return;
    }}
    show(state.phase === "loading" ? "state-loading" : null);
    frame.classList.remove("hidden");
    if (renderedGeneration !== state.generation) {{
      renderedGeneration = state.generation;
      const generation = state.generation;
      frame.onload = () => post("/embed/loaded", {{generation}});
      frame.onerror = () => post("/embed/failed", {{generation}});
      frame.src = state.target;
    }}
  }}

  function appendLog(entry) {{
    const empty = document.getElementById("no-logs");
    if (empty) empty.remove();
    const row = document.createElement("div");
    row.className = "log " + entry.severity;
    const ts = document.createElement("span");
    ts.className = "ts";
    ts.textContent = "[" + entry.timestamp + "]";
    const sev = document.createElement("span");
    sev.className = "sev";
    sev.textContent = "[" + entry.severity.toUpperCase() + "]";
    const msg = document.createElement("span");
    msg.textContent = entry.message;
    row.append(ts, sev, msg);
    logs.appendChild(row);
    logs.scrollTop = logs.scrollHeight;
  }}

  const events = new EventSource("/events");
  events.onmessage = (message) => {{
    const event = JSON.parse(message.data);
    if (event.type === "snapshot") {{
      logs.querySelectorAll(".log").forEach((row) => row.remove());
      event.entries.forEach(appendLog);
      render(event.state);
    }} else if (event.type === "log") {{
      appendLog(event.entry);
    }} else if (event.type === "state") {{
      render(event.state);
    }}
  }};

  input.addEventListener("input", () => post("/input", {{text: input.value}}));
  input.addEventListener("keydown", (e) => {{
    if (e.key === "Enter") post("/submit", {{url: input.value}});
  }});
  document.getElementById("load-button").addEventListener("click", () => post("/submit", {{url: input.value}}));
}})();
</script>
</body>
</html>
"""


def render_page(raw_input: str = "") -> str:
    """Render the page, pre-filling the input with the last typed text."""
    return _PAGE_TEMPLATE.format(title=escape(PAGE_TITLE), raw_input=escape(raw_input, quote=True))
