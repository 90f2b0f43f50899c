"""
HTML Template
=============

HTML template for the web interface.
"""

HTML_TEMPLATE = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Age &amp; Gender Demo</title>
    <style>
      * {
        box-sizing: border-box;
      }
      body {
        font-family: 'Segoe UI', system-ui, -apple-system, sans-serif;
        margin: 0;
        min-height: 100vh;
        background: #0f172a;
        color: #e2e8f0;
        display: flex;
        flex-direction: column;
        align-items: center;
        padding: 1rem;
        text-align: center;
      }
      h1 {
        margin: 1rem 0;
        font-size: 1.8rem;
        color: #f8fafc;
      }
      .stream-container {
        position: relative;
        margin: 0 auto;
        background: #020617;
        border-radius: 12px;
        overflow: hidden;
        border: 1px solid #334155;
      }
      img#stream {
        display: block;
      }
      .meta {
        margin-top: 0.75rem;
        font-size: 0.9rem;
        color: #94a3b8;
      }
      .status.error {
        color: #ef4444;
      }
    </style>
  </head>
  <body>
    <h1>Age &amp; Gender Demo</h1>
    <div class="stream-container" style="width: {{ width }}px; height: {{ height }}px;">
      <img id="stream" src="/video_feed" width="{{ width }}" height="{{ height }}" alt="Live feed" />
    </div>
    <div class="meta">
      <span id="readout">Age: -- | Gender: --</span>
      <span id="status" class="status"></span>
    </div>
    <script>
      const stream = document.getElementById('stream');
      const readout = document.getElementById('readout');
      const status = document.getElementById('status');

      async function refreshPrediction() {
        try {
          const res = await fetch('/prediction');
          const data = await res.json();
          readout.textContent = data.text;
        } catch (e) {
          console.error('Prediction error:', e);
        }
      }
      setInterval(refreshPrediction, 500);

      stream.onerror = function() {
        status.textContent = ' - Error loading stream, check camera';
        status.className = 'status error';
      };
    </script>
  </body>
</html>
"""
