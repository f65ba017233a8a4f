"""
Focus Frenzy Capture Service — Routes Package
===============================================

Route Inventory:
    - capture.py:   POST /capture                (upload a capture image)
    - captures.py:  GET  /view-captures          (HTML gallery)
                    GET  /captures-json          (JSON listing)
    - health.py:    GET  /health                 (status snapshot)
    - assets.py:    GET  /captures/{filename}    (raw image bytes)
                    GET  /                       (game page)
    - deps.py:      get_capture_store dependency

Routes stay thin: they pull fields out of the request, call the
CaptureStore, and shape the response. Errors are raised as exceptions
and formatted by the global handlers in main.py.
"""
