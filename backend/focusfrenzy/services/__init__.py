"""
Focus Frenzy Capture Service — Services Layer
===============================================

Service Inventory:
    - record_codec: Capture filename grammar (encode / best-effort decode)
    - CaptureStore: Directory-backed put / list / count over capture files
    - formatting:   Sizes and dates for logs, gallery and JSON listing

Services know nothing about HTTP; they raise the exceptions in
focusfrenzy.exceptions and the routes let global handlers map them.
"""
