"""
Focus Frenzy Capture Service — Application Package Initializer
================================================================

What: Marks the `focusfrenzy` directory as a Python package.
Why:  Enables module imports like `from focusfrenzy.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service follows the same layered shape as a larger backend,
    even though there is no database:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Store + Record Codec)   │  ← Filename grammar, disk I/O
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← CaptureRecord + Pydantic
    ├─────────────────────────────────────┤
    │     Captures Directory (Storage)    │  ← One .jpg file per record
    └─────────────────────────────────────┘

    The captures directory IS the record store: each filename carries the
    client IP, score and write time, so no index or database is needed.
"""

__version__ = "1.0.0"
