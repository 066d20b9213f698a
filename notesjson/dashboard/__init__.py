"""HTTP API for notesjson.

Exposes listing, export download, import upload and reset over FastAPI.
"""

from .app import create_app

__all__ = ["create_app"]
