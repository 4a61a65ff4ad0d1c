"""Mini README: Interactive interfaces (web/CLI) for Freightboard.

Exports the FastAPI application factory that serves the finance API. The
command line entry point lives in ``main_dispatch_board.py`` at the
repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
