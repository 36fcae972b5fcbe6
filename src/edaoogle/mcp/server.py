"""EDAoogle MCP server entrypoint using FastMCP.

Serves keyword search over an index built by `edaoogle-mkindex`.
Run with:
  - edaoogle-mcp
  - or: python -m edaoogle.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastmcp import FastMCP
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from edaoogle.config import Settings, load_settings
from edaoogle.logging_setup import configure_logging
from edaoogle.mcp.tools import register_search_tools
from edaoogle.storage.database import get_engine, init_db, make_session_factory

logger = logging.getLogger(__name__)


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker[Session]] = None

    def init_storage(self) -> None:
        """Open the index database configured in settings."""
        cfg = self.settings.database
        self.engine = get_engine(cfg.url, echo=cfg.echo)
        # Serving an index that was never built yields empty results, not errors
        init_db(self.engine)
        self.session_factory = make_session_factory(self.engine)


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("EDAoogle MCP Server")


# ----- Tools -----

@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    configure_logging(settings.app.log_level)
    _state = AppState(settings)
    _state.init_storage()
    register_search_tools(mcp, get_state=lambda: _state)
    logger.info("Serving index from %s", settings.database.url)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
