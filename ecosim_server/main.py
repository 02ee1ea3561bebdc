"""FastAPI backend application entry point.

This module serves as the entry point for uvicorn.
"""

import os

import uvicorn

from ecosim.config.server import DEFAULT_API_PORT
from ecosim_server.app_factory import create_app

# This global 'app' variable is what uvicorn looks for
app = create_app()


def main() -> None:
    """Run the application using uvicorn when executed directly."""
    port = int(os.getenv("ECOSIM_API_PORT", str(DEFAULT_API_PORT)))
    is_production = os.getenv("PRODUCTION", "false").lower() == "true"

    uvicorn.run(
        "ecosim_server.main:app",
        host="0.0.0.0",
        port=port,
        reload=not is_production,
        log_level="info",
    )


if __name__ == "__main__":
    main()
