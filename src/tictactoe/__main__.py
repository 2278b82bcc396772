"""Entry point for running the game via ``python -m tictactoe``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered tic-tac-toe web server."""

    host = os.environ.get("TICTACTOE_HOST", "0.0.0.0")
    port = int(os.environ.get("TICTACTOE_PORT", "8000"))
    log_level = os.environ.get("TICTACTOE_LOG_LEVEL", "info").lower()

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run("tictactoe.ui:app", host=host, port=port, reload=False, log_level=log_level)


if __name__ == "__main__":
    main()
