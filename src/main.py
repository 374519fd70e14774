"""Main application entry point.

Serves the NiceGUI chat page. By default NiceGUI is mounted on a small FastAPI
host app and run with uvicorn; set RUN_MODE=standalone to let NiceGUI run its
own server instead. Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

APP_TITLE = "AI Chat"


def create_host_app() -> FastAPI:
    """Create the FastAPI app that hosts the chat UI.

    Returns:
        FastAPI application with a liveness route for the UI server itself.
    """
    application = FastAPI(title="AI Chat UI", docs_url=None, redoc_url=None)

    @application.get("/ui/health")
    async def ui_health() -> dict[str, str]:
        """Liveness of the UI server (not the chat backend)."""
        return {"status": "healthy", "service": "chat-ui"}

    return application


def run_integrated() -> None:
    """Run NiceGUI mounted on a FastAPI host app under uvicorn."""
    import uvicorn
    from nicegui import ui

    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_host_app()
    ui.run_with(app, title=APP_TITLE, favicon="💬")

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_standalone() -> None:
    """Run the chat page on NiceGUI's own server."""
    from nicegui import ui

    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Chat UI available at http://localhost:{port}/")
    ui.run(
        title=APP_TITLE,
        favicon="💬",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        reload=False,
    )


def main() -> None:
    """Application entry point.

    Set RUN_MODE=standalone to skip the FastAPI host app.
    Default is integrated mode.
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting chat client in {mode} mode")

    if mode == "standalone":
        run_standalone()
    else:
        run_integrated()


if __name__ in {"__main__", "__mp_main__"}:
    main()
