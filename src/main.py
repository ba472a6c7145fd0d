"""Main application entry point.

Runs the relay API (port 8000) with the NiceGUI chat page mounted on it.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_integrated() -> None:
    """Run the relay API with the chat page on the same server.

    The client's API_BASE_URL should point at this server (the default).
    """
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    ui.run_with(
        app,
        title="Collection Assistant",
        favicon="💬",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"Relay endpoint at http://localhost:{port}/api/chat")
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the relay API and the chat page as separate processes.

    Relay on port 8000, chat page on port 8080.
    """
    import subprocess
    import time

    logger.info("Starting relay API on http://localhost:8000")
    logger.info("Starting chat UI on http://localhost:8080")

    api_proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "src.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            "8000",
        ]
    )
    ui_proc = subprocess.Popen(
        [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
    )

    try:
        while api_proc.poll() is None and ui_proc.poll() is None:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in (api_proc, ui_proc):
            proc.terminate()
            proc.wait()


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run the API and the UI on different ports.
    Default is integrated mode (both on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting chat relay in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
