"""
FastAPI Server Main Entry Point

Run this module to start the FastAPI server:
    python -m server

Or with uvicorn:
    uvicorn src.app:app --port 8080

The scope is taken from PYTHIA_SCOPE (see core/utils/settings.py).
"""
import uvicorn
from dotenv import load_dotenv

from core.utils.settings import Settings


def load_env() -> None:
    """Load environment variables from .env file."""
    load_dotenv()


if __name__ == '__main__':
    load_env()
    settings = Settings.from_env()
    uvicorn.run(
        "src.app:app",  # module path
        host=settings.host,
        port=settings.port,
        log_level="info"  # Use string instead of int for uvicorn
    )
