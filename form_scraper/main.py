"""Application entry point for the Form Scraper API server."""

import uvicorn

from form_scraper.api.app import app
from form_scraper.utils.config import load_config
from form_scraper.utils.logger import setup_logging


def main() -> None:
    """Start the FastAPI application server."""
    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
