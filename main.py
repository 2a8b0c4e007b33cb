"""Service entrypoint for the mapping explanation API."""
from __future__ import annotations

import uvicorn

from mapping_explainer.config import get_settings
from mapping_explainer.logging_config import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_format, settings.log_level)
    settings.require_database_url()
    uvicorn.run("mapping_explainer.api.server:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
