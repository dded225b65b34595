"""
Videoclub: featured content curator.

Builds the featured page from Prowlarr search results enriched with TMDb
metadata, keeps it in a TTL cache backed by SQLite and refreshes it hourly.
"""
import logging
import os
import sys

import config
from app_factory import build_services, create_app
from startup_runner import initialize_runtime_services

logger = logging.getLogger("videoclub")


def run_main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    services = build_services(config)
    app = create_app(services)
    initialize_runtime_services(services)
    host = os.getenv("VIDEOCLUB_HOST", "0.0.0.0")
    port = int(os.getenv("VIDEOCLUB_PORT", "5000"))
    try:
        app.run(host=host, port=port, debug=False)
    finally:
        services["scheduler"].shutdown()
        services["store"].close()


if __name__ == "__main__":
    run_main()
