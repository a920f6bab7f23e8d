import logging
import subprocess
import sys

from menu_guard.core.app_config import load_app_config
from menu_guard.core.logging_config import resolve_level, setup_logging

config = load_app_config()
setup_logging(resolve_level(config.log_level))
# Plain logger: setup_logging already gives the root logger a handler.
logger = logging.getLogger(__name__)

def run():
    logger.info("🚀 Starting Menu Guard...")

    logger.info("➡️  Starting API (Uvicorn)...")
    backend = subprocess.Popen(
        ["uvicorn", "menu_guard.main:app", "--reload", "--port", "8000"],
        stdout=sys.stdout,
        stderr=sys.stderr
    )

    logger.info(f"   Catalog:     {config.catalog_path}")
    logger.info(f"   Assignments: {config.assignments_path or '(in memory)'}")
    logger.info("   👉 API:  http://localhost:8000")
    logger.info("   👉 Docs: http://localhost:8000/docs")
    logger.info("Press Ctrl+C to stop.")

    try:
        backend.wait()
    except KeyboardInterrupt:
        logger.info("🛑 Stopping API...")
        backend.terminate()
        logger.info("Done.")

if __name__ == "__main__":
    run()
