import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from taskboard.core.logging import setup_logging

logger = logging.getLogger(__name__)

def main():
    """
    Run the Taskboard API with uvicorn.
    """
    parser = argparse.ArgumentParser(description="Run the Taskboard API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind")
    parser.add_argument("--port", type=int, default=5175, help="Port to bind")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    parser.add_argument("--log-level", default="INFO", help="Logging level")

    args = parser.parse_args()

    # Environment first, settings are read on import of the app
    load_dotenv(dotenv_path=".env", override=True)
    setup_logging(args.log_level)

    logger.info(f"Taskboard API on http://{args.host}:{args.port}")
    logger.info(f"Swagger UI at http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "taskboard.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload
    )

if __name__ == "__main__":
    main()
