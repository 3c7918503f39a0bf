import logging
import os

# Set up Python logging
logger = logging.getLogger("junto-logger")
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
logger.propagate = False  # uvicorn installs its own root handler

# Configure handler/format only once per process
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s - [%(levelname)s] - %(name)s - %(funcName)s() - %(message)s"
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
