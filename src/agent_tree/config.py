"""
Runtime configuration.

Values come from the environment, with a local .env file loaded first.
"""

import logging
import os

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load environment variables from .env file
load_dotenv()

# Load GROQ configuration from environment variables
GROQ_API_ENDPOINT = os.getenv("GROQ_API_ENDPOINT")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.1-70b-versatile")

# Model round-trips allowed inside a single session response
MAX_ITERATIONS = int(os.getenv("AGENT_MAX_ITERATIONS", "10"))

# Attempts for transient API failures (connection, rate limit, 5xx)
RETRY_ATTEMPTS = int(os.getenv("AGENT_RETRY_ATTEMPTS", "3"))

LOG_LEVEL = os.getenv("AGENT_LOG_LEVEL", "WARNING")


def configure_logging(level: str | None = None) -> None:
    """Route the package loggers through rich."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
