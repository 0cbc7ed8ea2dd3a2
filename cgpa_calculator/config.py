"""
App-wide constants and logging setup.
"""
import logging
import os
from typing import Optional

PAGE_TITLE = "Anna University CGPA Calculator | Grade Points & Percentage"
PAGE_ICON = "🎓"

DEFAULT_GRADE = "A+"
DEFAULT_CREDITS = 4

# Credits are usually between 0 and 5; the form only hints at this.
MIN_CREDITS = 0
MAX_CREDITS_HINT = 5

# Anna University CGPA -> percentage conversion (R2017 / R2021 regulations)
PERCENTAGE_FACTOR = 9.5

DISCLAIMER = (
    "*Disclaimer: This calculator is for estimation purposes. "
    "Please refer to official university results for final grades."
)

LOG_LEVEL_ENV = "CGPA_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Attach a single console handler to the package logger.

    The level comes from ``level`` or the CGPA_LOG_LEVEL environment variable,
    defaulting to WARNING. Streamlit reruns the app script on every
    interaction, so repeated calls must not stack handlers.
    """
    level_str = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    log_level = getattr(logging, level_str, logging.WARNING)

    package_logger = logging.getLogger("cgpa_calculator")
    package_logger.setLevel(log_level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
