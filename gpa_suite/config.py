"""
Configuration constants for the GPA suite.

Paths and the log level can be overridden through environment variables;
everything else is fixed.
"""

import logging
import os
from pathlib import Path

# =============================================================================
# STORAGE
# =============================================================================

STORAGE_KEY = "lumina_gpa_data"
DATA_FILE = Path(
    os.environ.get("GPA_SUITE_DATA_FILE", str(Path.home() / ".gpa_suite" / "gpa_data.json"))
).expanduser()


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("GPA_SUITE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Install a basic stderr handler once; later calls are no-ops."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


# =============================================================================
# RECORD DEFAULTS
# =============================================================================

SELECTABLE_TERMS = ("Monsoon", "Spring", "Summer")
FIRST_TERM = "Monsoon"

DEFAULT_COURSE_GRADE = "A"
DEFAULT_COURSE_CREDITS = 4.0

# Revised CGPA is only shown when it differs from the running CGPA by more than this
IMPROVEMENT_TOLERANCE = 0.001
