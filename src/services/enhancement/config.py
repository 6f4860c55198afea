"""
Configuration constants for the Listing Enhancement Service
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Project Root Directory
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# File paths
DATA_DIR = PROJECT_ROOT / "data"
LOG_DIR = Path(os.getenv("LISTING_LOG_DIR", str(DATA_DIR / "logs")))

# Enhancement defaults
DEFAULT_MARKETPLACE = "Amazon"
DEFAULT_MODEL_PREFERENCE = "gpt4o"
CANCELLED_MESSAGE = "Enhancement cancelled before completion"

# Fields the model may overwrite during a merge
ENHANCEABLE_FIELDS = ["title", "description", "bullet_points", "search_terms"]

# Logging Configuration
LOG_FILE = LOG_DIR / "listing_enhancement.log"
LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Development/Production Mode
DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"
LOG_LEVEL = "DEBUG" if DEBUG_MODE else "INFO"
