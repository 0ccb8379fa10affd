"""
CONFIGURATION - Environment-based settings management

This file loads configuration from environment variables with sensible defaults.
It handles:
1. Logging level
2. Default interval and date window for series requests
3. Limits for the top interacted posts ranking

All settings can be overridden via environment variables or .env file.
"""

import os
from dotenv import load_dotenv
from analytics.utils import Constants, setup_logging

# Load environment variables from .env file if it exists
load_dotenv()

# STEP 1: Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", Constants.DEFAULT_LOG_LEVEL)
setup_logging(LOG_LEVEL)

# STEP 2: Series defaults
DEFAULT_INTERVAL = os.getenv("DEFAULT_INTERVAL", Constants.DEFAULT_INTERVAL).strip().lower()
DEFAULT_WINDOW_DAYS = int(os.getenv("DEFAULT_WINDOW_DAYS", str(Constants.DEFAULT_WINDOW_DAYS)))

# STEP 3: Top interacted posts
TOP_POSTS_DEFAULT_LIMIT = int(os.getenv("TOP_POSTS_DEFAULT_LIMIT", str(Constants.DEFAULT_TOP_POSTS_LIMIT)))
TOP_POSTS_MAX_LIMIT = int(os.getenv("TOP_POSTS_MAX_LIMIT", str(Constants.MAX_TOP_POSTS_LIMIT)))
