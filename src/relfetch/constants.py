"""
Constants and configuration values for relfetch.

This module contains the hardcoded values, URLs, timeouts, and other constants
used throughout the application.
"""

# GitHub API URLs
GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_JSON_ACCEPT = "application/vnd.github+json"
ASSET_CONTENT_ACCEPT = "application/octet-stream"
ACCESS_TOKEN_PARAM = "access_token"

# Network timeouts (in seconds)
GITHUB_API_TIMEOUT = 10
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CHUNK_SIZE = 8192

# Option defaults
DEFAULT_ASSET_PATTERN = ".*"
DEFAULT_OUTPUT_DIR = "."

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# Environment variables
API_URL_ENV_VAR = "RELFETCH_API_URL"
LOG_LEVEL_ENV_VAR = "RELFETCH_LOG_LEVEL"
LOG_FILE_ENV_VAR = "RELFETCH_LOG_FILE"

# Logging configuration
LOGGER_NAME = "relfetch"
LOG_FILE_NAME = "relfetch.log"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Values accepted as "enabled" for boolean environment variables
TRUTHY_ENV_VALUES = frozenset({"1", "true", "yes", "on"})
