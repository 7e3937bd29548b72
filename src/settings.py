"""Static configuration for pattern-mirror.

The source file, schedule, and database location are fixed here on purpose:
the job mirrors exactly one file into exactly one table.
"""

import os

# Repository file that holds the pattern list.
REPO_OWNER = "Anish-Shobith"
REPO_NAME = "public-testing"
FILE_PATH = "pattern.json"

GITHUB_API_ROOT = "https://api.github.com"
REQUEST_TIMEOUT_SECONDS = 10.0

# Where to store the SQLite database.
DB_PATH = os.path.join(os.path.dirname(__file__), "patterns.db")
DB_TIMEOUT_SECONDS = 5.0

# Standard five-field crontab: run every minute.
CRON_SCHEDULE = "*/1 * * * *"

# False keeps the count-based change check; True also compares payloads of
# patterns whose names did not change.
FULL_DIFF = False

# Logging configuration.
# - redact.patterns: names of environment variables whose values are masked
LOGGING = {
    "level": "INFO",
    "redact": {"enabled": True, "patterns": ["GITHUB_TOKEN"]},
}
