from __future__ import annotations

import re
from enum import Enum

REPORT_TITLE = "Lighthouse Report"
SLACK_PRETEXT = f"GitHub Actions / {REPORT_TITLE}"
REPORT_LINK_TITLE = "View Detailed Lighthouse Report"

RESULTS_DIR_NAME = ".lighthouseci"
ASSERTION_RESULTS_FILE = "assertion-results.json"
RAW_RESULT_PATTERN = re.compile(r"lhr-\d+\.json")

GIST_NAME_PREFIX = "lhci-action-lhr"
LIGHTHOUSE_VIEWER_URL = "https://googlechrome.github.io/lighthouse/viewer/"

DEFAULT_SERVER_URL = "https://github.com"


class ExitCode(int, Enum):
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 1


class Limits:
    """Shared hard limits."""

    MAX_RESULT_FILE_SIZE = 20_000_000  # 20MB
    MAX_LISTED_ITEMS = 100
    MAX_LIST_PAGES = 50
