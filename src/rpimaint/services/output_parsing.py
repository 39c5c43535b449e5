"""Best-effort extraction of facts from package-manager output.

apt's human-readable output is not a stable interface; these helpers feed
report detail fields only and never drive control flow.
"""

import re
from typing import Optional

UPGRADE_SUMMARY_PATTERN = re.compile(r"^\d+ upgraded, \d+ newly installed.*$", re.MULTILINE)
REMOVING_PATTERN = re.compile(r"^Removing\b", re.MULTILINE)


def parse_upgrade_summary(output: Optional[str]) -> Optional[str]:
    if not output:
        return None
    match = UPGRADE_SUMMARY_PATTERN.search(output)
    if not match:
        return None
    return match.group(0).strip()


def count_removed_packages(output: Optional[str]) -> int:
    if not output:
        return 0
    return len(REMOVING_PATTERN.findall(output))
