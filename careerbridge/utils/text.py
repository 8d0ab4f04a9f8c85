"""
Text helpers for job posting fields.
"""

import re
from typing import List, Optional

# A number with optional thousands separators, then an optional "k" multiplier
_AMOUNT_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)(?:\s*([kK])\b)?")


def split_requirements(text: str) -> List[str]:
    """Split the one-per-line requirements box into a list, dropping blank lines."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def parse_salary_amount(salary: str) -> Optional[float]:
    """
    First number found in a salary string, or None.

    "$45,000 / year" -> 45000.0, "$45k" -> 45000.0, "Entry Level" -> None
    """
    if not salary:
        return None
    match = _AMOUNT_RE.search(salary)
    if not match:
        return None
    amount = float(match.group(1).replace(",", ""))
    if match.group(2):
        amount *= 1000
    return amount
