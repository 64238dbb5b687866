"""
Date normalization for syllabus due dates.

Syllabi write dates as M/D, M/D/YY or M/D/YYYY. The year is taken from the
token when present, otherwise from the course term ("Spring 2026"), otherwise
the current calendar year. Day and month values are not checked against the
calendar: "13/40" becomes "YYYY-13-40".
"""

import re
from datetime import date
from typing import Optional

TERM_YEAR_PATTERN = re.compile(r"20\d{2}")


def normalize_date(raw_token: str, course_term: str = "", today: Optional[date] = None) -> Optional[str]:
    """Convert a slash-separated date token into ``YYYY-MM-DD``, or None."""
    if not raw_token:
        return None

    parts = raw_token.split("/")
    if len(parts) < 2:
        return None

    month = parts[0].zfill(2)
    day = parts[1].zfill(2)

    year = parts[2] if len(parts) > 2 else ""
    if not year:
        term_year = TERM_YEAR_PATTERN.search(course_term or "")
        if term_year:
            year = term_year.group(0)
        else:
            year = str((today or date.today()).year)
    elif len(year) == 2:
        year = "20" + year

    return f"{year}-{month}-{day}"
