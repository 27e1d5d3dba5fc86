import re

SEMESTER_PATTERN = re.compile(r"^(SPRING|SUMMER|FALL)[0-9]{4}$")
_LOOSE_PATTERN = re.compile(r"^(SPRING|SUMMER|FALL)([0-9]{2}|[0-9]{4})$")


def is_canonical_semester(value) -> bool:
    return bool(SEMESTER_PATTERN.match(value or ""))


def normalize_semester(value: str) -> str:
    """
    Canonicalise a semester label to SEASONYYYY.
    Accepts "Spring 2025", "spring2025", "SPRING 25" and similar; two-digit
    years are taken as 20YY.
    """
    s = re.sub(r"\s+", "", (value or "")).upper()
    if is_canonical_semester(s):
        return s
    m = _LOOSE_PATTERN.match(s)
    if not m:
        raise ValueError(f"Invalid semester: {value!r}")
    season, year = m.groups()
    if len(year) == 2:
        year = "20" + year
    return f"{season}{year}"
