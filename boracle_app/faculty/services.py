import csv
import io
import re
from urllib.parse import urlparse

from flask import current_app
from openpyxl import load_workbook
from sqlalchemy import select

from .. import db
from ..models import Faculty, FacultyInitial

REQUIRED_HEADERS = ("facultyname", "email", "imgurl", "initials")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_initial(value):
    """Lookup key for an initial: trimmed and uppercased; None when blank."""
    key = (value or "").strip().upper()
    return key or None


def split_initials(raw):
    """'abc, XYZ,, abc' -> ['ABC', 'XYZ'] (order kept, duplicates and blanks dropped)."""
    seen = []
    for part in (raw or "").split(","):
        key = normalize_initial(part)
        if key and key not in seen:
            seen.append(key)
    return seen


def build_faculty_map():
    """
    Join faculty and initials once and key by normalised initial.
    Several initials may point at one faculty; blank initials are skipped.
    """
    rows = db.session.execute(
        select(FacultyInitial.faculty_initial, Faculty.faculty_name, Faculty.email, Faculty.img_url)
        .join(Faculty, Faculty.faculty_id == FacultyInitial.faculty_id)
        .order_by(Faculty.faculty_name.asc())
    ).all()
    faculty_map = {}
    for initial, name, email, img_url in rows:
        key = normalize_initial(initial)
        if not key:
            continue
        faculty_map[key] = {
            "facultyName": name,
            "email": email,
            "imgUrl": img_url,
        }
    return faculty_map


def get_faculty_detail(faculty_id):
    fac = db.session.get(Faculty, faculty_id)
    if fac is None:
        return None
    data = fac.to_dict()
    data["initials"] = sorted(i.faculty_initial for i in fac.initials)
    return data

# ==========================================
# IMPORT (CSV / XLSX)
# ==========================================

def read_csv_rows(text):
    """Returns (headers, rows) with lowercase headers and stripped string cells."""
    reader = csv.reader(io.StringIO(text.lstrip("﻿")))
    table = [row for row in reader if any((c or "").strip() for c in row)]
    if not table:
        return [], []
    headers = [(h or "").strip().lower() for h in table[0]]
    rows = [[(c or "").strip() for c in row] for row in table[1:]]
    return headers, rows


def read_xlsx_rows(stream):
    wb = load_workbook(filename=stream, read_only=True, data_only=True)
    try:
        ws = wb.active
        table = []
        for row in ws.iter_rows(values_only=True):
            cells = [(str(c).strip() if c is not None else "") for c in row]
            if any(cells):
                table.append(cells)
    finally:
        wb.close()
    if not table:
        return [], []
    return [h.lower() for h in table[0]], table[1:]


def validate_faculty_row(data):
    """Returns an error message, or None when the row is importable."""
    domain = (current_app.config.get("INSTITUTIONAL_DOMAIN") or "").lower()
    name = (data.get("facultyname") or "").strip()
    email = (data.get("email") or "").strip()
    img_url = (data.get("imgurl") or "").strip()
    if not name:
        return "Faculty name is required"
    if not email:
        return "Email is required"
    if not EMAIL_RE.match(email):
        return "Invalid email format"
    if domain and not email.lower().endswith(domain):
        return f"Email must end with {domain}"
    if img_url:
        parsed = urlparse(img_url)
        if not parsed.scheme or not parsed.netloc:
            return "Invalid image URL format"
        if parsed.scheme != "https":
            return "Image URL must use HTTPS protocol"
    return None


def import_faculty_rows(headers, rows, dry_run=False):
    """
    Insert one faculty (plus initials) per row, each row in its own transaction.
    Row numbers in errors are 1-based file lines (header is row 1).
    """
    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        raise ValueError(f"Missing required headers: {', '.join(missing)}")

    results = {
        "successCount": 0,
        "errorCount": 0,
        "totalCount": len(rows),
        "errors": [],
    }

    def _fail(row_no, message):
        results["errorCount"] += 1
        results["errors"].append({"row": row_no, "message": message})

    seen_emails = set()
    for idx, values in enumerate(rows):
        row_no = idx + 2
        if len(values) < len(headers):
            values = list(values) + [""] * (len(headers) - len(values))
        if len(values) > len(headers) and any(values[len(headers):]):
            _fail(row_no, f"Invalid number of columns. Expected {len(headers)}, got {len(values)}")
            continue
        data = dict(zip(headers, values))

        message = validate_faculty_row(data)
        if message:
            _fail(row_no, message)
            continue

        email = data["email"].strip().lower()
        existing = db.session.execute(select(Faculty).filter_by(email=email)).scalars().first()
        if existing is not None or email in seen_emails:
            _fail(row_no, f"Faculty with email {email} already exists")
            continue

        seen_emails.add(email)
        if dry_run:
            results["successCount"] += 1
            continue

        try:
            fac = Faculty(
                faculty_name=data["facultyname"].strip(),
                email=email,
                img_url=(data.get("imgurl") or "").strip() or None,
            )
            for initial in split_initials(data.get("initials")):
                fac.initials.append(FacultyInitial(faculty_initial=initial))
            db.session.add(fac)
            db.session.commit()
            results["successCount"] += 1
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Faculty import failed on row %s", row_no)
            _fail(row_no, "Database error")

    return results
