import csv
import io
import logging
import os
import zipfile
from datetime import date, datetime

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .exceptions import MalformedInput
from .schemas import CertificateRequest

logger = logging.getLogger(__name__)

CSV = "csv"
XLSX = "xlsx"

FILE_SHAPES = {
    ".csv": CSV,
    ".txt": CSV,
    ".xlsx": XLSX,
    ".xlsm": XLSX,
}

# Canonical field -> recognized header aliases, in matching order.
COLUMN_ALIASES = {
    "name": ("name", "recipient_name", "recipient"),
    "email": ("email", "recipient_email"),
    "course": ("course", "course_name"),
    "achievement": ("achievement", "achievement_title", "title"),
    "date": ("date", "completion_date", "completed_on"),
    "issuer": ("issuer", "issuer_name"),
    "instructor": ("instructor", "instructor_name"),
}

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%B %d, %Y",
)
DATETIME_FORMATS = tuple(f"{fmt} %H:%M:%S" for fmt in DATE_FORMATS)


# -----------------------------
# Helper Functions
# -----------------------------
def detect_shape(filename):
    """Map an uploaded file name to CSV or XLSX."""
    extension = os.path.splitext(filename or "")[1].lower()
    try:
        return FILE_SHAPES[extension]
    except KeyError:
        raise MalformedInput(f"Unsupported file type: {extension or filename!r}")


def find_column_index(headers, *aliases):
    """
    Return the index of the first header that equals or contains any alias.

    Matching is case-insensitive and ignores surrounding whitespace. Returns
    None when no header matches.
    """
    for index, header in enumerate(headers):
        if header is None:
            continue
        header = str(header).lower().strip()
        for alias in aliases:
            alias = alias.lower()
            if header == alias or alias in header:
                return index
    return None


def resolve_columns(headers):
    return {
        field_name: find_column_index(headers, *aliases)
        for field_name, aliases in COLUMN_ALIASES.items()
    }


def parse_completion_date(value):
    """
    Parse a completion date, falling back to today.

    Date-only patterns are tried first, then the same patterns with a time
    part. Blank input and unrecognized input both give today's date.
    """
    if value is None or not str(value).strip():
        return date.today()

    value = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            pass

    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            pass

    logger.warning("Could not parse date: %s, using current date", value)
    return date.today()


def _row_value(row, index):
    if index is None or index >= len(row):
        return None
    value = row[index].strip()
    return value or None


def _cell_value(row, index):
    if index is None or index >= len(row):
        return None
    cell = row[index]
    value = cell.value
    if value is None:
        return None

    if cell.is_date:
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return None
    if cell.data_type == "s":
        return value
    if cell.data_type == "b" or isinstance(value, bool):
        return "true" if value else "false"
    if cell.data_type == "n":
        return str(int(value))
    return None


# -----------------------------
# Importers
# -----------------------------
def import_from_csv(file):
    """
    Read certificate requests from a CSV file.

    The first row is the header. Rows whose first column is blank are skipped.
    """
    logger.info("Importing certificates from CSV file: %s", getattr(file, "name", "<stream>"))

    try:
        content = file.read()
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig")
        rows = list(csv.reader(io.StringIO(content), strict=True))
    except (UnicodeDecodeError, csv.Error) as e:
        raise MalformedInput(f"Could not read CSV file: {e}") from e

    if not rows:
        raise MalformedInput("CSV file is empty")

    columns = resolve_columns(rows[0])
    email_index = columns["email"]

    requests = []
    for row in rows[1:]:
        if not row or not row[0].strip():
            continue

        requests.append(CertificateRequest(
            recipient_name=_row_value(row, columns["name"]),
            recipient_email=_row_value(row, email_index),
            course_name=_row_value(row, columns["course"]),
            achievement_title=_row_value(row, columns["achievement"]),
            completion_date=parse_completion_date(_row_value(row, columns["date"])),
            issuer_name=_row_value(row, columns["issuer"]),
            instructor_name=_row_value(row, columns["instructor"]),
            send_email=(
                email_index is not None
                and len(row) > email_index
                and bool(row[email_index].strip())
            ),
        ))

    logger.info("Imported %d certificate requests from CSV", len(requests))
    return requests


def import_from_excel(file):
    """
    Read certificate requests from the first sheet of an Excel workbook.

    Rows whose recipient-name column is blank are skipped.
    """
    logger.info("Importing certificates from Excel file: %s", getattr(file, "name", "<stream>"))

    # Damaged sheet XML surfaces as SyntaxError from ElementTree or lxml.
    try:
        workbook = load_workbook(file)
    except (InvalidFileException, zipfile.BadZipFile, SyntaxError, KeyError, ValueError, TypeError, OSError) as e:
        raise MalformedInput(f"Could not read Excel file: {e}") from e

    try:
        sheet = workbook.worksheets[0]
        rows = [
            row for row in sheet.iter_rows()
            if any(cell.value is not None for cell in row)
        ]
        if not rows:
            raise MalformedInput("Excel file is empty")

        # Header row is the sheet's first row even when a later row is the
        # first populated one.
        header_row = next(sheet.iter_rows(min_row=1, max_row=1))
        columns = resolve_columns([cell.value for cell in header_row])
        name_index = columns["name"]
        email_index = columns["email"]

        requests = []
        for row in sheet.iter_rows(min_row=2):
            name = _cell_value(row, name_index)
            if name is None or not name.strip():
                continue

            requests.append(CertificateRequest(
                recipient_name=name,
                recipient_email=_cell_value(row, email_index),
                course_name=_cell_value(row, columns["course"]),
                achievement_title=_cell_value(row, columns["achievement"]),
                completion_date=parse_completion_date(_cell_value(row, columns["date"])),
                issuer_name=_cell_value(row, columns["issuer"]),
                instructor_name=_cell_value(row, columns["instructor"]),
                send_email=email_index is not None and _cell_value(row, email_index) is not None,
            ))
    finally:
        workbook.close()

    logger.info("Imported %d certificate requests from Excel", len(requests))
    return requests


def normalize(source, shape):
    """Dispatch to the CSV or Excel importer for an uploaded file."""
    if shape == CSV:
        return import_from_csv(source)
    if shape == XLSX:
        return import_from_excel(source)
    raise MalformedInput(f"Unsupported tabular shape: {shape!r}")
