import io
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from models.models import Event, RegistrationRecord
from .RegistrationErrors import EmptyExportError, ExportGenerationError
from .RegistrationFlattener import (
    SUMMARY_SHEET_HEADERS,
    build_export_table,
    build_summary,
    export_filename,
)

logger = logging.getLogger(__name__)

REGISTRATIONS_SHEET = "Event Registrations"
SUMMARY_SHEET = "Summary"
MIN_COLUMN_WIDTH = 15
SUMMARY_COLUMN_WIDTHS = (30, 20)


def _cell_values(row):
    # Control characters (e.g. form feeds from PDF pastes) are not allowed in worksheets
    return [ILLEGAL_CHARACTERS_RE.sub("", value) if isinstance(value, str) else value for value in row]


def build_registration_workbook(headers: Sequence[str], rows: Sequence[Sequence[object]],
                                summary_rows: Sequence[Tuple[str, object]]) -> bytes:
    """Two-sheet workbook: one row per registration, then the summary key/value list."""
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = REGISTRATIONS_SHEET
        ws.append(_cell_values(headers))
        for row in rows:
            ws.append(_cell_values(row))
        for idx, header in enumerate(headers, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = max(len(header), MIN_COLUMN_WIDTH)

        summary_ws = wb.create_sheet(title=SUMMARY_SHEET)
        summary_ws.append(list(SUMMARY_SHEET_HEADERS))
        for metric, value in summary_rows:
            summary_ws.append(_cell_values([metric, value]))
        for idx, width in enumerate(SUMMARY_COLUMN_WIDTHS, start=1):
            summary_ws.column_dimensions[get_column_letter(idx)].width = width

        out = io.BytesIO()
        wb.save(out)
        out.seek(0)
        return out.read()
    except Exception as e:
        logger.exception("Failed to build registration workbook")
        raise ExportGenerationError() from e


def export_registrations(event: Optional[Event], event_title: str, records: List[RegistrationRecord],
                         total_count: int, exported_at: Optional[datetime] = None, tz=None) -> Tuple[str, bytes]:
    """
    Build the registration export for one event.

    Returns (filename, xlsx bytes). Raises EmptyExportError before touching
    openpyxl when there is nothing to export.
    """
    if not records:
        raise EmptyExportError()

    exported_at = exported_at or datetime.utcnow()
    title = (event.title if event else None) or event_title

    try:
        headers, rows = build_export_table(records, tz)
        summary_rows = build_summary(event, title, records, total_count, exported_at, tz)
    except Exception as e:
        logger.exception("Failed to flatten registrations for %s", title)
        raise ExportGenerationError() from e

    content = build_registration_workbook(headers, rows, summary_rows)
    filename = export_filename(title, exported_at)
    logger.info("Exported %d registrations for %s as %s", len(records), title, filename)
    return filename, content
