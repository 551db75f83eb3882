"""PDF export for timesheets.

The grid is laid out with ReportLab, then PyPDF2 rewrites the file with
document metadata (title = pay period label) and reads it back to confirm
it is a readable PDF. A failed export never leaves a file behind at the
target path, so a stale PDF cannot be attached to a later email.
"""

import logging
from pathlib import Path

import PyPDF2
from PyPDF2.errors import PdfReadError
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .timesheet import Timesheet, grid_rows, header_lines


logger = logging.getLogger(__name__)

PDF_PRODUCER = "pay-sheet"


class ExportError(Exception):
    """Raised when a timesheet PDF could not be produced."""
    pass


def timesheet_filename(timesheet: Timesheet) -> str:
    """File name for a period, e.g. timesheet_2025-04-01_2025-04-15.pdf."""
    period = timesheet.period
    return f"timesheet_{period.start_date.isoformat()}_{period.end_date.isoformat()}.pdf"


def _render(timesheet: Timesheet, path: Path) -> None:
    """Lay out the timesheet with ReportLab."""
    doc = SimpleDocTemplate(str(path), pagesize=letter, title=timesheet.label)
    styles = getSampleStyleSheet()
    story = [Paragraph("Timesheet", styles["Heading1"])]

    for label, value in header_lines(timesheet):
        story.append(Paragraph(f"<b>{label}:</b> {value}", styles["Normal"]))
    story.append(Spacer(1, 16))

    data = grid_rows(timesheet)
    table = Table(data, colWidths=[90, 80, 60, 230])
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("ALIGN", (2, 0), (2, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
    ]
    for offset, row in enumerate(timesheet.rows, start=1):
        if row.holiday:
            style.append(("BACKGROUND", (0, offset), (-1, offset), colors.lightyellow))
    table.setStyle(TableStyle(style))
    story.append(table)

    doc.build(story)


def _stamp_metadata(source: Path, target: Path, timesheet: Timesheet) -> int:
    """Copy source to target with document metadata. Returns page count."""
    reader = PyPDF2.PdfReader(str(source))
    writer = PyPDF2.PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    writer.add_metadata({
        "/Title": timesheet.label,
        "/Author": timesheet.employee,
        "/Subject": f"Timesheet {timesheet.label}",
        "/Producer": PDF_PRODUCER,
    })
    with open(target, "wb") as f:
        writer.write(f)
    return len(reader.pages)


def export_pdf(timesheet: Timesheet, path: Path) -> Path:
    """Render a timesheet to PDF.

    Args:
        timesheet: Timesheet from build_timesheet().
        path: Output file (parent directories are created).

    Returns:
        Path to the PDF.

    Raises:
        ExportError: If rendering or verification fails. Nothing is left
                     at `path` in that case.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    partial = path.with_name(path.name + ".partial")

    try:
        _render(timesheet, partial)
        pages = _stamp_metadata(partial, path, timesheet)
        verify_pdf(path, timesheet.label)
    except ExportError:
        path.unlink(missing_ok=True)
        raise
    except Exception as e:
        path.unlink(missing_ok=True)
        raise ExportError(f"Could not export timesheet {timesheet.label} to {path}: {e}") from e
    finally:
        partial.unlink(missing_ok=True)

    logger.info(f"Exported {timesheet.label} to {path} ({pages} page(s))")
    return path


def verify_pdf(path: Path, expected_title: str) -> None:
    """Check that a PDF opens and carries the expected title.

    Raises:
        ExportError: If the file is unreadable, empty, or mislabeled.
    """
    try:
        reader = PyPDF2.PdfReader(str(path))
        page_count = len(reader.pages)
        title = reader.metadata.title if reader.metadata else None
    except (OSError, PdfReadError) as e:
        raise ExportError(f"Exported PDF is unreadable: {path}: {e}") from e

    if page_count == 0:
        raise ExportError(f"Exported PDF has no pages: {path}")
    if title != expected_title:
        raise ExportError(f"Exported PDF title {title!r} does not match {expected_title!r}")


def extract_text(path: Path) -> str:
    """Text content of a PDF, pages joined by newlines."""
    with open(path, "rb") as f:
        reader = PyPDF2.PdfReader(f)
        return "\n".join(page.extract_text() or "" for page in reader.pages)
