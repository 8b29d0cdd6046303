"""Render report rows as CSV, Excel or PDF documents."""

import io
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional

import pandas as pd

from .models import ExportFormat

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.XLSX: (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
    ExportFormat.PDF: "application/pdf",
}

PDF_STYLE = """
body { font-family: sans-serif; font-size: 10px; }
h1 { font-size: 16px; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #999; padding: 3px 5px; text-align: left; }
th { background: #eee; }
"""


class RenderedExport(NamedTuple):
    content: bytes
    media_type: str
    file_name: str


def to_frame(rows: List[Dict], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Build a DataFrame, turning Decimals into floats for the writers."""
    frame = pd.DataFrame(rows, columns=columns)
    for column in frame.columns:
        if frame[column].map(lambda v: isinstance(v, Decimal)).any():
            frame[column] = frame[column].map(
                lambda v: float(v) if isinstance(v, Decimal) else v
            )
    return frame


def _pdf(title: str, frame: pd.DataFrame) -> bytes:
    try:
        from weasyprint import HTML
    except ImportError as e:
        raise RuntimeError(
            "PDF export requires weasyprint; install the 'pdf' extra"
        ) from e

    html = (
        f"<html><head><style>{PDF_STYLE}</style></head><body>"
        f"<h1>{title}</h1><p>Generated {date.today().isoformat()}</p>"
        f"{frame.to_html(index=False, na_rep='')}</body></html>"
    )
    return HTML(string=html).write_pdf()


def render_export(
    title: str,
    rows: List[Dict],
    export_format: ExportFormat,
    base_name: str,
    columns: Optional[List[str]] = None,
) -> RenderedExport:
    """Serialize export rows in the requested format.

    Raises:
        RuntimeError: If the PDF renderer is not installed.
    """
    frame = to_frame(rows, columns)
    file_name = f"{base_name}.{export_format.value}"

    if export_format == ExportFormat.CSV:
        content = frame.to_csv(index=False).encode("utf-8")
    elif export_format == ExportFormat.XLSX:
        buffer = io.BytesIO()
        frame.to_excel(buffer, index=False, sheet_name=title[:31], engine="openpyxl")
        content = buffer.getvalue()
    else:
        content = _pdf(title, frame)

    logger.info(f"Rendered {file_name} ({len(rows)} rows, {len(content)} bytes)")
    return RenderedExport(content, MEDIA_TYPES[export_format], file_name)
