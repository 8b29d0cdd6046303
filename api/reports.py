"""Register exports as CSV, Excel or PDF downloads."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from nexus.db import NexusDatabase
from nexus.db.reports import EXPORTS
from nexus.exports import render_export
from nexus.models import ExportFormat

from .dependencies import get_db, require_company
from .responses import ApiError, bad_request, server_error

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/reports",
    tags=["reports"],
    dependencies=[Depends(require_company)],
)


@router.get("/{export}")
async def export_report(
    company_id: int,
    export: str,
    format: ExportFormat = Query(ExportFormat.CSV),
    declaration_id: Optional[int] = Query(
        None, description="Required for dividend_distributions"
    ),
    db: NexusDatabase = Depends(get_db),
):
    """Download one company register in the requested format."""
    if export not in EXPORTS:
        raise ApiError(
            404,
            f"Unknown report '{export}'. Available: {', '.join(EXPORTS)}",
            code="NOT_FOUND",
        )
    try:
        title, columns, rows = db.reports.export_rows(
            company_id, export, declaration_id
        )
        rendered = render_export(
            title,
            rows,
            format,
            f"{export}_{company_id}_{date.today().isoformat()}",
            columns=columns,
        )
        return Response(
            content=rendered.content,
            media_type=rendered.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{rendered.file_name}"'
            },
        )
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except RuntimeError as e:
        logger.error(f"Export renderer unavailable: {e}")
        raise ApiError(501, str(e), code="EXPORT_UNAVAILABLE")
    except Exception as e:
        logger.error(f"Error exporting {export} for company {company_id}: {e}")
        raise server_error(e)
