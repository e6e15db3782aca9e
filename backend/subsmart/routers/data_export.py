import io

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile
from fastapi.responses import StreamingResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from subsmart.db import get_db
from subsmart.models.subscription import Subscription
from subsmart.schemas.data_export import ExportFormat, ImportResult
from subsmart.services.csv_excel import (
    ImportFileError,
    export_subscriptions_csv,
    export_subscriptions_xlsx,
    import_subscriptions_from_file,
)

router = APIRouter(prefix="/data", tags=["data-export"])


@router.get("/export/subscriptions")
async def export_subscriptions(
    format: ExportFormat = Query(default="csv"),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Subscription).order_by(Subscription.name))
    subs = result.scalars().all()

    if format == "xlsx":
        content = export_subscriptions_xlsx(subs)
        return StreamingResponse(
            io.BytesIO(content),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": "attachment; filename=subscriptions.xlsx"},
        )
    content = export_subscriptions_csv(subs)
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8-sig")),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=subscriptions.csv"},
    )


@router.post("/import/subscriptions", response_model=ImportResult)
async def import_subscriptions(
    file: UploadFile,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await import_subscriptions_from_file(file, db)
    except ImportFileError as e:
        raise HTTPException(status_code=422, detail=str(e))
