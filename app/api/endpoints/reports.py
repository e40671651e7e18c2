import logging
from typing import List, Annotated
from fastapi import APIRouter, HTTPException, status, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, func

from app.core import schemas, models
from app.core.database import get_db

router = APIRouter(prefix="/reports", tags=["Reports"])

db_dep = Annotated[AsyncSession, Depends(get_db)]


async def _get_report_or_404(report_id: int, db: AsyncSession) -> models.Report:
    query = select(models.Report).where(models.Report.id == report_id)
    result = await db.execute(query)
    report = result.scalars().first()

    if not report:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Report {report_id} not found")
    return report


# List saved reports, newest first
@router.get("", response_model=List[schemas.ReportResponse])
async def list_reports(db: db_dep):
    query = select(models.Report).order_by(
        desc(models.Report.created_at), desc(models.Report.id)
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{report_id}", response_model=schemas.ReportResponse)
async def get_report(report_id: int, db: db_dep):
    return await _get_report_or_404(report_id, db)


# Save a report
@router.post(
    "",
    response_model=schemas.ReportResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_report(report: schemas.ReportCreate, db: db_dep):
    try:
        new_report = models.Report(**report.model_dump())
        db.add(new_report)
        await db.commit()
        await db.refresh(new_report)  # Refresh to get a generated ID by DB
        return new_report
    except Exception as error:
        await db.rollback()  # Undo changes if something went wrong
        logging.error(f"Failed to save a report: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save report",
        )


# Update report details
@router.put("/{report_id}", response_model=schemas.ReportResponse)
async def update_report(
    report_id: int, changes: schemas.ReportUpdate, db: db_dep
):
    report = await _get_report_or_404(report_id, db)

    # Only touch the fields the caller actually sent
    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(report, key, value)
    report.updated_at = func.now()

    try:
        await db.commit()
        await db.refresh(report)
        return report
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to update report {report_id}: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Update failed"
        )


# Delete report
@router.delete("/{report_id}", response_model=schemas.ReportResponse)
async def delete_report(report_id: int, db: db_dep):
    report = await _get_report_or_404(report_id, db)
    deleted = schemas.ReportResponse.model_validate(report)

    try:
        await db.delete(report)
        await db.commit()
        return deleted
    except Exception as error:
        await db.rollback()
        logging.error(f"Failed to delete report {report_id}: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete report",
        )
