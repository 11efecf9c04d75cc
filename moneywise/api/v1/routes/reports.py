# moneywise/api/v1/routes/reports.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from datetime import datetime
import logging
import uuid

from moneywise.schemas.report import (
    ReportEmailRequest,
    ReportEmailResult,
    ReportRead,
    ReportRequest,
    ReportWithData,
)
from moneywise.crud.report import (
    complete_report,
    create_pending_report,
    delete_report,
    get_report_by_id,
    get_reports_for_user,
    load_report_snapshot,
    mark_report_failed,
)
from moneywise.core.database import get_async_session
from moneywise.core.auth import User
from moneywise.api.deps import get_current_user
from moneywise.utils.mailer import send_report_email
from moneywise.utils.reports import assemble_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("", response_model=List[ReportRead])
async def read_reports(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_reports_for_user(user.id, db)

@router.post("/generate", response_model=ReportWithData, status_code=status.HTTP_201_CREATED)
async def generate_report(
    report_in: ReportRequest,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Assemble a financial report for the requested period and store it.

    The report row is created as ``pending`` and switched to ``completed``
    once the payload has been assembled, or to ``failed`` if assembly breaks.
    """
    name = report_in.name or (
        f"{report_in.type.capitalize()} report "
        f"{report_in.period_start.isoformat()} - {report_in.period_end.isoformat()}"
    )
    report = await create_pending_report(
        user.id, name, report_in.type, report_in.period_start, report_in.period_end, db
    )

    now = datetime.now()
    try:
        snapshot = await load_report_snapshot(
            user.id, report_in.period_start, report_in.period_end, now.date(), db=db
        )
        payload = assemble_report(
            user.id,
            report_in.period_start,
            report_in.period_end,
            report_type=report_in.type,
            now=now,
            **snapshot,
        )
    except Exception as e:
        logger.error(f"❌ Report {report.id} failed: {str(e)}")
        await db.rollback()
        await mark_report_failed(report, db)
        raise

    report = await complete_report(report, payload, db)
    logger.info(f"✅ Report {report.id} generated for {user.email}")
    return ReportWithData(report=ReportRead.model_validate(report), data=payload)

@router.get("/{report_id}", response_model=ReportWithData)
async def read_report(
    report_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    report = await get_report_by_id(report_id, user.id, db)
    if not report:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Report not found")
    return ReportWithData(report=ReportRead.model_validate(report), data=report.payload)

@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report_endpoint(
    report_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    report = await get_report_by_id(report_id, user.id, db)
    if not report:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Report not found")
    await delete_report(report, db)
    return None

@router.post("/{report_id}/email", response_model=ReportEmailResult)
async def email_report(
    report_id: uuid.UUID,
    email_in: ReportEmailRequest,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    report = await get_report_by_id(report_id, user.id, db)
    if not report:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Report not found")
    if report.status != "completed" or not report.payload:
        raise HTTPException(status.HTTP_409_CONFLICT, detail="Report has not been generated yet")

    recipient_name = user.full_name or user.email.split("@")[0]
    sent = await send_report_email(email_in.email, recipient_name, report.payload)
    if not sent:
        return ReportEmailResult(success=False, message="Email could not be sent")
    return ReportEmailResult(success=True, message=f"Report sent to {email_in.email}")
