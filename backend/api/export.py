"""Export and import endpoints for CSV and PDF."""

import logging
import io
from datetime import datetime, timedelta
from typing import Optional
from fastapi import APIRouter, File, HTTPException, Request, Query, UploadFile
from fastapi.responses import StreamingResponse
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from backend.config import settings
from backend.services import ActivityImporter, CsvCodec, DataProcessor, RecordStoreError
from backend.api.deps import get_session_data, get_store, raise_store_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/export", tags=["export"])


@router.get("/csv")
async def export_csv(request: Request):
    """
    Export all activities of the signed-in user to CSV.

    Returns:
        CSV file named with today's date
    """
    session = get_session_data(request)
    store = get_store(session)

    try:
        activities = await store.list_activities(session["user_id"])
    except RecordStoreError as e:
        raise_store_error("exporting activities", e)

    content = CsvCodec.export_csv(activities)
    filename = CsvCodec.export_filename()

    logger.info(f"Exported {len(activities)} activities to CSV")

    return StreamingResponse(
        iter([content]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/import")
async def import_csv(request: Request, file: UploadFile = File(...)):
    """
    Import activities from an uploaded CSV file.

    Rows are inserted one at a time; rows without a title or a valid date
    are skipped and failed inserts do not stop the batch.

    Returns:
        Counts and the per-row results
    """
    session = get_session_data(request)
    store = get_store(session)

    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Please check the CSV format: file is not UTF-8")

    result = await ActivityImporter.import_csv(store, session["user_id"], text)

    logger.info(f"Imported {result.inserted} activities from {file.filename}")
    return result.to_response()


@router.get("/pdf")
async def export_pdf(
    request: Request,
    days: int = Query(7, ge=1, le=365),
    category: Optional[list[str]] = Query(None),
):
    """
    Export a report of the last ``days`` days to PDF.

    Args:
        days: Length of the window
        category: Only include these categories (repeatable)

    Returns:
        PDF file
    """
    session = get_session_data(request)
    store = get_store(session)
    today = DataProcessor.today()

    try:
        activities = await store.list_activities(
            session["user_id"],
            since=today - timedelta(days=days),
            order_by="date",
            ascending=True,
        )
    except RecordStoreError as e:
        raise_store_error("building report", e)

    activities = DataProcessor.filter_activities(
        activities, category, fallback=settings.UNCATEGORIZED_LABEL
    )
    report = DataProcessor.build_report(activities, days, settings.UNCATEGORIZED_LABEL, today)
    summary = report.summary

    pdf_buffer = io.BytesIO()
    doc = SimpleDocTemplate(pdf_buffer, pagesize=A4)
    elements = []

    styles = getSampleStyleSheet()
    title_style = styles["Title"]
    heading_style = styles["Heading2"]
    normal_style = styles["Normal"]

    elements.append(Paragraph("Activity Report", title_style))
    elements.append(Spacer(1, 0.2 * inch))

    start_day = min(report.daily)
    date_text = f"Period: {start_day} to {today.isoformat()} ({days} days)"
    elements.append(Paragraph(date_text, normal_style))
    if category:
        elements.append(Paragraph(f"Categories: {', '.join(category)}", normal_style))
    elements.append(Spacer(1, 0.2 * inch))

    summary_text = f"""
    <b>Summary</b><br/>
    Total Activities: {summary.total_activities}<br/>
    Time Tracked: {summary.total_minutes // 60}h {summary.total_minutes % 60}m<br/>
    Categories: {summary.category_count}<br/>
    Top Category: {summary.top_category or "-"}<br/>
    Busiest Day: {summary.busiest_day.isoformat() if summary.busiest_day else "-"}
    """
    elements.append(Paragraph(summary_text, normal_style))
    elements.append(Spacer(1, 0.3 * inch))

    elements.append(Paragraph("Activities per Day", heading_style))
    daily_rows = [["Day", "Activities"]] + [
        [label, str(count)]
        for label, count in zip(report.daily_chart.labels, report.daily_chart.values)
    ]
    elements.append(_styled_table(daily_rows))
    elements.append(Spacer(1, 0.3 * inch))

    elements.append(Paragraph("Category Distribution", heading_style))
    if report.categories:
        category_rows = [["Category", "Activities"]] + [
            [name, str(count)] for name, count in report.categories.items()
        ]
        elements.append(_styled_table(category_rows))
    else:
        elements.append(Paragraph("No data available", normal_style))

    doc.build(elements)
    pdf_buffer.seek(0)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"activity_report_{timestamp}.pdf"

    logger.info(f"Exported report of {len(activities)} activities to PDF")

    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def _styled_table(rows: list[list[str]]) -> Table:
    table = Table(rows, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 10),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ("GRID", (0, 0), (-1, -1), 1, colors.black),
                ("FONTSIZE", (0, 1), (-1, -1), 9),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.lightgrey]),
            ]
        )
    )
    return table
