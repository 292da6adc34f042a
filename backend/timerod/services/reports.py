from datetime import timedelta
from decimal import Decimal
from flask import current_app
from timerod.models import AttendanceRecord, Employee, utcnow


def build_attendance_report(date_from=None, date_to=None, company_ids=None, today=None):
    """
    Aggregate attendance over [date_from, date_to], both inclusive.

    Missing bounds default to the last REPORT_DEFAULT_DAYS days ending today.
    Records without worked hours count as zero, both in the total and in the
    per-record average. An empty range yields zeros, never an error.
    """
    today = today or utcnow().date()
    date_to = date_to or today
    date_from = date_from or today - timedelta(days=current_app.config.get("REPORT_DEFAULT_DAYS", 30))

    query = AttendanceRecord.query.filter(
        AttendanceRecord.date >= date_from,
        AttendanceRecord.date <= date_to,
    )
    if company_ids is not None:
        query = query.join(Employee).filter(Employee.company_id.in_(company_ids))

    records = query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.entry_time.desc()).all()

    total_hours = sum((r.worked_hours or Decimal(0) for r in records), Decimal(0))
    average = total_hours / len(records) if records else Decimal(0)

    return {
        "dateFrom": date_from.isoformat(),
        "dateTo": date_to.isoformat(),
        "totalRecords": len(records),
        "totalWorkedHours": float(total_hours),
        "averageHoursPerDay": float(average),
        "lateArrivals": sum(1 for r in records if r.late_arrival),
        "records": [r.to_report_dict() for r in records],
    }
