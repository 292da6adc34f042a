"""
Attendance engine: clock in / clock out state transitions, manual edits
and queries over attendance records.

Every operation takes an explicit ``now`` (naive UTC). Routes pass the
server clock; tests pass fixed instants. "Today" is ``now.date()``.
"""
from datetime import datetime, timedelta
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from timerod.errors import ConflictError, NotFoundError, ValidationError
from timerod.extensions import db
from timerod.models import AttendanceKind, AttendanceRecord, Employee, parse_enum, utcnow
from timerod.services.directory import get_active_employee

NOTES_SEPARATOR = " | "


def merge_notes(existing, incoming):
    existing = (existing or "").strip()
    incoming = (incoming or "").strip()
    if existing and incoming:
        return f"{existing}{NOTES_SEPARATOR}{incoming}"
    return incoming or existing or None


def find_for_day(employee_id, day):
    return AttendanceRecord.query.filter_by(employee_id=employee_id, date=day).first()


def resolve_schedule(employee):
    """The employee's own schedule wins over the one assigned to its area."""
    if employee.schedule is not None and employee.schedule.active:
        return employee.schedule
    area = employee.area
    if area is not None and area.schedule is not None and area.schedule.active:
        return area.schedule
    return None


def evaluate_late_arrival(record, schedule):
    if schedule is None or record.entry_time is None:
        record.late_arrival = False
        record.late_minutes = 0
        return record

    scheduled_entry = datetime.combine(record.date, schedule.entry_time)
    deadline = scheduled_entry + timedelta(minutes=schedule.tolerance_minutes or 0)

    if record.entry_time > deadline:
        record.late_arrival = True
        record.late_minutes = int((record.entry_time - scheduled_entry).total_seconds() // 60)
    else:
        record.late_arrival = False
        record.late_minutes = 0
    return record


def _commit_or_conflict(message, employee_id, day):
    try:
        db.session.commit()
    except IntegrityError:
        # Another request inserted the (employee, day) row between our read and write
        db.session.rollback()
        current_app.logger.warning("Concurrent attendance insert for employee %s on %s", employee_id, day)
        raise ConflictError(message, find_for_day(employee_id, day))
    except StaleDataError:
        db.session.rollback()
        current_app.logger.warning("Stale attendance write for employee %s on %s", employee_id, day)
        raise ConflictError(message, find_for_day(employee_id, day))


def clock_in(employee_id, notes=None, now=None):
    now = now or utcnow()
    today = now.date()
    employee = get_active_employee(employee_id)

    record = find_for_day(employee.id, today)
    if record is not None and record.entry_time is not None:
        raise ConflictError("Entry already registered today", record)

    is_new = record is None
    if is_new:
        record = AttendanceRecord(
            employee_id=employee.id,
            date=today,
            kind=AttendanceKind.NORMAL,
            approved=True,
            late_arrival=False,
            late_minutes=0,
        )

    record.entry_time = now
    record.notes = notes
    record.recompute_worked_hours()

    if current_app.config.get("LATE_ARRIVAL_TRACKING"):
        evaluate_late_arrival(record, resolve_schedule(employee))

    # Added last so schedule lookups above never autoflush the new row
    if is_new:
        db.session.add(record)

    _commit_or_conflict("Entry already registered today", employee.id, today)
    return record


def clock_out(employee_id, notes=None, now=None):
    now = now or utcnow()
    today = now.date()

    record = find_for_day(employee_id, today)
    if record is None:
        raise ValidationError("No entry record for today")
    if record.entry_time is None:
        raise ValidationError("Entry time not recorded")
    if record.exit_time is not None:
        raise ConflictError("Exit already registered today", record)

    record.exit_time = now
    record.notes = merge_notes(record.notes, notes)
    record.recompute_worked_hours()

    _commit_or_conflict("Exit already registered today", employee_id, today)
    return record


def list_records(employee_id=None, date_from=None, date_to=None, company_ids=None):
    query = AttendanceRecord.query

    if employee_id is not None:
        query = query.filter(AttendanceRecord.employee_id == employee_id)
    if date_from is not None:
        query = query.filter(AttendanceRecord.date >= date_from)
    if date_to is not None:
        query = query.filter(AttendanceRecord.date <= date_to)
    if company_ids is not None:
        query = query.join(Employee).filter(Employee.company_id.in_(company_ids))

    return query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.entry_time.desc()).all()


def get_record(record_id):
    record = db.session.get(AttendanceRecord, record_id)
    if record is None:
        raise NotFoundError("Attendance record not found")
    return record


def update_record(record_id, entry_time=None, exit_time=None, kind=None, notes=None,
                  approved=True, late_arrival=False, late_minutes=None, expected_version=None):
    """
    Whole-record overwrite of the editable fields. Omitted values fall back
    to their defaults rather than keeping what was stored.
    """
    record = get_record(record_id)

    if expected_version is not None and expected_version != record.version:
        raise ConflictError("Record was modified by another request", record)

    resolved_kind = AttendanceKind.NORMAL
    if kind is not None:
        resolved_kind = parse_enum(AttendanceKind, kind)
        if resolved_kind is None:
            raise ValidationError(f"Invalid attendance kind: {kind}")

    if exit_time is not None and entry_time is None:
        raise ValidationError("Exit time requires an entry time")
    if exit_time is not None and exit_time < entry_time:
        raise ValidationError("Exit time cannot be earlier than entry time")
    if late_minutes is not None and late_minutes < 0:
        raise ValidationError("lateMinutes cannot be negative")

    record.entry_time = entry_time
    record.exit_time = exit_time
    record.kind = resolved_kind
    record.notes = notes
    record.approved = approved
    record.late_arrival = late_arrival
    record.late_minutes = late_minutes
    record.recompute_worked_hours()

    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise ConflictError("Record was modified by another request", db.session.get(AttendanceRecord, record_id))
    return record


def delete_record(record_id):
    record = get_record(record_id)
    db.session.delete(record)
    db.session.commit()
    return record_id
