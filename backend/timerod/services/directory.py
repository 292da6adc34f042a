"""
Lookups over the organization directory (companies, areas, employees,
schedules, users) shared by the attendance engine and the CRUD routes.

Every helper raises a ValidationError when the referenced row is missing
or soft-deleted, so callers can chain them without extra checks.
"""
from sqlalchemy import func
from timerod.errors import ValidationError
from timerod.extensions import db
from timerod.models import Area, Company, Employee, Schedule, User


def get_active_employee(employee_id):
    employee = db.session.get(Employee, employee_id) if employee_id is not None else None
    if not employee or not employee.active:
        raise ValidationError("Employee not found or inactive")
    return employee


def require_company(company_id):
    company = db.session.get(Company, company_id) if company_id is not None else None
    if not company or not company.active:
        raise ValidationError("Company not found or inactive")
    return company


def require_area_in_company(area_id, company_id):
    area = db.session.get(Area, area_id) if area_id is not None else None
    if not area or not area.active or area.company_id != company_id:
        raise ValidationError("Area not found or does not belong to the company")
    return area


def require_user_in_company(user_id, company_id):
    user = db.session.get(User, user_id)
    if not user or not user.active or user.company_id != company_id:
        raise ValidationError("User not found or does not belong to the company")
    return user


def require_active_supervisor(user_id):
    user = db.session.get(User, user_id)
    if not user or not user.active:
        raise ValidationError("Supervisor not found or inactive")
    return user


def require_schedule(schedule_id):
    schedule = db.session.get(Schedule, schedule_id)
    if not schedule or not schedule.active:
        raise ValidationError("Schedule not found or inactive")
    return schedule


def email_taken(email, exclude_user_id=None):
    query = User.query.filter(func.lower(User.email) == email.lower())
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return db.session.query(query.exists()).scalar()


def tax_id_taken(tax_id, exclude_company_id=None):
    query = Company.query.filter(Company.tax_id == tax_id)
    if exclude_company_id is not None:
        query = query.filter(Company.id != exclude_company_id)
    return db.session.query(query.exists()).scalar()


def employee_number_taken(company_id, employee_number, exclude_employee_id=None):
    query = Employee.query.filter(
        Employee.company_id == company_id,
        Employee.employee_number == employee_number,
    )
    if exclude_employee_id is not None:
        query = query.filter(Employee.id != exclude_employee_id)
    return db.session.query(query.exists()).scalar()


def company_deactivation_blocker(company):
    if User.query.filter_by(company_id=company.id, active=True).first():
        return "Cannot delete a company with active users"
    if Area.query.filter_by(company_id=company.id, active=True).first():
        return "Cannot delete a company with active areas"
    return None


def area_deactivation_blocker(area):
    if Employee.query.filter_by(area_id=area.id, active=True).first():
        return "Cannot delete an area with active employees"
    return None


def apply_active_flag(entity, active, blocker=None):
    """
    Restores or soft deletes ``entity`` to match the ``active`` flag sent
    in an update. Deactivation runs the same dependents check as DELETE.
    """
    if active and not entity.active:
        entity.restore()
    elif not active and entity.active:
        reason = blocker(entity) if blocker else None
        if reason:
            raise ValidationError(reason)
        entity.soft_delete()
    return entity
