import os
from datetime import date, time
from decimal import Decimal
from flask import current_app
from timerod.extensions import db
from timerod.models import Company, Area, Employee, Schedule, User, UserRole


def seed_data():
    """Demo company with one schedule, two areas, an admin and a few employees. Idempotent."""
    if Company.query.filter_by(tax_id="DEM010101AB1").first():
        current_app.logger.info("Seed data already present, skipping")
        return

    admin_password = os.getenv("ADMIN_PASSWORD", "admin123")

    company = Company(name="Demo Manufacturing SA de CV", tax_id="DEM010101AB1", address="Av. Industria 100")
    db.session.add(company)
    db.session.commit()

    office_hours = Schedule(name="Office 09-18", entry_time=time(9, 0), exit_time=time(18, 0), tolerance_minutes=10)
    plant_shift = Schedule(name="Plant 07-16", entry_time=time(7, 0), exit_time=time(16, 0), tolerance_minutes=5)
    db.session.add_all([office_hours, plant_shift])
    db.session.commit()

    admin = User(company_id=company.id, email="admin@timerod.local", full_name="System Administrator", role=UserRole.ADMIN)
    admin.set_password(admin_password)
    hr_user = User(company_id=company.id, email="rh@timerod.local", full_name="Human Resources", role=UserRole.HR)
    hr_user.set_password("rh123456")
    supervisor = User(company_id=company.id, email="supervisor@timerod.local", full_name="Plant Supervisor",
                      role=UserRole.SUPERVISOR)
    supervisor.set_password("super123")
    db.session.add_all([admin, hr_user, supervisor])
    db.session.commit()

    offices = Area(company_id=company.id, name="Administration", schedule_id=office_hours.id)
    plant = Area(company_id=company.id, name="Production", supervisor_id=supervisor.id, schedule_id=plant_shift.id)
    db.session.add_all([offices, plant])
    db.session.commit()

    employees = [
        Employee(company_id=company.id, area_id=offices.id, employee_number="A-001", first_name="Laura",
                 last_name="Martinez", hire_date=date(2021, 3, 1), daily_salary=Decimal("650.00"), position="Accountant"),
        Employee(company_id=company.id, area_id=plant.id, employee_number="P-001", first_name="Jorge",
                 last_name="Hernandez", hire_date=date(2019, 8, 15), daily_salary=Decimal("420.00"), position="Operator"),
        Employee(company_id=company.id, area_id=plant.id, employee_number="P-002", first_name="Sofia",
                 last_name="Ramirez", hire_date=date(2022, 1, 10), daily_salary=Decimal("420.00"), position="Operator",
                 schedule_id=office_hours.id),
    ]
    db.session.add_all(employees)
    db.session.commit()

    current_app.logger.info("Seeded company %s with %d employees", company.tax_id, len(employees))
