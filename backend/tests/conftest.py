from datetime import time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from timerod import create_app
from timerod.config import TestingConfig
from timerod.extensions import db
from timerod.models import Area, Company, Employee, Schedule, User, UserRole


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        AUDIT_LOG_FILE = str(tmp_path / "audit.log")

    app = create_app(Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _user(company, email, role, password="secret123", full_name=None):
    user = User(company_id=company.id, email=email, role=role, full_name=full_name or email.split("@")[0])
    user.set_password(password)
    return user


@pytest.fixture
def seed(app):
    """Two companies; Acme has a schedule, an area, staff users and two employees."""
    acme = Company(name="Acme Industrial", tax_id="ACM010101AB1")
    globex = Company(name="Globex", tax_id="GLO020202CD2")
    db.session.add_all([acme, globex])
    db.session.commit()

    day_shift = Schedule(name="Day shift", entry_time=time(9, 0), exit_time=time(18, 0), tolerance_minutes=10)
    early_shift = Schedule(name="Early shift", entry_time=time(7, 0), exit_time=time(15, 0), tolerance_minutes=0)
    db.session.add_all([day_shift, early_shift])
    db.session.commit()

    admin = _user(acme, "admin@acme.test", UserRole.ADMIN, full_name="Ana Admin")
    hr = _user(acme, "hr@acme.test", UserRole.HR)
    supervisor = _user(acme, "boss@acme.test", UserRole.SUPERVISOR)
    staff = _user(acme, "staff@acme.test", UserRole.EMPLOYEE)
    outsider = _user(globex, "staff@globex.test", UserRole.EMPLOYEE)
    db.session.add_all([admin, hr, supervisor, staff, outsider])
    db.session.commit()

    plant = Area(company_id=acme.id, name="Plant", supervisor_id=supervisor.id, schedule_id=day_shift.id)
    warehouse = Area(company_id=globex.id, name="Warehouse")
    db.session.add_all([plant, warehouse])
    db.session.commit()

    maria = Employee(company_id=acme.id, area_id=plant.id, employee_number="E-001", first_name="Maria",
                     last_name="Lopez", daily_salary=Decimal("450.00"))
    pedro = Employee(company_id=acme.id, area_id=plant.id, employee_number="E-002", first_name="Pedro",
                     last_name="Garcia", daily_salary=Decimal("450.00"), schedule_id=early_shift.id)
    luis = Employee(company_id=globex.id, area_id=warehouse.id, employee_number="G-001", first_name="Luis",
                    last_name="Perez", daily_salary=Decimal("380.00"))
    db.session.add_all([maria, pedro, luis])
    db.session.commit()

    return SimpleNamespace(
        company_id=acme.id,
        other_company_id=globex.id,
        area_id=plant.id,
        other_area_id=warehouse.id,
        schedule_id=day_shift.id,
        early_schedule_id=early_shift.id,
        admin_id=admin.id,
        supervisor_id=supervisor.id,
        staff_id=staff.id,
        employee_id=maria.id,
        second_employee_id=pedro.id,
        other_employee_id=luis.id,
    )


def login(client, email, password="secret123"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def admin_headers(client, seed):
    return login(client, "admin@acme.test")


@pytest.fixture
def hr_headers(client, seed):
    return login(client, "hr@acme.test")


@pytest.fixture
def staff_headers(client, seed):
    return login(client, "staff@acme.test")


@pytest.fixture
def outsider_headers(client, seed):
    return login(client, "staff@globex.test")
