from .base_route import base_bp
from .auth import auth_bp
from .companies import companies_bp
from .areas import areas_bp
from .employees import employees_bp
from .schedules import schedules_bp
from .users import users_bp
from .attendance import attendance_bp


def register_routes(app):
    app.register_blueprint(base_bp)
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(companies_bp, url_prefix='/api/empresas')
    app.register_blueprint(areas_bp, url_prefix='/api/areas')
    app.register_blueprint(employees_bp, url_prefix='/api/empleados')
    app.register_blueprint(schedules_bp, url_prefix='/api/horarios')
    app.register_blueprint(users_bp, url_prefix='/api/usuarios')
    app.register_blueprint(attendance_bp, url_prefix='/api/asistencias')
