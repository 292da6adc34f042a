from timerod import create_app
from timerod.extensions import db
from timerod.seed import seed_data
from flask.cli import with_appcontext
from flask_migrate import upgrade, migrate, init
import click

app = create_app()


@app.cli.command("db-init")
@with_appcontext
def db_init():
    """Initializes migrations directory"""
    init()


@app.cli.command("db-migrate")
@click.option("-m", "--message", default=None, help="Revision message")
@with_appcontext
def db_migrate(message):
    """Creates a new migration"""
    migrate(message=message)


@app.cli.command("db-upgrade")
@with_appcontext
def db_upgrade():
    """Applies migrations"""
    upgrade()


@app.cli.command("create-tables")
@with_appcontext
def create_tables():
    """Creates missing tables without migrations (development only)"""
    db.create_all()
    click.echo("Tables created")


@app.cli.command("seed")
@with_appcontext
def seed():
    """Loads the demo company, schedules, users and employees"""
    seed_data()
    click.echo("Seed complete")
