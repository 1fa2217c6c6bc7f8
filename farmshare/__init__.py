import os

import click
from dotenv import load_dotenv
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from farmshare.config import config_by_env
from farmshare.errors import register_error_handlers
from farmshare.extensions import cache, db, limiter, login_manager, migrate
from farmshare.models import Farmer
from farmshare.routes.api.v1 import api_v1_bp
from farmshare.services import BookingService, EquipmentService


@login_manager.user_loader
def load_farmer(farmer_id):
    return db.session.get(Farmer, int(farmer_id))


def create_app(config_name=None):
    load_dotenv()
    env = config_name or os.getenv("FLASK_ENV", "development")

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_by_env.get(env, config_by_env["development"]))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////") and db_uri != "sqlite:///:memory:":
        relative_path = db_uri.replace("sqlite:///", "", 1)
        absolute_path = os.path.join(project_root, relative_path)
        os.makedirs(os.path.dirname(absolute_path), exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{absolute_path}"

    os.makedirs(app.instance_path, exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)
    limiter.init_app(app)
    login_manager.init_app(app)
    _init_sentry(app)

    register_error_handlers(app)
    _register_cli(app)

    app.register_blueprint(api_v1_bp, url_prefix="/api/v1")

    @app.get("/health")
    @limiter.exempt
    def health():
        return "OK"

    if not app.config.get("TESTING"):
        with app.app_context():
            _ensure_schema(app)

    return app


def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.05")),
            environment=os.getenv("FLASK_ENV", "production"),
        )
        app.logger.info("Sentry initialized.")
    except Exception as exc:
        app.logger.warning("Sentry initialization failed: %s", exc)


def _ensure_schema(app):
    """Create missing tables and, when enabled, load the sample catalog into an empty database."""
    db.create_all()
    if app.config.get("SEED_SAMPLE_EQUIPMENT"):
        inserted = EquipmentService.seed_sample_equipment()
        if inserted:
            app.logger.info("Inserted %s sample equipment items.", inserted)


def _register_cli(app):
    @app.cli.command("seed-equipment")
    def seed_equipment_command():
        """Insert the sample equipment catalog into an empty database."""
        db.create_all()
        inserted = EquipmentService.seed_sample_equipment()
        click.echo(f"Inserted {inserted} equipment items.")

    @app.cli.command("check-ledger")
    def check_ledger_command():
        """Report equipment whose status disagrees with its active bookings."""
        violations = BookingService.ledger_violations()
        if violations:
            click.echo(f"Inconsistent equipment ids: {', '.join(str(v) for v in violations)}")
            raise SystemExit(1)
        click.echo("Availability ledger is consistent.")
