import logging
import time

from flask import Flask

from .config import Settings, load_env_files
from .errors import register_error_handlers
from .mailer import SmtpMailer

def _configure_logging(app, level_name):
    # Under gunicorn, reuse its error log handlers so app logs land in the same stream
    gunicorn_logger = logging.getLogger("gunicorn.error")
    if gunicorn_logger.handlers:
        app.logger.handlers = gunicorn_logger.handlers
    app.logger.setLevel(getattr(logging, level_name.upper(), logging.INFO))

def create_app(settings=None, mailer=None, clock=None):
    if settings is None:
        # Load .env early
        load_env_files()
        settings = Settings.from_env()

    app = Flask(__name__)
    _configure_logging(app, settings.log_level)

    app.extensions["regportal.settings"] = settings
    app.extensions["regportal.mailer"] = mailer or SmtpMailer(settings)
    app.extensions["regportal.clock"] = clock or time.time

    register_error_handlers(app)

    # Blueprints
    from .api import bp as api_bp
    from .routes import bp as web_bp
    app.register_blueprint(api_bp)    # /api/send-otp, /api/submit-form
    app.register_blueprint(web_bp)    # /healthz, /readyz

    if not settings.otp_secret:
        app.logger.error("OTP_SECRET is not set; OTP endpoints will fail until it is configured")

    return app
