# regportal/routes.py
from flask import Blueprint, current_app, jsonify

from .errors import ConfigurationError

bp = Blueprint("web", __name__)

@bp.get("/healthz")
def healthz():
    return jsonify(status="ok")

@bp.get("/readyz")
def readyz():
    # Not ready until both endpoints could actually serve: mail credentials and OTP secret
    settings = current_app.extensions["regportal.settings"]
    try:
        settings.require_mail()
        settings.require_secret()
    except ConfigurationError as e:
        current_app.logger.warning("Not ready: %s", e)
        return jsonify(status="unconfigured"), 503
    return jsonify(status="ready")
