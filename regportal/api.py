# regportal/api.py
# Issue-code and verify-and-submit endpoints. Both are stateless: the second
# request recomputes the code the first one mailed.

import re
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, render_template, request

from .errors import AuthenticationFailure, BadRequest, TransportFailure
from .otp import code_for_now, verify_code

bp = Blueprint("api", __name__, url_prefix="/api")

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
OTP_SUBJECT = "Your OTP for Entity Registration"

REQUIRED_FIELDS = (
    "entityName", "website", "sebiRegistrationNo", "address", "city", "state",
    "country", "contactPerson", "designation", "emailId", "mobile", "otp",
)

def _settings():
    return current_app.extensions["regportal.settings"]

def _mailer():
    return current_app.extensions["regportal.mailer"]

def _now() -> int:
    return int(current_app.extensions["regportal.clock"]())

def _payload() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()

def _field(data, name):
    """Stripped string value of ``name``; "" when absent, None when malformed.

    Only JSON strings are accepted, and they must encode as UTF-8 (lone
    surrogates from JSON escapes do not).
    """
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        return None
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return value.strip()

def _valid_email(value) -> bool:
    return isinstance(value, str) and bool(value) and EMAIL_RE.search(value) is not None

@bp.post("/send-otp")
def send_otp():
    data = _payload()
    email = _field(data, "email")
    if not _valid_email(email):
        raise BadRequest(message="Valid email is required.")

    settings = _settings()
    settings.require_mail()
    settings.require_secret()

    code = code_for_now(email, settings.otp_secret, now=_now(),
                        window_seconds=settings.otp_window_seconds)
    minutes = max(1, settings.otp_window_seconds // 60)
    html = render_template("email/otp.html", otp=code, minutes=minutes)
    text = f"Your OTP for Entity Registration is {code}. It is valid for {minutes} minutes."
    try:
        _mailer().send(email, OTP_SUBJECT, html, text)
    except TransportFailure as e:
        raise TransportFailure(str(e), message="Failed to send OTP email. Please try again later.") from e

    current_app.logger.info("OTP sent to %s", email)
    return jsonify(message="OTP sent successfully!")

@bp.post("/submit-form")
def submit_form():
    data = _payload()
    form = {}
    for name in REQUIRED_FIELDS:
        form[name] = _field(data, name)
        if form[name] is None:
            raise BadRequest(message=f"Invalid value for field: {name}")
        if not form[name]:
            raise BadRequest(message=f"Missing required field: {name}")

    email = form["emailId"]
    if not _valid_email(email):
        raise BadRequest(message="Invalid email format.")

    settings = _settings()
    settings.require_mail()
    settings.require_secret()

    ok = verify_code(email, settings.otp_secret, form["otp"], now=_now(),
                     window_seconds=settings.otp_window_seconds,
                     tolerance_windows=settings.otp_tolerance_windows)
    if not ok:
        current_app.logger.warning("OTP rejected for %s", email)
        raise AuthenticationFailure()

    submitted_at = datetime.fromtimestamp(_now(), tz=timezone.utc)
    html = render_template("email/submission.html", form=form,
                           submitted_at=submitted_at.strftime("%Y-%m-%d %H:%M:%S UTC"))
    subject = f"New Entity Registration: {form['entityName']}"
    try:
        _mailer().send(settings.target_email, subject, html)
    except TransportFailure as e:
        raise TransportFailure(str(e), message="Failed to send form details email. Please try again later.") from e

    current_app.logger.info("Registration for %s forwarded to %s", email, settings.target_email)
    return jsonify(message="Form submitted and email sent successfully!")
