# regportal/errors.py
# Request-scoped error kinds and their JSON rendering.

from flask import jsonify
from werkzeug.exceptions import HTTPException

class PortalError(Exception):
    status_code = 500
    message = "Internal server error."

    def __init__(self, detail=None, message=None):
        super().__init__(detail or message or self.message)
        if message:
            self.message = message

class BadRequest(PortalError):
    status_code = 400
    message = "Bad request."

class ConfigurationError(PortalError):
    status_code = 500
    message = "Server configuration error. Email service not set up."

class AuthenticationFailure(PortalError):
    status_code = 401
    message = "Invalid or expired OTP. Please try again."

class TransportFailure(PortalError):
    status_code = 502
    message = "Failed to send email. Please try again later."

def register_error_handlers(app):
    @app.errorhandler(BadRequest)
    @app.errorhandler(AuthenticationFailure)
    def _client_error(e):
        return jsonify(error=e.message), e.status_code

    @app.errorhandler(ConfigurationError)
    def _config_error(e):
        # Detail names the missing setting; the caller only sees the generic message
        app.logger.error("Configuration error: %s", e)
        return jsonify(error=e.message), e.status_code

    @app.errorhandler(TransportFailure)
    def _transport_error(e):
        app.logger.error("Mail transport failure: %s", e, exc_info=e.__cause__ or e)
        return jsonify(error=e.message), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e):
        return jsonify(error=e.name), e.code
