from http import HTTPStatus

from flask import current_app, jsonify


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, errors=None, details=None):
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.details = details

    def to_dict(self):
        body = {
            "code": self.status_code,
            "status": HTTPStatus(self.status_code).phrase,
            "message": self.message,
        }
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class StoreError(ApiError):
    status_code = 500

    def __init__(self, message="Internal Server Error", errors=None, details=None):
        super().__init__(message, errors=errors, details=details)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        body = error.to_dict()
        # Driver text is only echoed back for trusted deployments
        if error.details and current_app.config.get("EXPOSE_ERROR_DETAILS"):
            body["details"] = error.details
        return jsonify(body), error.status_code
