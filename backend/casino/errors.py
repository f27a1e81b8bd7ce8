from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """An error that maps directly onto an HTTP response."""

    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(ApiError):
    status_code = 404


class Forbidden(ApiError):
    status_code = 403


class Conflict(ApiError):
    status_code = 409


class InsufficientFunds(ApiError):
    status_code = 400


class LimitExceeded(ApiError):
    status_code = 400


def register_error_handlers(flask_app) -> None:
    from casino import db

    @flask_app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        # Discard any half-applied changes from the failed request
        db.session.rollback()
        flask_app.logger.info(f"[api-error] status={exc.status_code} error={exc.message}")
        return jsonify({'success': False, 'error': exc.message}), exc.status_code

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        errors = [
            {'path': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
            for err in exc.errors()
        ]
        return jsonify({'success': False, 'error': 'Validation Error', 'errors': errors}), 400

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return jsonify({'success': False, 'error': exc.description or exc.name}), exc.code
