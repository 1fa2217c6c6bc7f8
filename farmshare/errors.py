from flask import jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from farmshare.extensions import db


class AppError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class NotAvailable(AppError):
    status_code = 400


class InvalidTransition(AppError):
    status_code = 400


class NotFound(AppError):
    status_code = 404


class StorageError(AppError):
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err):
        if err.status_code >= 500:
            app.logger.error("Request failed: %s", err.message)
        return jsonify({"error": err.message}), err.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(_err):
        db.session.rollback()
        app.logger.warning("Database integrity error")
        return jsonify({"error": "Conflict. Resource already exists."}), 409

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(_err):
        db.session.rollback()
        app.logger.exception("Database error")
        return jsonify({"error": "Database error"}), 500

    @app.errorhandler(400)
    def bad_request(_err):
        return jsonify({"error": "Bad request"}), 400

    @app.errorhandler(401)
    def unauthorized(_err):
        return jsonify({"error": "Unauthorized"}), 401

    @app.errorhandler(404)
    def not_found(_err):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(429)
    def too_many_requests(_err):
        return jsonify({"error": "Too many requests"}), 429

    @app.errorhandler(500)
    def server_error(_err):
        app.logger.exception("Internal server error")
        return jsonify({"error": "Internal server error"}), 500
