import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from taskboard.errors import error_response, register_error_handlers


def _register_jwt_handlers(jwt: JWTManager) -> None:
    # Keep flask-jwt-extended failures in the same body shape as every other error

    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response("Not authorized to access this route", 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response("Invalid token", 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response("Token expired", 401)


def create_app(config_object=None, database=None, email_service=None):
    load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"), override=False)

    app = Flask(__name__)
    app.config.from_object(config_object or "taskboard.config.Config")
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger("taskboard").setLevel(level)

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}}, supports_credentials=True)
    jwt = JWTManager(app)
    _register_jwt_handlers(jwt)
    register_error_handlers(app)

    from taskboard.services.email_service import init_app as init_email
    from taskboard.utils.db import init_app as init_db

    init_db(app, database)
    init_email(app, email_service)

    # Register blueprints
    from taskboard.routes.auth_routes import auth_bp
    from taskboard.routes.task_routes import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", service="Taskboard API"), 200

    return app
