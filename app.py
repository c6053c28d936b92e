import logging
import os
from datetime import timedelta

from flask import Flask
from flask_smorest import Api
from flask_jwt_extended import JWTManager

from admin import setup_admin
from blocklist import BLOCKLIST
from db import db
from errors import register_error_handlers
from resources.user import blp as UserBlueprint
from resources.task import blp as TaskBlueprint
from resources.assignment import blp as AssignmentBlueprint
from resources.notifications import blp as NotificationBlueprint
from resources.feedback import blp as FeedbackBlueprint
from resources.event import blp as EventBlueprint


def create_app(db_url=None):
    app = Flask(__name__)

    # Configuration
    app.config["PROPAGATE_EXCEPTIONS"] = True
    app.config["API_TITLE"] = "Volunteer Hub REST API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.3"
    app.config["OPENAPI_URL_PREFIX"] = "/"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/swagger-ui"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"
    app.config["SQLALCHEMY_DATABASE_URI"] = db_url or os.getenv("DATABASE_URI", "sqlite:///data.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "volunteer-hub-dev")
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "volunteer-hub-dev-jwt")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=14)
    app.config["EXPOSE_ERROR_DETAILS"] = os.getenv("EXPOSE_ERROR_DETAILS", "1") == "1"
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO")

    logging.basicConfig(level=app.config["LOG_LEVEL"])

    jwt = JWTManager(app)

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return {"message": "Token Expired"}, 401

    @jwt.token_in_blocklist_loader
    def check_if_token_in_blocklist(jwt_header, jwt_payload):
        return jwt_payload["jti"] in BLOCKLIST

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return {"message": "The token has been revoked"}, 401

    db.init_app(app)

    api = Api(app)

    # Tables are created lazily on the first request
    initialized = False

    @app.before_request
    def create_tables():
        nonlocal initialized
        if not initialized:
            db.create_all()
            initialized = True

    api.register_blueprint(UserBlueprint)
    api.register_blueprint(TaskBlueprint)
    api.register_blueprint(AssignmentBlueprint)
    api.register_blueprint(NotificationBlueprint)
    api.register_blueprint(FeedbackBlueprint)
    api.register_blueprint(EventBlueprint)

    register_error_handlers(app)
    setup_admin(app)

    return app
