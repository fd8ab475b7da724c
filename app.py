# app.py
import logging

import click
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from models import db, init_db
from routes.auth_routes import auth_bp
from routes.faculty_routes import faculty_bp
from routes.student_routes import student_bp
from utils.errors import ApiError

logger = logging.getLogger(__name__)


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.from_mapping(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    CORS(app)
    db.init_app(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(faculty_bp)
    register_error_handlers(app)

    @app.route("/")
    def root():
        return jsonify({"message": "API is running"})

    @app.cli.command("init-db")
    def init_db_command():
        """Migrate legacy nested reviews and create indexes."""
        init_db(app.config["MAX_REVIEWS"])
        click.echo("Database initialised.")

    # flatten legacy reviews and build indexes before serving
    if app.config["INIT_DB_ON_STARTUP"]:
        init_db(app.config["MAX_REVIEWS"])

    return app


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return error.to_response()

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error: %s", error)
        return jsonify({"message": "Internal server error"}), 500


# -------------------- Run --------------------
if __name__ == "__main__":
    application = create_app()
    logger.info("Server is running on port %s", application.config["PORT"])
    application.run(host="0.0.0.0", port=application.config["PORT"])
