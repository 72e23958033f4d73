import logging
import os

from config import config
from flask import Flask, jsonify
from flask_cors import CORS
from flask_migrate import Migrate


def create_app(config_name=None):
    """Application factory pattern"""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.json.ensure_ascii = False  # Russian and Chinese text stay readable in responses

    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    # Initialize CORS for React frontend
    ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")

    CORS(
        app,
        resources={
            r"/api/*": {"origins": ALLOWED_ORIGINS},
        },
    )

    # Initialize SQLAlchemy
    from models import db

    db.init_app(app)

    # Initialize Flask-Migrate
    Migrate(app, db)

    # Import all models to ensure they are registered with SQLAlchemy
    from models.analysis_history import AnalysisHistory
    from models.sentence_analysis_cache import SentenceAnalysisCache

    with app.app_context():
        db.create_all()

    # Register API blueprints
    from routes.analyze import bp as analyze_bp
    from routes.export import bp as export_bp
    from routes.history import bp as history_bp

    app.register_blueprint(analyze_bp)
    app.register_blueprint(history_bp)
    app.register_blueprint(export_bp)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Russian Grammar Analyzer API is running", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        try:
            db.session.execute(db.text("SELECT 1"))
            return jsonify({"status": "healthy", "database": "connected"}), 200
        except Exception as e:
            app.logger.error(f"Health check failed: {e}")
            return jsonify({"status": "unhealthy", "error": str(e)}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=int(os.getenv("PORT", "5000")))
