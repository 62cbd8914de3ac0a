"""Routes package - Blueprint registration."""
from portal.routes.auth import auth_bp
from portal.routes.main import main_bp
from portal.routes.admin import admin_bp
from portal.routes.functions import functions_bp


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(functions_bp)
