"""
Prime Portal - Application Factory
"""
import os

import click
from flask import Flask, current_app, request
from dotenv import load_dotenv

from portal.extensions import db, babel
from portal.log import configure_logging
from portal.routes import register_blueprints
from portal.services.content import to_local
from config.settings import config


def get_locale():
    """Determine the best locale for the user."""
    supported = current_app.config['SUPPORTED_LOCALES']
    lang = request.cookies.get('babel_translation')
    if lang in supported:
        return lang
    return request.accept_languages.best_match(supported)


def create_app(config_name=None):
    """Application Factory."""
    load_dotenv()

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    babel.init_app(app, locale_selector=get_locale)

    # Context processor for templates
    @app.context_processor
    def inject_conf_var():
        return dict(get_locale=get_locale)

    @app.template_filter('localtime')
    def localtime_filter(value):
        return to_local(value, app.config['PORTAL_TIMEZONE'])

    # Register blueprints
    register_blueprints(app)

    # CLI Commands
    register_cli_commands(app)

    return app


def register_cli_commands(app):
    """Register CLI commands."""
    from portal.models import AdminUser, User
    from portal.services.credentials import hash_password

    @app.cli.command("init-db")
    def init_db_command():
        """Creates database tables."""
        db.create_all()
        click.echo("Initialized the database.")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    def create_admin_command(email, password):
        """Creates (or updates) a user and grants admin membership."""
        email = email.strip().lower()
        user = User.query.filter_by(email=email).first()
        if user is None:
            user = User(email=email)
            db.session.add(user)
        user.password_hash = hash_password(password)
        db.session.flush()
        if AdminUser.query.filter_by(user_id=user.id).first() is None:
            db.session.add(AdminUser(user_id=user.id))
        db.session.commit()
        click.echo(f"Admin access granted to {email}.")

    @app.cli.command("revoke-admin")
    @click.argument("email")
    def revoke_admin_command(email):
        """Removes admin membership; the credential itself is kept."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        membership = AdminUser.query.filter_by(user_id=user.id).first() if user else None
        if membership is None:
            click.echo(f"{email} is not an admin.")
            return
        db.session.delete(membership)
        db.session.commit()
        click.echo(f"Admin access revoked for {email}.")
