import logging
import os

from flask import Flask
from config import Config
from agrirent.extensions import db, login_manager, migrate, mail, csrf

def configure_logging(app):
    logger = logging.getLogger('agrirent')
    logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s - %(message)s'))
        logger.addHandler(console_handler)

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Extensions
    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)

    # Models must be imported before the tables are created
    from agrirent import models  # noqa: F401

    from agrirent import security
    security.init_app(app)
    # After the session gate: the CSRF check reads the request body
    csrf.init_app(app)

    # Blueprints
    from agrirent.routes.auth import auth as auth_blueprint
    app.register_blueprint(auth_blueprint, url_prefix='/auth')

    from agrirent.routes.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from agrirent.routes.booking import booking as booking_blueprint
    app.register_blueprint(booking_blueprint)

    from agrirent.routes.owner import owner as owner_blueprint
    app.register_blueprint(owner_blueprint, url_prefix='/owner')

    from agrirent.routes.admin import admin as admin_blueprint
    app.register_blueprint(admin_blueprint, url_prefix='/admin')

    from agrirent.commands import register_commands
    register_commands(app)

    return app
