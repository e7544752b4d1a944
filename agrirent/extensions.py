from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_mail import Mail
from flask_wtf.csrf import CSRFProtect

db = SQLAlchemy()
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message_category = 'warning'
migrate = Migrate()
mail = Mail()
csrf = CSRFProtect()


@contextmanager
def session_management():
    """Commits the unit of work, or rolls it back and re-raises."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
