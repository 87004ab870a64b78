"""
Flask extension instances.

Extensions are created here without binding to an application so that
the application factory can call ``init_app()`` on each one during
``create_app()``.  This avoids circular imports and follows the
standard Flask extension pattern.
"""

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# -- Database ORM ----------------------------------------------------------
# The ``db`` instance is imported by models and repositories throughout the app.
db = SQLAlchemy()

# -- Schema migrations (Alembic via Flask-Migrate) -------------------------
migrate = Migrate()
