import pytest
from datetime import datetime, timezone
from rentmatch import create_app, db
from rentmatch.config import TestingConfig
from rentmatch.models import *  # register models so metadata is available
from sqlalchemy.orm import sessionmaker, scoped_session

NOW = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)

@pytest.fixture(scope='module')
def app():
    """Create and configure a new app instance for each test module."""
    app = create_app(config_class=TestingConfig)
    yield app

@pytest.fixture(scope='function')
def db_session(app):
    """
    Create a transactional-scoped session for each test function.

    Uses an explicit connection/transaction and a scoped_session bound
    to that connection so sqlite:///:memory: tables persist for the
    duration of the test. Restores the original Flask-SQLAlchemy session
    on teardown.
    """
    with app.app_context():
        original_session = db.session

        connection = db.engine.connect()
        transaction = connection.begin()

        session_factory = sessionmaker(bind=connection)
        Session = scoped_session(session_factory)

        # Create all tables on the same connection (important for in-memory sqlite).
        db.metadata.create_all(bind=connection)

        db.session = Session

        try:
            yield Session()
        finally:
            Session.remove()
            transaction.rollback()
            connection.close()
            db.session = original_session

@pytest.fixture(scope='function')
def client(app):
    """A Flask test client to make HTTP requests during integration tests."""
    return app.test_client()

@pytest.fixture
def now():
    return NOW
