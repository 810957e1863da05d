# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Fixtures shared by all tests:
# - app:    TestingConfig (in-memory SQLite), uploads in a per-test tmp dir
# - client: Flask test client
# - store:  the DatabaseStorage instance used by the routes
# =============================================================================

import pytest

from marketplace import create_app
from marketplace.extensions import db
from marketplace.services.storage import storage


@pytest.fixture
def app(tmp_path):
    """Application with fresh tables and an isolated upload folder."""
    app = create_app('testing')
    upload_folder = tmp_path / 'uploads'
    upload_folder.mkdir()
    app.config['UPLOAD_FOLDER'] = str(upload_folder)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return storage


@pytest.fixture
def make_post(store):
    """Create a post through the storage layer with sensible defaults."""
    def _make_post(**overrides):
        data = {
            'title': 'Sample asset',
            'description': 'Something to download',
            'category_id': 'cat-a',
            'price': '0',
        }
        data.update(overrides)
        return store.create_post(data)
    return _make_post
