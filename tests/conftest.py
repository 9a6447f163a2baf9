"""
Fixtures partagées : une base SQLite temporaire (fichier) par test,
servie par la même DataSource (pool SQLAlchemy) que l'application.
"""

import pytest

from app.bootstrap import build_container
from app.database import DataSource
from app.seed import seed_database
from app.settings import Settings


@pytest.fixture()
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'company_test.db'}"


@pytest.fixture()
def data_source(database_url):
    ds = DataSource(database_url, pool_size=2, max_overflow=0, pool_timeout=1)
    yield ds
    ds.dispose()


@pytest.fixture()
def container(data_source):
    return build_container(settings=Settings(), data_source=data_source)


@pytest.fixture()
def seeded_container(container):
    seed_database(container)
    return container
