import os

# Use in-memory sqlite for tests; must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["RECOMPUTE_GOALS_ON_WRITE"] = "false"

import pytest  # noqa: E402


@pytest.fixture()
def client():
    from app.main import app  # noqa: WPS433
    from fastapi.testclient import TestClient  # noqa: WPS433
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every table after each test so tests stay independent."""
    yield
    from app.db import Base, engine
    import app.main  # noqa: F401  (registers all models)

    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
