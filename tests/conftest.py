import pytest

from jewelry.db import connect, ensure_schema
from jewelry.gateway import RecordGateway


@pytest.fixture
def conn():
    c = connect(":memory:")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def gateway(conn):
    return RecordGateway(conn)