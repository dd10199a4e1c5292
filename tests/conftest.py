import pytest
from fastapi.testclient import TestClient

from catalog.database import Base, make_engine, make_session_factory
from catalog.main import create_app


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    app = create_app(session_factory=session_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def broken_client():
    """Клиент, у которого в БД нет таблиц: любой запрос к хранилищу падает"""
    engine = make_engine("sqlite://")
    app = create_app(session_factory=make_session_factory(engine))
    with TestClient(app) as test_client:
        yield test_client
    engine.dispose()
