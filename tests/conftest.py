from typing import Iterator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from edaoogle.storage.database import get_engine, init_db, make_session_factory
from edaoogle.storage.sql_store import SqlIndexStore


@pytest.fixture()
def engine() -> Iterator[Engine]:
    eng = get_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def factory(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture()
def session(factory: sessionmaker[Session]) -> Iterator[Session]:
    s = factory()
    yield s
    s.rollback()
    s.close()


@pytest.fixture()
def store(session: Session) -> SqlIndexStore:
    return SqlIndexStore(session)
