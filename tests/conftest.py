import os

# 必须在导入 filter_service.main 之前设置，避免在工作目录生成 SQLite 文件
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from src.db import init_db, make_engine, make_session_factory
from src.word_store import RestrictedWordStore

# 条件导入，只在需要时导入 mysql.connector
try:
    import mysql.connector
    MYSQL_AVAILABLE = True
except ImportError:
    MYSQL_AVAILABLE = False


@pytest.fixture(scope="session", autouse=True)
def load_env():
    load_dotenv()


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return RestrictedWordStore(make_session_factory(engine))


@pytest.fixture
def client(store):
    """每个用例使用独立的内存库"""
    from filter_service.main import app, get_store

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def db_config():
    from src.config import get_db_config
    return get_db_config()


@pytest.fixture(scope="session")
def db_connection(db_config):
    if not MYSQL_AVAILABLE:
        pytest.skip("mysql.connector not available")
    try:
        conn = mysql.connector.connect(**db_config)
    except mysql.connector.Error as e:
        pytest.skip(f"mysql not reachable: {e}")
    yield conn
    conn.close()


@pytest.fixture
def db_cursor(db_connection):
    cursor = db_connection.cursor()
    yield cursor
    cursor.close()


@pytest.fixture
def broken_store_factory():
    """返回一个依赖工厂，其 store 指向未建表的内存库，任何访问都会失败"""
    broken = RestrictedWordStore(make_session_factory(make_engine("sqlite://")))
    return lambda: broken


@pytest.fixture
def broken_store(broken_store_factory):
    return broken_store_factory()
