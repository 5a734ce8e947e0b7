"""
数据库封装：SQLAlchemy 引擎、会话工厂与 restricted_words 表定义

默认使用本地 SQLite，设置 DATABASE_URL 或 DB_HOST 后切换到 MySQL。
"""
from sqlalchemy import Column, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

WORD_MAX_LENGTH = 255

Base = declarative_base()


class RestrictedWord(Base):
    """受限词实体，word 字段保存小写归一化后的词"""

    __tablename__ = "restricted_words"

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(String(WORD_MAX_LENGTH), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"RestrictedWord(id={self.id!r}, word={self.word!r})"


def make_engine(url: str, echo: bool = False) -> Engine:
    """
    创建引擎
    SQLite 需要关闭线程检查；内存库还要共享同一个连接，否则每个会话看到的是不同的空库
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker:
    # 提交后不过期，事务结束仍可读取返回实体的字段
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """建表（已存在则跳过）"""
    Base.metadata.create_all(bind=engine)
