"""服务配置：从 .env 与环境变量加载数据库、日志等设置"""
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_SQLITE_URL = "sqlite:///./restricted_words.db"


def get_db_config() -> dict[str, str | int]:
    """从环境变量获取 MySQL 连接配置"""
    return {
        'host': os.getenv('DB_HOST', 'localhost'),
        'port': int(os.getenv('DB_PORT', '3306')),
        'user': os.getenv('DB_USER', 'root'),
        'password': os.getenv('DB_PASSWORD', ''),
        'database': os.getenv('DB_NAME', 'content_filter'),
        'charset': os.getenv('DB_CHARSET', 'utf8mb4')
    }


def mysql_url(cfg: dict[str, str | int]) -> str:
    """把 get_db_config() 的结果拼成 SQLAlchemy URL（mysql-connector 驱动）"""
    return (
        f"mysql+mysqlconnector://{cfg['user']}:{cfg['password']}"
        f"@{cfg['host']}:{cfg['port']}/{cfg['database']}?charset={cfg['charset']}"
    )


class Settings(BaseModel):
    database_url: str = DEFAULT_SQLITE_URL
    log_level: str = "INFO"
    sql_echo: bool = False
    host: str = "0.0.0.0"
    port: int = 8000


def _resolve_database_url() -> str:
    # 优先级：DATABASE_URL > DB_HOST（MySQL） > 本地 SQLite
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("DB_HOST"):
        return mysql_url(get_db_config())
    return DEFAULT_SQLITE_URL


@lru_cache
def get_settings() -> Settings:
    """读取 .env 后构建 Settings，进程内只构建一次"""
    load_dotenv()
    return Settings.model_validate({
        "database_url": _resolve_database_url(),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "sql_echo": os.getenv("SQL_ECHO", "0").lower() in ("1", "true", "yes"),
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8000")),
    })
