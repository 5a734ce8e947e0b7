"""服务日志配置：按 Settings.log_level 给本服务的 logger 挂输出"""
import logging
import sys

from src.config import Settings

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# 本服务代码所在的 logger 命名空间
APP_LOGGERS = ("filter_service", "src", "scripts")

_handler: logging.Handler | None = None


def setup_logging(settings: Settings) -> None:
    """
    配置本服务日志，只动 APP_LOGGERS 和 uvicorn，不改根 logger
    重复调用复用同一个 handler，不会重复输出
    Args:
        settings: 服务配置，取其中的 log_level
    """
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    for name in APP_LOGGERS:
        app_logger = logging.getLogger(name)
        app_logger.setLevel(settings.log_level)
        if _handler not in app_logger.handlers:
            app_logger.addHandler(_handler)

    # SQL_ECHO 打开时 SQLAlchemy 自带输出，这里只同步 uvicorn 的级别
    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(settings.log_level)
