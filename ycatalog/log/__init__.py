"""日志模块

使用示例:
    from ycatalog.log import setup_logger, get_logger

    # 创建自定义日志记录器
    logger = setup_logger("ycatalog", level="DEBUG", log_file="logs/catalog.log")

    # 在模块中获取日志器（自动推断模块名）
    logger = get_logger()
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    api_logger,
    logger,
    get_logger,
)

__all__ = [
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "api_logger",
    "logger",
    "get_logger",
]
