"""
中央日志配置

提供统一的日志目录常量和 logger 配置。
引擎模块只调用 logger，输出目的地由前端（CLI）在启动时配置。
"""

import sys
from pathlib import Path

from loguru import logger

# 路径常量
PROJECT_ROOT = Path(__file__).parent.parent
RUNTIME_LOGS_DIR = PROJECT_ROOT / "logs"


def setup_logging(verbose: bool = False, log_to_file: bool = True) -> None:
    """配置 logger 输出

    Args:
        verbose: stderr 输出 DEBUG 级别（默认只输出 WARNING 及以上）
        log_to_file: 是否同时写入 logs/app.log
    """
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")

    if log_to_file:
        RUNTIME_LOGS_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            RUNTIME_LOGS_DIR / "app.log",
            rotation="10 MB",
            retention="7 days",
            level="DEBUG",
        )


__all__ = ["logger", "setup_logging", "RUNTIME_LOGS_DIR"]
