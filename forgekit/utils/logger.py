"""forgekit 日志配置

CLI / Web 入口调用 setup_logging() 一次，把 forgekit.* 的日志输出到 stderr。
只管理自己挂上的 handler，不影响宿主程序（或测试框架）在根日志器上的配置。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

PACKAGE_LOGGER = "forgekit"
_HANDLER_NAME = "forgekit-stderr"

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """每条记录输出一行 JSON，便于 CI 流水线消费

        {"timestamp": ..., "level": "INFO", "logger": "forgekit.core...",
         "message": ..., "module": ..., "function": ..., "line": 42}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            # 事件发生时间，不是格式化时间
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """配置 forgekit 包日志器，重复调用会替换上一次的 handler

    参数:
        level: DEBUG / INFO / WARNING / ERROR，无法识别时按 INFO
        json_output: 为 True 时输出 JSON 行
    """
    reset_logging()
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    pkg.addHandler(handler)
    return pkg


def reset_logging() -> None:
    """移除 setup_logging() 挂上的 handler"""
    pkg = logging.getLogger(PACKAGE_LOGGER)
    for handler in pkg.handlers[:]:
        if handler.get_name() == _HANDLER_NAME:
            pkg.removeHandler(handler)
            handler.close()
