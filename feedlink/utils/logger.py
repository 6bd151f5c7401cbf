"""feedlink 日志配置

宿主工具占用 stdout，插件日志统一写到 stderr，且只挂在 feedlink 包日志器上，
不改动宿主进程的根日志器。

环境变量:
  FEEDLINK_LOG_LEVEL  日志级别（默认 INFO）
  FEEDLINK_LOG_JSON   为 1 时每条日志输出一行 JSON，便于 CI 采集
"""

from __future__ import annotations

import json
import logging
import os
import sys

PACKAGE_LOGGER = "feedlink"
LEVEL_ENV = "FEEDLINK_LOG_LEVEL"
JSON_ENV = "FEEDLINK_LOG_JSON"
TEXT_FORMAT = "[feedlink] %(levelname)s %(message)s"


class JSONFormatter(logging.Formatter):
    """单行 JSON: time / level / logger / message（有异常时附 exception）"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """配置 feedlink 包日志器，参数缺省时读取环境变量；重复调用会替换旧 handler"""
    if level is None:
        level = os.getenv(LEVEL_ENV, "INFO")
    if json_output is None:
        json_output = os.getenv(JSON_ENV, "") == "1"

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in pkg_logger.handlers[:]:
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    pkg_logger.addHandler(handler)
    return pkg_logger
