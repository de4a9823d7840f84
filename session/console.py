"""运行日志面板（Console）。

会话中用户可见的事件记录在这里，同时镜像到标准 logging。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from shared.utils.logging import setup_logger


class LogLevel(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


_STD_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.SUCCESS: logging.INFO,
}


@dataclass(frozen=True)
class LogEntry:
    time: str
    level: LogLevel
    message: str


@dataclass
class ConsoleFeed:
    entries: list[LogEntry] = field(default_factory=list)
    logger: logging.Logger = field(default_factory=lambda: setup_logger("sandbox.session"))

    def add(self, level: LogLevel, message: str) -> LogEntry:
        entry = LogEntry(time=datetime.now().strftime("%H:%M:%S"), level=level, message=message)
        self.entries.append(entry)
        self.logger.log(_STD_LEVELS[level], message)
        return entry

    def info(self, message: str) -> LogEntry:
        return self.add(LogLevel.INFO, message)

    def warn(self, message: str) -> LogEntry:
        return self.add(LogLevel.WARN, message)

    def error(self, message: str) -> LogEntry:
        return self.add(LogLevel.ERROR, message)

    def success(self, message: str) -> LogEntry:
        return self.add(LogLevel.SUCCESS, message)

    def last(self) -> LogEntry | None:
        return self.entries[-1] if self.entries else None
