"""外部进程调用

插件只在一处启动子进程：调用 az 下载 universal package。
CommandExecutor 协议让下载器与 subprocess 解耦，测试时注入假实现。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout + stderr 合并输出，原样用于错误诊断"""
        parts = [s.rstrip("\n") for s in (self.stdout, self.stderr) if s.strip()]
        return "\n".join(parts)


class CommandExecutor(Protocol):
    def execute(self, args: list[str]) -> CommandResult:
        """同步执行参数列表形式的命令"""
        ...


class LocalExecutor:
    """subprocess 实现：阻塞直到进程退出，不设超时；可执行文件不存在时抛 FileNotFoundError"""

    def execute(self, args: list[str]) -> CommandResult:
        logger.debug("执行命令: %s", shlex.join(args))
        r = subprocess.run(args, capture_output=True, text=True, check=False)
        return CommandResult(r.returncode, r.stdout, r.stderr)


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换默认执行器（测试用）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor
