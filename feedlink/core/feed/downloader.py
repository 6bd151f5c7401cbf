"""外部下载工具适配

通过 `az artifacts universal download` 拉取 universal package。
这是插件唯一的进程边界：同步阻塞、无超时、无重试。
失败时清理目标目录，避免残留的半成品目录在下次运行时被当作缓存命中。
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from feedlink.core.exceptions import FetchError
from feedlink.core.feed.models import FeedCoordinates
from feedlink.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)


@dataclass
class DownloadResult:
    """下载工具返回的结构化结果"""

    version: str
    raw: dict


class UniversalPackageDownloader:
    """Azure Artifacts universal package 下载器"""

    def __init__(
        self,
        command: str = "az",
        executor: CommandExecutor | None = None,
    ) -> None:
        self.command = command
        self.executor = executor or get_executor()

    def build_command(
        self,
        coordinates: FeedCoordinates,
        name: str,
        version: str,
        dest: Path,
    ) -> list[str]:
        cmd = [
            self.command, "artifacts", "universal", "download",
            "--organization", coordinates.organization_url,
        ]
        if coordinates.project:
            cmd += ["--project", coordinates.project]
        cmd += [
            "--scope", coordinates.scope.value,
            "--feed", coordinates.feed,
            "--name", name,
            "--version", version,
            "--path", str(dest),
        ]
        return cmd

    def download(
        self,
        coordinates: FeedCoordinates,
        name: str,
        version: str,
        dest: Path,
    ) -> DownloadResult:
        """下载到 dest，返回实际解析出的版本

        name 须为已规范化的制品名（不含 "/"）。
        """
        cmd = self.build_command(coordinates, name, version, dest)
        logger.info("  下载: %s@%s (%s)", name, version, coordinates)
        dest.mkdir(parents=True, exist_ok=True)
        try:
            result = self.executor.execute(cmd)
        except OSError as e:
            _discard(dest)
            raise FetchError(f"无法启动下载工具 {self.command}: {e}") from e
        if not result.success:
            _discard(dest)
            raise FetchError(
                f"下载失败 {name}@{version} (rc={result.returncode}):\n{result.output}",
                output=result.output,
            )
        return self._parse(result.stdout, name, version, dest)

    @staticmethod
    def _parse(stdout: str, name: str, version: str, dest: Path) -> DownloadResult:
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            _discard(dest)
            raise FetchError(
                f"无法解析下载结果 {name}@{version}: {e}", output=stdout,
            ) from e
        if not isinstance(data, dict):
            data = {}
        resolved = data.get("Version") or data.get("version")
        if not isinstance(resolved, str):
            _discard(dest)
            raise FetchError(
                f"下载结果缺少版本信息 {name}@{version}", output=stdout,
            )
        return DownloadResult(version=resolved, raw=data)


def _discard(dest: Path) -> None:
    if dest.exists():
        logger.warning("  清理未完成的下载目录: %s", dest)
        shutil.rmtree(dest, ignore_errors=True)
