"""下载去重注册表

单次运行范围内共享，由遍历器显式传入每一层递归，运行结束即丢弃。

去重规则:
  - 顶层依赖（根项目直接声明）: name 与版本字符串都相同才算已满足；
    同名不同版本会重新拉取，并按 name 替换已有记录
  - 传递依赖（递归发现）: 仅按 name 判断，先到先得，之后同名一律跳过
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from feedlink.core.feed.models import Artifact, DownloadedArtifact

logger = logging.getLogger(__name__)


class DownloadRegistry:
    """本次运行已下载制品的注册表"""

    def __init__(self) -> None:
        self._entries: list[DownloadedArtifact] = []

    def find(self, artifact: Artifact, top_level: bool) -> DownloadedArtifact | None:
        """按去重规则查找已满足该请求的记录"""
        for entry in self._entries:
            if entry.name != artifact.name:
                continue
            if not top_level or entry.version.raw == artifact.version.raw:
                return entry
        return None

    def record(self, downloaded: DownloadedArtifact, top_level: bool) -> None:
        if top_level:
            for i, entry in enumerate(self._entries):
                if entry.name == downloaded.name:
                    logger.debug("替换已有记录: %s -> %s", entry.artifact, downloaded.artifact)
                    self._entries[i] = downloaded
                    return
        self._entries.append(downloaded)

    def unique(self) -> list[DownloadedArtifact]:
        """按最终路径去重后的记录（保持登记顺序）"""
        seen: set[Path] = set()
        result: list[DownloadedArtifact] = []
        for entry in self._entries:
            if entry.path in seen:
                continue
            seen.add(entry.path)
            result.append(entry)
        return result

    def __iter__(self) -> Iterator[DownloadedArtifact]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(e.name == name for e in self._entries)
