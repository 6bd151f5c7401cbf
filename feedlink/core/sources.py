"""本地路径源登记

将已下载的 feed 制品登记为宿主依赖解析可用的 path 类型仓库，
并以 JSON 持久化供宿主工具读取。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from feedlink.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)


class PathSourceRegistry:
    """path 仓库列表（按路径去重，保持登记顺序）"""

    def __init__(self) -> None:
        self._sources: dict[str, bool] = {}

    def add(self, path: str | Path, symlink: bool = True) -> None:
        key = str(path)
        if key in self._sources:
            return
        self._sources[key] = symlink
        logger.debug("登记路径源: %s (symlink=%s)", key, symlink)

    def to_repositories(self) -> list[dict[str, Any]]:
        return [
            {"type": "path", "url": url, "options": {"symlink": symlink}}
            for url, symlink in self._sources.items()
        ]

    def save(self, path: str | Path) -> Path:
        p = Path(path)
        atomic_write(p, json.dumps(self.to_repositories(), indent=4) + "\n")
        logger.info("已写入 %d 个路径源: %s", len(self._sources), p)
        return p

    @staticmethod
    def remove_saved(path: str | Path) -> bool:
        """删除上次运行持久化的路径源文件"""
        p = Path(path)
        if not p.is_file():
            return False
        p.unlink()
        logger.info("已删除过期的路径源文件: %s", p)
        return True

    def __len__(self) -> int:
        return len(self._sources)
