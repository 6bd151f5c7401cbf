"""宿主项目清单（composer.json）读取

职责:
- 读取项目名、require 约束表
- 校验 extra.azure-repositories 声明，转为 FeedGroupConfig 列表

未声明 azure-repositories 是合法状态（无 feed 组），不是错误。
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from feedlink.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "composer.json"
FEED_GROUPS_KEY = "azure-repositories"


@dataclass
class FeedGroupConfig:
    """单个 feed 组声明"""

    organization: str
    feed: str
    project: str = ""
    symlink: bool = True
    packages: list[str] = field(default_factory=list)


def _parse_feed_group(index: int, raw: Any) -> FeedGroupConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"{FEED_GROUPS_KEY}[{index}] 必须是对象")
    for key in ("organization", "feed"):
        if not isinstance(raw.get(key), str) or not raw[key]:
            raise ConfigError(f"{FEED_GROUPS_KEY}[{index}] 缺少字段 {key}")

    project = raw.get("project") or ""
    symlink = raw.get("symlink", True)
    packages = raw.get("packages") or []
    if not isinstance(project, str):
        raise ConfigError(f"{FEED_GROUPS_KEY}[{index}].project 必须是字符串")
    if not isinstance(symlink, bool):
        raise ConfigError(f"{FEED_GROUPS_KEY}[{index}].symlink 必须是布尔值")
    if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
        raise ConfigError(f"{FEED_GROUPS_KEY}[{index}].packages 必须是字符串列表")

    return FeedGroupConfig(
        organization=raw["organization"],
        feed=raw["feed"],
        project=project,
        symlink=symlink,
        packages=list(packages),
    )


class Manifest:
    """项目清单（只读）"""

    def __init__(self, data: dict[str, Any], path: Path | None = None) -> None:
        self.data = data
        self.path = path

    @classmethod
    def load(cls, path: str | Path) -> Manifest:
        """读取清单文件；文件不存在时返回空清单"""
        p = Path(path)
        if not p.is_file():
            logger.debug("清单文件不存在: %s", p)
            return cls({}, p)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"清单文件不是合法 JSON: {p} ({e})") from e
        if not isinstance(data, dict):
            raise ConfigError(f"清单文件内容必须是对象: {p}")
        return cls(data, p)

    @classmethod
    def for_artifact(cls, artifact_dir: str | Path) -> Manifest:
        """读取已下载制品目录内的清单"""
        return cls.load(Path(artifact_dir) / MANIFEST_FILENAME)

    @property
    def project_name(self) -> str:
        name = self.data.get("name")
        return name if isinstance(name, str) else ""

    def requirements(self) -> dict[str, str]:
        """require 约束表 name -> 原始约束字符串"""
        require = self.data.get("require") or {}
        if not isinstance(require, dict):
            raise ConfigError(f"require 必须是对象: {self.path}")
        return {str(k): str(v) for k, v in require.items()}

    def feed_groups(self) -> list[FeedGroupConfig]:
        extra = self.data.get("extra")
        if not isinstance(extra, dict):
            return []
        groups = extra.get(FEED_GROUPS_KEY)
        if not isinstance(groups, list):
            return []
        return [_parse_feed_group(i, g) for i, g in enumerate(groups)]

    def has_feed_groups(self) -> bool:
        return bool(self.feed_groups())
