"""feed 制品数据模型

数据类:
- Version: 版本字符串及其分类（dev / 通配 / 具体版本）
- Artifact: 制品身份 (name, version)
- FeedCoordinates: 一个 feed 声明的坐标
- FeedGroup: 一个 feed 声明 + 其下需要拉取的制品
- DownloadedArtifact: 已就绪的制品及其缓存路径
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEV_PREFIX = "dev-"
WILDCARD_SUFFIX = "*"
WILDCARD_DIR_NAME = "wildcard"


@dataclass(frozen=True)
class Version:
    """制品版本

    dev 版本（dev-main 等）视为本地开发中，永不拉取；
    通配版本（1.* 等）在下载前无法得知实际版本，先落到固定的 wildcard 目录。
    """

    raw: str

    @property
    def is_dev(self) -> bool:
        return self.raw.startswith(DEV_PREFIX)

    @property
    def is_wildcard(self) -> bool:
        return self.raw.endswith(WILDCARD_SUFFIX)

    @property
    def download_dir_name(self) -> str:
        if self.is_wildcard:
            return WILDCARD_DIR_NAME
        return self.raw

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Artifact:
    """制品身份"""

    name: str
    version: Version

    @classmethod
    def of(cls, name: str, version: str) -> Artifact:
        return cls(name=name, version=Version(version))

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


class FeedScope(str, Enum):
    PROJECT = "project"
    ORGANIZATION = "organization"


@dataclass(frozen=True)
class FeedCoordinates:
    """feed 坐标: 组织、项目、feed 名及本地路径源的软链接偏好"""

    organization: str
    feed: str
    project: str = ""
    symlink: bool = True

    @property
    def scope(self) -> FeedScope:
        # 未指定项目的 feed 属于组织级
        return FeedScope.PROJECT if self.project else FeedScope.ORGANIZATION

    @property
    def organization_url(self) -> str:
        return f"https://{self.organization}"

    def __str__(self) -> str:
        return f"{self.organization}/{self.feed}"


@dataclass
class FeedGroup:
    """一个 feed 声明及其在 require 中命中的制品（保持声明顺序）"""

    coordinates: FeedCoordinates
    artifacts: list[Artifact] = field(default_factory=list)

    def add(self, name: str, version: str) -> None:
        self.artifacts.append(Artifact.of(name, version))


@dataclass(frozen=True)
class DownloadedArtifact:
    """已就绪的制品：实际版本 + 最终缓存路径 + 来源 feed"""

    artifact: Artifact
    path: Path
    coordinates: FeedCoordinates

    @property
    def name(self) -> str:
        return self.artifact.name

    @property
    def version(self) -> Version:
        return self.artifact.version
