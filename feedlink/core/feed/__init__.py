"""feed 制品拉取模块

拆分说明:
- models.py: 数据模型
- paths.py: 缓存路径规则
- manifest.py: 宿主清单读取
- extractor.py: feed 依赖提取
- registry.py: 下载去重注册表
- downloader.py: 外部下载工具
- fetcher.py: 单个制品拉取
- walker.py: 递归遍历
"""

from feedlink.core.feed.downloader import DownloadResult, UniversalPackageDownloader
from feedlink.core.feed.fetcher import ArtifactFetcher
from feedlink.core.feed.manifest import FeedGroupConfig, Manifest
from feedlink.core.feed.models import (
    Artifact,
    DownloadedArtifact,
    FeedCoordinates,
    FeedGroup,
    FeedScope,
    Version,
)
from feedlink.core.feed.registry import DownloadRegistry
from feedlink.core.feed.walker import DependencyWalker

__all__ = [
    "Artifact",
    "ArtifactFetcher",
    "DependencyWalker",
    "DownloadRegistry",
    "DownloadResult",
    "DownloadedArtifact",
    "FeedCoordinates",
    "FeedGroup",
    "FeedGroupConfig",
    "FeedScope",
    "Manifest",
    "UniversalPackageDownloader",
    "Version",
]
