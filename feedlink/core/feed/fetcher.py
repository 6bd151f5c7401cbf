"""制品拉取器

职责:
- 按去重规则复用本次运行已下载的制品
- 跳过 dev 版本（本地开发中，不拉取也不登记）
- 缓存目录已存在且非空时直接使用（上次运行的结果）
- 否则调用外部下载工具，通配版本下载后迁移到实际版本目录
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from feedlink.core.exceptions import RelocationError
from feedlink.core.feed.downloader import UniversalPackageDownloader
from feedlink.core.feed.models import Artifact, DownloadedArtifact, FeedCoordinates, Version
from feedlink.core.feed.paths import artifact_path, normalize_name
from feedlink.core.feed.registry import DownloadRegistry

logger = logging.getLogger(__name__)


def is_populated(path: Path) -> bool:
    """目录存在且非空（非原子检查，并发安装时存在竞态窗口）"""
    return path.is_dir() and any(path.iterdir())


class ArtifactFetcher:
    """制品拉取器 - 注册表优先，本地缓存其次，最后远程下载"""

    def __init__(
        self,
        cache_root: Path,
        registry: DownloadRegistry,
        downloader: UniversalPackageDownloader,
        install_only: bool = False,
    ) -> None:
        self.cache_root = Path(cache_root)
        self.registry = registry
        self.downloader = downloader
        self.install_only = install_only

    def ensure(
        self,
        coordinates: FeedCoordinates,
        requested: Artifact,
        top_level: bool,
    ) -> DownloadedArtifact | None:
        """保证制品在本地缓存中就绪；dev 版本返回 None"""
        downloaded, _ = self.fetch(coordinates, requested, top_level)
        return downloaded

    def fetch(
        self,
        coordinates: FeedCoordinates,
        requested: Artifact,
        top_level: bool,
    ) -> tuple[DownloadedArtifact | None, bool]:
        """同 ensure，另返回制品是否由本次调用登记（注册表命中或 dev 版本为 False）"""
        existing = self.registry.find(requested, top_level)
        if existing is not None:
            logger.debug("本次运行已拉取，跳过: %s", requested)
            return existing, False

        if requested.version.is_dev:
            logger.debug("dev 版本不拉取: %s", requested)
            return None, False

        path = artifact_path(self.cache_root, coordinates, requested)
        if is_populated(path):
            logger.info("制品已存在，直接使用: %s -> %s", requested, path)
            downloaded = DownloadedArtifact(requested, path, coordinates)
        else:
            downloaded = self._download(coordinates, requested, path)

        self.registry.record(downloaded, top_level)
        return downloaded, True

    def _download(
        self,
        coordinates: FeedCoordinates,
        requested: Artifact,
        path: Path,
    ) -> DownloadedArtifact:
        result = self.downloader.download(
            coordinates, normalize_name(requested.name), requested.version.raw, path,
        )
        resolved = Artifact(requested.name, Version(result.version))

        # 通配版本下载到 wildcard 目录，update 时迁移到实际版本目录
        if requested.version.is_wildcard and not self.install_only:
            target = artifact_path(self.cache_root, coordinates, resolved)
            if target != path:
                relocate(path, target)
                path = target

        logger.info("制品 %s - %s 已下载: %s", requested.name, result.version, path)
        return DownloadedArtifact(resolved, path, coordinates)


def relocate(source: Path, target: Path) -> None:
    """先复制再删除源目录；复制失败时保留源目录并清理不完整的目标目录"""
    target_existed = target.exists()
    try:
        shutil.copytree(source, target, dirs_exist_ok=True)
    except OSError as e:
        if not target_existed:
            shutil.rmtree(target, ignore_errors=True)
        raise RelocationError(
            f"迁移制品目录失败: {source} -> {target} ({e})",
            source=str(source), target=str(target),
        ) from e
    shutil.rmtree(source)
