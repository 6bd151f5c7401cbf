"""feed 拉取服务: 宿主安装/更新流程的两个挂载点

流程:
  before_resolve:
    1. lock 文件: 可移植占位根目录 → 本机缓存根目录
    2. 递归拉取根清单声明的 feed 制品
    3. 将已下载制品登记为 path 源并持久化
    4. lock 文件存在时重建 path 包条目

  after_resolve:
    lock 文件: 本机缓存根目录 → 可移植占位根目录

根清单未声明 feed 组时 before_resolve 为空操作（不拉取、不改 lock）。
"""

from __future__ import annotations

import logging
from pathlib import Path

from feedlink.core.config import Config, get_config
from feedlink.core.feed.downloader import UniversalPackageDownloader
from feedlink.core.feed.fetcher import ArtifactFetcher
from feedlink.core.feed.manifest import Manifest
from feedlink.core.feed.models import DownloadedArtifact
from feedlink.core.feed.registry import DownloadRegistry
from feedlink.core.feed.walker import DependencyWalker
from feedlink.core.lockfile import LockFile, LockRewriter
from feedlink.core.sources import PathSourceRegistry
from feedlink.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class FeedService:
    """feed 拉取服务"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config or get_config()
        self.mapping = self.config.path_mapping()
        self.lock = LockFile(self.config.lock_file)
        self.rewriter = LockRewriter(self.lock, self.mapping)
        self.downloader = UniversalPackageDownloader(
            command=self.config.az_command, executor=executor,
        )
        self.sources = PathSourceRegistry()

    def load_manifest(self) -> Manifest:
        return Manifest.load(self.config.manifest)

    def before_resolve(self, install_only: bool = False) -> list[DownloadedArtifact]:
        """解析前: 拉取 feed 制品并登记 path 源，返回本次运行的全部制品"""
        manifest = self.load_manifest()
        if not manifest.has_feed_groups():
            logger.debug("未声明 feed 组，跳过")
            PathSourceRegistry.remove_saved(self.config.repositories_file)
            return []

        # 每个用户的缓存目录不同，先把 lock 中的占位路径换成本机路径
        self.rewriter.to_local()

        registry = DownloadRegistry()
        fetcher = ArtifactFetcher(
            self.config.feed_cache_root, registry, self.downloader,
            install_only=install_only,
        )
        DependencyWalker(fetcher).walk(manifest, top_level=True)

        self.sources = PathSourceRegistry()
        downloaded = registry.unique()
        for item in downloaded:
            self.sources.add(item.path, item.coordinates.symlink)
        # 空列表也要写入，覆盖上次运行留下的路径源
        self.sources.save(Path(self.config.repositories_file))

        if self.lock.exists():
            self.rewriter.rewrite_path_packages()
        return downloaded

    def after_resolve(self) -> bool:
        """安装/更新后: lock 路径还原为可移植形式"""
        return self.rewriter.to_portable()
