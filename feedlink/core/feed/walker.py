"""feed 依赖递归遍历

遍历流程:
  清单 → 提取 feed 组 → 逐个拉取 → 读取每个新拉取制品内的清单 → 递归（标记为传递依赖）

子清单只有在制品下载后才可见，因此依赖图是边走边发现的。
单线程、深度优先，注册表在整次运行中共享。
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from feedlink.core.feed.extractor import count_artifacts, extract_feed_groups
from feedlink.core.feed.fetcher import ArtifactFetcher
from feedlink.core.feed.manifest import Manifest
from feedlink.core.feed.models import Artifact, DownloadedArtifact
from feedlink.core.feed.registry import DownloadRegistry

logger = logging.getLogger(__name__)


class DependencyWalker:
    """feed 依赖图遍历器"""

    def __init__(
        self,
        fetcher: ArtifactFetcher,
        manifest_loader: Callable[[Path], Manifest] = Manifest.for_artifact,
    ) -> None:
        self.fetcher = fetcher
        self.manifest_loader = manifest_loader
        # 已递归过的制品身份，防止清单之间循环引用导致无限递归
        self._visited: set[Artifact] = set()

    @property
    def registry(self) -> DownloadRegistry:
        return self.fetcher.registry

    def walk(self, manifest: Manifest, top_level: bool = True) -> list[DownloadedArtifact]:
        """拉取清单声明的 feed 制品并递归其子清单，返回本层新拉取的制品"""
        groups = extract_feed_groups(manifest)
        if count_artifacts(groups) == 0:
            return []

        logger.info("从 feed 拉取制品 - %s", manifest.project_name or manifest.path)

        fetched: list[DownloadedArtifact] = []
        for group in groups:
            for artifact in group.artifacts:
                downloaded, fresh = self.fetcher.fetch(group.coordinates, artifact, top_level)
                if fresh:
                    fetched.append(downloaded)

        for downloaded in fetched:
            if downloaded.artifact in self._visited:
                logger.debug("子清单已处理过，跳过: %s", downloaded.artifact)
                continue
            self._visited.add(downloaded.artifact)
            self.walk(self.manifest_loader(downloaded.path), top_level=False)

        return fetched
