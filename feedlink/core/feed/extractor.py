"""feed 依赖提取

将清单中声明的 feed 组与 require 约束表取交集，得到待拉取的制品。
feed 组中列出但 require 里没有的包直接跳过（可能经由其他路径引入）。
"""

from __future__ import annotations

import logging

from feedlink.core.feed.manifest import Manifest
from feedlink.core.feed.models import FeedCoordinates, FeedGroup

logger = logging.getLogger(__name__)


def extract_feed_groups(manifest: Manifest) -> list[FeedGroup]:
    """按声明顺序返回 feed 组；未声明 feed 组时返回空列表"""
    requires = manifest.requirements()
    groups: list[FeedGroup] = []
    for cfg in manifest.feed_groups():
        group = FeedGroup(FeedCoordinates(
            organization=cfg.organization,
            feed=cfg.feed,
            project=cfg.project,
            symlink=cfg.symlink,
        ))
        for name in cfg.packages:
            if name in requires:
                group.add(name, requires[name])
            else:
                logger.debug("%s 未出现在 require 中，跳过", name)
        groups.append(group)
    return groups


def count_artifacts(groups: list[FeedGroup]) -> int:
    return sum(len(g.artifacts) for g in groups)
