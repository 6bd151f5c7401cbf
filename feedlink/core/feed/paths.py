"""制品缓存路径规则

路径规则:
  <cache_root>/<organization>/<feed>/<name>/<版本目录>

  版本目录: 通配版本统一为 wildcard，其余为原始版本字符串。
  name 中的 "/" 替换为 "."，与传给下载工具的制品名保持一致。
"""

from __future__ import annotations

from pathlib import Path

from feedlink.core.feed.models import Artifact, FeedCoordinates


def normalize_name(name: str) -> str:
    """acme/widget -> acme.widget"""
    return name.replace("/", ".")


def artifact_path(
    cache_root: Path, coordinates: FeedCoordinates, artifact: Artifact,
) -> Path:
    return (
        Path(cache_root)
        / coordinates.organization
        / coordinates.feed
        / normalize_name(artifact.name)
        / artifact.version.download_dir_name
    )
