"""集中配置管理

替代各模块散落的 DEFAULT_* 常量，提供统一的配置入口。
支持从 YAML 文件加载 + 环境变量覆盖 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from feedlink.core.exceptions import ConfigError
from feedlink.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LockPathMapping:
    """lock 文件中缓存根目录的双向映射

    local_root: 本机绝对缓存根目录
    portable_root: 写入仓库的可移植占位根目录（所有用户一致）
    """

    local_root: str
    portable_root: str


@dataclass
class Config:
    """插件全局配置"""

    # 宿主文件
    manifest: str = "composer.json"
    lock_file: str = "composer.lock"
    repositories_file: str = "vendor/feedlink-repositories.json"

    # 缓存目录
    cache_dir: str = "~/.cache/composer"
    feed_cache_subdir: str = "azure"
    portable_cache_dir: str = "~/.composer/cache/azure"

    # 外部工具
    az_command: str = "az"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = "feedlink.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认（仍应用环境变量覆盖）"""
        data = load_yaml(path)
        known = {f.name for f in cls.__dataclass_fields__.values()}
        matched = {k: v for k, v in data.items() if k in known and k != "extra"}
        extra = {k: v for k, v in data.items() if k not in known}
        for key in ("manifest", "lock_file", "cache_dir", "az_command"):
            if key in matched and not isinstance(matched[key], str):
                raise ConfigError(f"配置项 {key} 必须是字符串: {path}")
        cfg = cls(**matched)
        cfg.extra = extra
        cfg.apply_env()
        return cfg

    def apply_env(self) -> None:
        """环境变量覆盖缓存目录（FEEDLINK_CACHE_DIR 优先于 COMPOSER_CACHE_DIR）"""
        cache_dir = os.getenv("FEEDLINK_CACHE_DIR") or os.getenv("COMPOSER_CACHE_DIR")
        if cache_dir:
            self.cache_dir = cache_dir

    @property
    def feed_cache_root(self) -> Path:
        """feed 制品缓存根目录（已展开 ~）"""
        return Path(self.cache_dir).expanduser() / self.feed_cache_subdir

    def path_mapping(self) -> LockPathMapping:
        return LockPathMapping(
            local_root=str(self.feed_cache_root),
            portable_root=self.portable_cache_dir,
        )


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
        _current.apply_env()
    return _current


def init_config(path: str = "feedlink.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current


def reset_config() -> None:
    """清除全局配置（测试用）"""
    global _current  # noqa: PLW0603
    _current = None
