"""lock 文件路径改写

lock 文件中 feed 制品以 path 仓库形式记录本机绝对缓存路径，而每个用户的
缓存目录各不相同。因此:

  - 解析前: 可移植占位根目录 → 本机绝对路径
  - 安装/更新后: 本机绝对路径 → 可移植占位根目录

两个方向都是纯字面量替换，互为逆操作。另有一次结构化重建：
重新加载全部锁定包，改写 path 类型包的 dist.url，别名包替换为其实际包。
lock 文件不存在时所有操作均为空操作。
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from feedlink.core.config import LockPathMapping
from feedlink.core.exceptions import LockFileError
from feedlink.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)

# LockData 属性名 -> lock 文件键名
_KEYS = {
    "packages": "packages",
    "packages_dev": "packages-dev",
    "aliases": "aliases",
    "minimum_stability": "minimum-stability",
    "stability_flags": "stability-flags",
    "prefer_stable": "prefer-stable",
    "prefer_lowest": "prefer-lowest",
    "platform": "platform",
    "platform_dev": "platform-dev",
}


def substitute(text: str, find: str, replace: str) -> str:
    """字面量替换（不做正则解释）"""
    if not find:
        return text
    return text.replace(find, replace)


@dataclass
class LockData:
    """lock 文件内容；未识别的顶层键原样保存在 extra 中"""

    packages: list[dict[str, Any]] = field(default_factory=list)
    packages_dev: list[dict[str, Any]] = field(default_factory=list)
    aliases: list[Any] = field(default_factory=list)
    minimum_stability: str = "stable"
    stability_flags: Any = field(default_factory=dict)
    prefer_stable: bool = False
    prefer_lowest: bool = False
    platform: Any = field(default_factory=dict)
    platform_dev: Any = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    key_order: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LockData:
        kwargs = {attr: data[key] for attr, key in _KEYS.items() if key in data}
        known = set(_KEYS.values())
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(**kwargs, extra=extra, key_order=list(data))

    def to_dict(self) -> dict[str, Any]:
        """按原文件键顺序输出；原文件缺失的已知键不补写"""
        values = {key: getattr(self, attr) for attr, key in _KEYS.items()}
        values.update(self.extra)
        if not self.key_order:
            return values
        return {key: values[key] for key in self.key_order if key in values}


class LockFile:
    """宿主 lock 文件存储"""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    def write_text(self, content: str) -> None:
        atomic_write(self.path, content)

    def load(self) -> LockData:
        try:
            data = json.loads(self.read_text())
        except json.JSONDecodeError as e:
            raise LockFileError(f"lock 文件不是合法 JSON: {self.path} ({e})") from e
        if not isinstance(data, dict):
            raise LockFileError(f"lock 文件内容必须是对象: {self.path}")
        return LockData.from_dict(data)

    def save(self, lock: LockData) -> None:
        self.write_text(json.dumps(lock.to_dict(), indent=4, ensure_ascii=False) + "\n")


# =========================================================================
# 锁定包加载
# =========================================================================

@dataclass
class LockedPackage:
    """lock 中的单个包条目"""

    data: dict[str, Any]

    @property
    def name(self) -> str:
        return str(self.data.get("name", ""))

    @property
    def version(self) -> str:
        return str(self.data.get("version", ""))

    @property
    def dist_type(self) -> str:
        dist = self.data.get("dist")
        return str(dist.get("type", "")) if isinstance(dist, dict) else ""

    @property
    def dist_url(self) -> str:
        dist = self.data.get("dist")
        return str(dist.get("url", "")) if isinstance(dist, dict) else ""

    def set_dist_url(self, url: str) -> None:
        self.data.setdefault("dist", {})["url"] = url


@dataclass
class AliasPackage:
    """分支别名包装：对外以别名版本呈现，alias_of 为实际包"""

    alias_of: LockedPackage
    version: str

    @property
    def name(self) -> str:
        return self.alias_of.name

    @property
    def data(self) -> dict[str, Any]:
        """别名视图：实际包条目换成别名版本，去掉 branch-alias 元数据"""
        view = copy.deepcopy(self.alias_of.data)
        view["version"] = self.version
        extra = view.get("extra")
        if isinstance(extra, dict):
            extra.pop("branch-alias", None)
        return view


def load_package(data: dict[str, Any]) -> LockedPackage | AliasPackage:
    pkg = LockedPackage(copy.deepcopy(data))
    extra = pkg.data.get("extra")
    branch_alias = extra.get("branch-alias") if isinstance(extra, dict) else None
    if isinstance(branch_alias, dict) and pkg.version in branch_alias:
        return AliasPackage(alias_of=pkg, version=str(branch_alias[pkg.version]))
    return pkg


# =========================================================================
# 改写
# =========================================================================

class LockRewriter:
    """lock 文件缓存路径改写器"""

    def __init__(self, lock: LockFile, mapping: LockPathMapping) -> None:
        self.lock = lock
        self.mapping = mapping

    def substitute_paths(self, find: str, replace: str) -> bool:
        """对 lock 文本做字面量替换，返回是否有内容变化"""
        if not self.lock.exists():
            return False
        content = self.lock.read_text()
        updated = substitute(content, find, replace)
        if updated == content:
            return False
        self.lock.write_text(updated)
        logger.info("已修改 lock 文件路径: %s", self.lock.path)
        return True

    def to_local(self) -> bool:
        return self.substitute_paths(self.mapping.portable_root, self.mapping.local_root)

    def to_portable(self) -> bool:
        return self.substitute_paths(self.mapping.local_root, self.mapping.portable_root)

    def rewrite_path_packages(self) -> bool:
        """重建 packages / packages-dev 列表，其余字段原样保留"""
        if not self.lock.exists():
            return False
        logger.info("重新加载 lock 文件: %s", self.lock.path)
        lock = self.lock.load()
        lock.packages = self._rewrite(lock.packages)
        lock.packages_dev = self._rewrite(lock.packages_dev)
        self.lock.save(lock)
        return True

    def _rewrite(self, entries: list[dict[str, Any]]) -> list[dict[str, Any]]:
        rewritten: list[dict[str, Any]] = []
        for entry in entries:
            loaded = load_package(entry)
            # 别名视图的版本是别名版本，lock 中必须写回实际包条目
            pkg = loaded.alias_of if isinstance(loaded, AliasPackage) else loaded
            if pkg.dist_type == "path":
                pkg.set_dist_url(substitute(
                    pkg.dist_url, self.mapping.portable_root, self.mapping.local_root,
                ))
            rewritten.append(pkg.data)
        return rewritten
