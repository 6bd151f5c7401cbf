"""共享 fixture — 假下载工具 + 清单/lock 构造"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from feedlink.core.config import reset_config
from feedlink.utils.shell import CommandResult


class FakeAzExecutor:
    """模拟 `az artifacts universal download`

    - 在 --path 目录下写入一个文件（以及可选的子清单）
    - versions 指定通配版本解析出的实际版本
    - failures 中的制品名返回非零退出码
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.versions: dict[str, str] = {}
        self.manifests: dict[str, dict[str, Any]] = {}
        self.failures: dict[str, str] = {}

    def execute(self, args: list[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        opts = dict(zip(args[4::2], args[5::2]))
        name = opts["--name"]
        if name in self.failures:
            return CommandResult(1, "", self.failures[name])

        dest = Path(opts["--path"])
        dest.mkdir(parents=True, exist_ok=True)
        (dest / "payload.txt").write_text(name, encoding="utf-8")
        if name in self.manifests:
            (dest / "composer.json").write_text(
                json.dumps(self.manifests[name]), encoding="utf-8",
            )
        version = self.versions.get(name, opts["--version"])
        return CommandResult(0, json.dumps({"Name": name, "Version": version}), "")

    def downloaded(self) -> list[tuple[str, str]]:
        """[(name, version), ...] 按调用顺序"""
        result = []
        for args in self.calls:
            opts = dict(zip(args[4::2], args[5::2]))
            result.append((opts["--name"], opts["--version"]))
        return result


def _make_manifest(
    name: str,
    require: dict[str, str],
    groups: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {"name": name, "require": require}
    if groups is not None:
        data["extra"] = {"azure-repositories": groups}
    return data


@pytest.fixture()
def fake_az() -> FakeAzExecutor:
    return FakeAzExecutor()


@pytest.fixture()
def write_json(tmp_path: Path):
    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=4), encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("FEEDLINK_CACHE_DIR", raising=False)
    monkeypatch.delenv("COMPOSER_CACHE_DIR", raising=False)
    monkeypatch.delenv("FEEDLINK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FEEDLINK_LOG_JSON", raising=False)
    reset_config()
    yield
    reset_config()
    # CLI 测试的 handler 绑定在 CliRunner 的临时 stderr 上，用完即清
    pkg_logger = logging.getLogger("feedlink")
    for handler in pkg_logger.handlers[:]:
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def make_manifest():
    return _make_manifest
