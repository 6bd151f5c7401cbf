"""FeedService 单元测试 - before_resolve / after_resolve 流程"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from feedlink.core.config import Config
from feedlink.core.exceptions import FetchError
from feedlink.services.feed_service import FeedService

PORTABLE = "~/.composer/cache/azure"


def _group(*packages: str, symlink: bool = True) -> dict:
    return {"organization": "contoso", "feed": "libs", "symlink": symlink, "packages": list(packages)}


@pytest.fixture()
def cfg(tmp_path: Path) -> Config:
    return Config(
        manifest=str(tmp_path / "composer.json"),
        lock_file=str(tmp_path / "composer.lock"),
        repositories_file=str(tmp_path / "vendor" / "repos.json"),
        cache_dir=str(tmp_path / "cache"),
    )


def _write_lock(cfg: Config, url_root: str) -> None:
    Path(cfg.lock_file).write_text(json.dumps({
        "content-hash": "h",
        "packages": [{
            "name": "acme/widget", "version": "1.2.0",
            "dist": {"type": "path", "url": f"{url_root}/contoso/libs/acme.widget/1.2.0"},
        }],
        "packages-dev": [],
    }, indent=4), encoding="utf-8")


class TestBeforeResolve:
    def test_no_feed_groups_is_noop(self, cfg, fake_az, write_json, make_manifest) -> None:
        write_json("composer.json", make_manifest("root/app", {"acme/widget": "1.2.0"}))
        _write_lock(cfg, PORTABLE)
        before = Path(cfg.lock_file).read_text(encoding="utf-8")

        result = FeedService(cfg, executor=fake_az).before_resolve()

        assert result == []
        assert fake_az.calls == []
        assert Path(cfg.lock_file).read_text(encoding="utf-8") == before
        assert not Path(cfg.repositories_file).exists()

    def test_fetch_register_and_localize_lock(self, cfg, fake_az, write_json, make_manifest) -> None:
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0"}, [_group("acme/widget", symlink=False)],
        ))
        _write_lock(cfg, PORTABLE)

        svc = FeedService(cfg, executor=fake_az)
        result = svc.before_resolve()

        expected = cfg.feed_cache_root / "contoso" / "libs" / "acme.widget" / "1.2.0"
        assert [d.path for d in result] == [expected]
        assert fake_az.downloaded() == [("acme.widget", "1.2.0")]
        repos = json.loads(Path(cfg.repositories_file).read_text(encoding="utf-8"))
        assert repos == [{"type": "path", "url": str(expected), "options": {"symlink": False}}]
        lock = json.loads(Path(cfg.lock_file).read_text(encoding="utf-8"))
        assert lock["packages"][0]["dist"]["url"] == str(expected)
        assert lock["content-hash"] == "h"

    def test_without_lock(self, cfg, fake_az, write_json, make_manifest) -> None:
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0"}, [_group("acme/widget")],
        ))
        FeedService(cfg, executor=fake_az).before_resolve()
        assert not Path(cfg.lock_file).exists()

    def test_each_artifact_registered_with_own_path(self, cfg, fake_az, write_json, make_manifest) -> None:
        fake_az.manifests["acme.widget"] = make_manifest(
            "acme/widget", {"other/core": "2.0"},
            [{"organization": "fabrikam", "feed": "core", "symlink": False, "packages": ["other/core"]}],
        )
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0"}, [_group("acme/widget")],
        ))
        result = FeedService(cfg, executor=fake_az).before_resolve()
        paths = [d.path.relative_to(cfg.feed_cache_root).as_posix() for d in result]
        assert paths == ["contoso/libs/acme.widget/1.2.0", "fabrikam/core/other.core/2.0"]
        repos = json.loads(Path(cfg.repositories_file).read_text(encoding="utf-8"))
        assert [r["options"]["symlink"] for r in repos] == [True, False]

    def test_fetch_failure_aborts(self, cfg, fake_az, write_json, make_manifest) -> None:
        fake_az.failures["acme.widget"] = "ERROR: 401"
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0", "acme/other": "1.0"},
            [_group("acme/widget", "acme/other")],
        ))
        with pytest.raises(FetchError, match="401"):
            FeedService(cfg, executor=fake_az).before_resolve()
        assert fake_az.downloaded() == [("acme.widget", "1.2.0")]
        assert not Path(cfg.repositories_file).exists()

    def test_empty_run_overwrites_previous_sources(self, cfg, fake_az, write_json, make_manifest) -> None:
        svc = FeedService(cfg, executor=fake_az)
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0"}, [_group("acme/widget")],
        ))
        svc.before_resolve()
        assert len(json.loads(Path(cfg.repositories_file).read_text(encoding="utf-8"))) == 1

        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "dev-main"}, [_group("acme/widget")],
        ))
        assert svc.before_resolve() == []
        assert json.loads(Path(cfg.repositories_file).read_text(encoding="utf-8")) == []

    def test_removed_feed_groups_delete_saved_sources(self, cfg, fake_az, write_json, make_manifest) -> None:
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0"}, [_group("acme/widget")],
        ))
        FeedService(cfg, executor=fake_az).before_resolve()
        assert Path(cfg.repositories_file).exists()

        write_json("composer.json", make_manifest("root/app", {"acme/widget": "1.2.0"}))
        FeedService(cfg, executor=fake_az).before_resolve()
        assert not Path(cfg.repositories_file).exists()

    def test_install_only_keeps_wildcard(self, cfg, fake_az, write_json, make_manifest) -> None:
        fake_az.versions["acme.widget"] = "3.2.1"
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "3.*"}, [_group("acme/widget")],
        ))
        [item] = FeedService(cfg, executor=fake_az).before_resolve(install_only=True)
        assert item.path.name == "wildcard"
        assert item.version.raw == "3.2.1"


class TestAfterResolve:
    def test_lock_made_portable(self, cfg, fake_az) -> None:
        _write_lock(cfg, str(cfg.feed_cache_root))
        assert FeedService(cfg, executor=fake_az).after_resolve() is True
        lock = json.loads(Path(cfg.lock_file).read_text(encoding="utf-8"))
        assert lock["packages"][0]["dist"]["url"].startswith(PORTABLE)

    def test_missing_lock_is_noop(self, cfg, fake_az) -> None:
        assert FeedService(cfg, executor=fake_az).after_resolve() is False

    def test_before_then_after_round_trip(self, cfg, fake_az, write_json, make_manifest) -> None:
        write_json("composer.json", make_manifest(
            "root/app", {"acme/widget": "1.2.0"}, [_group("acme/widget")],
        ))
        _write_lock(cfg, PORTABLE)
        original = json.loads(Path(cfg.lock_file).read_text(encoding="utf-8"))
        svc = FeedService(cfg, executor=fake_az)
        svc.before_resolve()
        svc.after_resolve()
        assert json.loads(Path(cfg.lock_file).read_text(encoding="utf-8")) == original
