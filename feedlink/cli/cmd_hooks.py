"""CLI — 安装/更新流程挂载命令"""

from __future__ import annotations

import click

from feedlink.core.config import Config
from feedlink.core.exceptions import FeedLinkError
from feedlink.core.feed.extractor import extract_feed_groups
from feedlink.core.feed.manifest import Manifest
from feedlink.services.feed_service import FeedService


def register(group: click.Group) -> None:
    group.add_command(pre_install)
    group.add_command(pre_update)
    group.add_command(post_install)
    group.add_command(post_update)
    group.add_command(plan)


def _before_resolve(cfg: Config, install_only: bool) -> None:
    try:
        downloaded = FeedService(cfg).before_resolve(install_only=install_only)
    except FeedLinkError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    for item in downloaded:
        click.echo(f"就绪: {item.artifact} -> {item.path}")


def _after_resolve(cfg: Config) -> None:
    try:
        FeedService(cfg).after_resolve()
    except FeedLinkError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


@click.command(name="pre-install")
@click.pass_obj
def pre_install(cfg: Config) -> None:
    """install 前: 拉取 feed 制品（通配版本不迁移目录）"""
    _before_resolve(cfg, install_only=True)


@click.command(name="pre-update")
@click.pass_obj
def pre_update(cfg: Config) -> None:
    """update 前: 拉取 feed 制品"""
    _before_resolve(cfg, install_only=False)


@click.command(name="post-install")
@click.pass_obj
def post_install(cfg: Config) -> None:
    """install 后: lock 路径还原为可移植形式"""
    _after_resolve(cfg)


@click.command(name="post-update")
@click.pass_obj
def post_update(cfg: Config) -> None:
    """update 后: lock 路径还原为可移植形式"""
    _after_resolve(cfg)


@click.command()
@click.pass_obj
def plan(cfg: Config) -> None:
    """列出清单声明的 feed 制品（不下载）"""
    try:
        groups = extract_feed_groups(Manifest.load(cfg.manifest))
    except FeedLinkError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    if not groups:
        click.echo("未声明 feed 组。")
        return
    for group in groups:
        coords = group.coordinates
        click.echo(f"{coords} [{coords.scope.value}] symlink={coords.symlink}")
        if not group.artifacts:
            click.echo("  (无匹配的 require)")
        for artifact in group.artifacts:
            click.echo(f"  {artifact.name:30s} {artifact.version}")
