"""feedlink 命令行接口

由宿主安装/更新流程在解析前后调用。CLI 按职责拆分为子模块，
每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import click

from feedlink import __version__
from feedlink.core.config import Config, init_config
from feedlink.utils.logger import setup_logging


def _load_config(config_path: str, manifest: str | None, lock: str | None) -> Config:
    """加载配置并应用命令行覆盖"""
    cfg = init_config(config_path)
    if manifest:
        cfg.manifest = manifest
    if lock:
        cfg.lock_file = lock
    return cfg


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default="feedlink.yml", help="配置文件路径")
@click.option("--manifest", default=None, help="项目清单路径（覆盖配置）")
@click.option("--lock", default=None, help="lock 文件路径（覆盖配置）")
@click.pass_context
def main(ctx: click.Context, config_path: str, manifest: str | None, lock: str | None) -> None:
    """feedlink - 从 Azure Artifacts feed 拉取私有制品"""
    setup_logging()
    ctx.obj = _load_config(config_path, manifest, lock)


# 注册各子命令
from feedlink.cli.cmd_hooks import register as _reg_hooks  # noqa: E402

_reg_hooks(main)
