"""forgekit 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import os
from typing import Any

import click

from forgekit import __version__
from forgekit.core.exceptions import ForgeKitError
from forgekit.services.container import get_container
from forgekit.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


def _packages(ctx: click.Context) -> Any:
    """按 --project 选择项目的包管理器"""
    project = (ctx.obj or {}).get("project")
    if project:
        return _svc().packages_for(project)
    return _svc().packages


class ForgeKitGroup(click.Group):
    """把框架异常转换为带错误码的 CLI 错误（退出码 1）"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except ForgeKitError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e


@click.group(cls=ForgeKitGroup)
@click.version_option(version=__version__)
@click.option("--config", "-c", default="forgekit.config.yml", help="配置文件路径")
@click.option("--project", "-p", default=None, help="项目根目录（默认取配置中的 project_root）")
@click.pass_context
def main(ctx: click.Context, config: str, project: str | None) -> None:
    """forgekit - 包管理与构建产物缓存"""
    from forgekit.core.config import init_config

    setup_logging(
        level=os.getenv("FORGEKIT_LOG_LEVEL", "INFO"),
        json_output=os.getenv("FORGEKIT_LOG_JSON", "") == "1",
    )
    init_config(config)
    ctx.obj = {"project": project}


# 注册各领域子命令
from forgekit.cli.cmd_cache import register as _reg_cache  # noqa: E402
from forgekit.cli.cmd_deps import register as _reg_deps  # noqa: E402
from forgekit.cli.cmd_registry import register as _reg_registry  # noqa: E402

_reg_deps(main)
_reg_registry(main)
_reg_cache(main)
