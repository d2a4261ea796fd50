"""CLI - 项目依赖管理命令"""

from __future__ import annotations

from pathlib import Path

import click

from forgekit.cli import _packages


def register(group: click.Group) -> None:
    group.add_command(init)
    group.add_command(add)
    group.add_command(remove)
    group.add_command(update)
    group.add_command(installed)
    group.add_command(search)
    group.add_command(info)
    group.add_command(check)


@click.command()
@click.argument("name")
@click.option("--version", "version", default="0.1.0", help="项目版本")
@click.pass_context
def init(ctx: click.Context, name: str, version: str) -> None:
    """在项目根目录创建 forgekit.yml"""
    pm = _packages(ctx)
    pm.store.init(name, version)
    click.echo(f"已创建: {pm.store.path}")


@click.command()
@click.argument("name")
@click.argument("version")
@click.pass_context
def add(ctx: click.Context, name: str, version: str) -> None:
    """下载并安装依赖，写入清单"""
    target: Path = _packages(ctx).add_dependency(name, version)
    click.echo(f"已添加: {name}@{version} -> {target}")


@click.command()
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """从清单移除依赖并删除安装目录"""
    if _packages(ctx).remove_dependency(name):
        click.echo(f"已移除: {name}")
    else:
        click.echo(f"清单中没有依赖: {name}")


@click.command()
@click.pass_context
def update(ctx: click.Context) -> None:
    """按清单版本重新安装全部依赖"""
    names = _packages(ctx).update_dependencies()
    if not names:
        click.echo("未定义任何依赖。")
        return
    click.echo(f"已更新 {len(names)} 个依赖: {', '.join(names)}")


@click.command()
@click.pass_context
def installed(ctx: click.Context) -> None:
    """列出 vendor/ 下已安装的包"""
    names = _packages(ctx).list_installed()
    if not names:
        click.echo("没有已安装的包。")
        return
    for name in names:
        click.echo(f"  {name}")


@click.command()
@click.argument("query")
@click.pass_context
def search(ctx: click.Context, query: str) -> None:
    """搜索包（本地索引优先）"""
    results = _packages(ctx).search_packages(query)
    if not results:
        click.echo(f"没有匹配的包: {query}")
        return
    for line in results:
        click.echo(f"  {line}")


@click.command()
@click.argument("name")
@click.argument("version")
@click.pass_context
def info(ctx: click.Context, name: str, version: str) -> None:
    """查看包版本信息"""
    click.echo(_packages(ctx).package_info(name, version))


@click.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """按本地索引解析清单中的全部依赖"""
    resolved = _packages(ctx).check_dependencies()
    for dep in resolved:
        click.echo(f"  {dep.name:24s} {dep.version:12s} {dep.download_url}")
    click.echo(f"全部 {len(resolved)} 个依赖可解析。")
