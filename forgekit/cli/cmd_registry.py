"""CLI - 包索引与归档缓存命令"""

from __future__ import annotations

import click

from forgekit.cli import _svc


def register(group: click.Group) -> None:
    group.add_command(registry_group)
    group.add_command(serve)


@click.group(name="registry")
def registry_group() -> None:
    """本地包索引与归档缓存"""


@registry_group.command(name="update")
def registry_update() -> None:
    """刷新本地包索引"""
    client = _svc().registry
    client.update_index()
    click.echo(f"索引已更新: {len(client.list_packages())} 个包")


@registry_group.command(name="list")
def registry_list() -> None:
    """列出索引中的包"""
    names = _svc().registry.list_packages()
    if not names:
        click.echo("索引为空，先执行 forgekit registry update。")
        return
    for name in sorted(names):
        click.echo(f"  {name}")


@registry_group.command(name="archives")
def registry_archives() -> None:
    """列出已缓存的归档"""
    files = _svc().registry.list_cached_archives()
    if not files:
        click.echo("归档缓存为空。")
        return
    for f in files:
        click.echo(f"  {f}")


@registry_group.command(name="clean")
def registry_clean() -> None:
    """清空归档缓存"""
    _svc().registry.clean_archive_cache()
    click.echo("归档缓存已清空。")


@click.command()
@click.option("--host", default="127.0.0.1", help="监听地址")
@click.option("--port", default=8888, help="监听端口")
def serve(host: str, port: int) -> None:
    """启动 HTTP API"""
    from forgekit.web.app import run_server
    run_server(host=host, port=port)
