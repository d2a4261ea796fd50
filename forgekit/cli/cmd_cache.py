"""CLI - 构建产物缓存命令"""

from __future__ import annotations

import click

from forgekit.cli import _svc


def register(group: click.Group) -> None:
    group.add_command(cache_group)


@click.group(name="cache")
def cache_group() -> None:
    """构建产物缓存管理"""


@cache_group.command(name="stats")
@click.option("--warm", is_flag=True, help="统计前先从磁盘载入全部条目")
def cache_stats(warm: bool) -> None:
    """显示缓存统计"""
    cache = _svc().artifacts
    if warm:
        cache.load_from_disk()
    s = cache.stats()
    click.echo(f"条目数: {s.item_count}")
    click.echo(f"总大小: {s.total_size} 字节")
    click.echo(f"命中: {s.hits}  未命中: {s.misses}  命中率: {s.hit_rate:.2%}")


@cache_group.command(name="invalidate")
@click.argument("pattern")
def cache_invalidate(pattern: str) -> None:
    """删除键匹配 glob 模式的缓存（* 任意长度，? 单个字符）"""
    removed = _svc().artifacts.invalidate(pattern)
    click.echo(f"已删除 {removed} 项")


@cache_group.command(name="clear")
@click.confirmation_option(prompt="确认清空全部构建产物缓存？")
def cache_clear() -> None:
    """清空全部缓存"""
    _svc().artifacts.clear()
    click.echo("缓存已清空。")


@cache_group.command(name="warm")
def cache_warm() -> None:
    """从磁盘预热缓存"""
    loaded = _svc().artifacts.load_from_disk()
    click.echo(f"已载入 {loaded} 项")
