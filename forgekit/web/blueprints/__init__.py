"""Web 路由模块 - Blueprint 集合

- packages_bp.py: 项目依赖增删改查
- registry_bp.py: 包搜索、版本信息、索引刷新
- cache_bp.py: 构建产物缓存统计与失效
"""

from forgekit.web.blueprints.cache_bp import cache_bp
from forgekit.web.blueprints.packages_bp import packages_bp
from forgekit.web.blueprints.registry_bp import registry_bp

__all__ = ["packages_bp", "registry_bp", "cache_bp"]
