"""轻量级 HTTP API（基于 Flask）

提供：项目依赖增删、包搜索与版本查询、索引刷新、构建产物缓存统计与失效。

启动方式: forgekit serve --port 8888
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from forgekit.core.exceptions import ForgeKitError
from forgekit.web.blueprints import cache_bp, packages_bp, registry_bp
from forgekit.web.responses import error

logger = logging.getLogger(__name__)

app = Flask(__name__)

app.register_blueprint(packages_bp)
app.register_blueprint(registry_bp)
app.register_blueprint(cache_bp)


# =========================================================================
# 全局 JSON 错误处理
# =========================================================================


@app.errorhandler(ForgeKitError)
def handle_forgekit_error(exc: ForgeKitError):
    """框架异常按类别映射状态码"""
    logger.warning("请求失败 [%s]: %s", exc.code, exc)
    return error(exc)


@app.errorhandler(HTTPException)
def handle_http_exception(exc: HTTPException):
    """将所有 HTTP 异常统一返回 JSON"""
    return jsonify(error=exc.description), exc.code


@app.errorhandler(Exception)
def handle_generic_exception(exc):  # noqa: ARG001
    """捕获未处理异常，返回 500 JSON"""
    logger.exception("未处理的异常")
    return jsonify(error="服务器内部错误"), 500


@app.route("/api/health")
def health():
    from forgekit import __version__
    return jsonify(status="ok", version=__version__)


def run_server(host: str = "127.0.0.1", port: int = 8888) -> None:
    logger.info("HTTP API 启动: http://%s:%d", host, port)
    app.run(host=host, port=port)
