"""构建产物缓存 API Blueprint"""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, Response, jsonify, request

from forgekit.web.responses import bad_request

cache_bp = Blueprint("cache", __name__, url_prefix="/api/cache")


def _cache():  # type: ignore[no-untyped-def]
    from forgekit.services.container import get_container
    return get_container().artifacts


@cache_bp.route("/stats", methods=["GET"])
def stats() -> Response:
    return jsonify(stats=asdict(_cache().stats()))


@cache_bp.route("/invalidate", methods=["POST"])
def invalidate() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    pattern = body.get("pattern", "")
    if not pattern:
        return bad_request("需要提供 pattern")
    return jsonify(pattern=pattern, removed=_cache().invalidate(pattern))


@cache_bp.route("/clear", methods=["POST"])
def clear() -> Response:
    _cache().clear()
    return jsonify(message="缓存已清空")
