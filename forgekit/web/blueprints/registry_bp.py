"""包注册表 API Blueprint"""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, Response, jsonify, request

from forgekit.web.responses import bad_request

registry_bp = Blueprint("registry", __name__, url_prefix="/api/registry")


def _client():  # type: ignore[no-untyped-def]
    from forgekit.services.container import get_container
    return get_container().registry


@registry_bp.route("/search", methods=["GET"])
def search() -> tuple[Response, int] | Response:
    query = request.args.get("q", "")
    if not query:
        return bad_request("需要提供查询参数 q")
    packages = _client().search_packages(query)
    return jsonify(packages=[asdict(p) for p in packages])


@registry_bp.route("/info/<name>/<version>", methods=["GET"])
def info(name: str, version: str) -> Response:
    return jsonify(package=asdict(_client().get_package_info(name, version)))


@registry_bp.route("/packages", methods=["GET"])
def list_packages() -> Response:
    return jsonify(packages=sorted(_client().list_packages()))


@registry_bp.route("/update", methods=["POST"])
def update() -> Response:
    client = _client()
    client.update_index()
    return jsonify(message="索引已更新", count=len(client.list_packages()))
