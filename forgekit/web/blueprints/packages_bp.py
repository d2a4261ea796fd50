"""项目依赖 API Blueprint"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from forgekit.web.responses import bad_request, ok

packages_bp = Blueprint("packages", __name__, url_prefix="/api/packages")


def _pm():  # type: ignore[no-untyped-def]
    from forgekit.services.container import get_container
    return get_container().packages


@packages_bp.route("", methods=["GET"])
def list_installed() -> Response:
    return jsonify(installed=_pm().list_installed())


@packages_bp.route("", methods=["POST"])
def add() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    name = str(body.get("name", "")).strip()
    version = str(body.get("version", "")).strip()
    if not name or not version:
        return bad_request("需要提供 name 和 version")
    target = _pm().add_dependency(name, version)
    return ok({"message": f"已添加: {name}@{version}", "path": str(target)}, 201)


@packages_bp.route("/<name>", methods=["DELETE"])
def remove(name: str) -> Response:
    removed = _pm().remove_dependency(name)
    return jsonify(name=name, removed=removed)


@packages_bp.route("/update", methods=["POST"])
def update() -> Response:
    return jsonify(updated=_pm().update_dependencies())
