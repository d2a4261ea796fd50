"""Web 层统一响应辅助函数"""

from __future__ import annotations

from flask import Response, jsonify

from forgekit.core.exceptions import (
    ConflictError,
    ForgeKitError,
    InvalidDataError,
    NetworkError,
    NotFoundError,
)


def ok(data: dict, status: int = 200) -> tuple[Response, int] | Response:
    """成功响应"""
    if status == 200:
        return jsonify(data)
    return jsonify(data), status


def bad_request(message: str) -> tuple[Response, int]:
    """请求参数错误"""
    return jsonify(error=message), 400


def status_for(exc: ForgeKitError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, InvalidDataError):
        return 400
    if isinstance(exc, NetworkError):
        return 502
    return 500


def error(exc: ForgeKitError) -> tuple[Response, int]:
    """框架异常 → JSON 错误响应"""
    return jsonify(error=str(exc), code=exc.code), status_for(exc)
