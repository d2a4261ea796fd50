"""统一异常体系

所有业务异常继承 ForgeKitError，按失败类别划分:
NotFound / Conflict / InvalidData / IOFailure / NetworkFailure / ArchiveFailure。
CLI 层据 code 输出友好提示，Web 层据此映射 HTTP 状态码。
"""

from __future__ import annotations


class ForgeKitError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NotFoundError(ForgeKitError):
    """清单、包、版本或归档不存在"""

    code = "NOT_FOUND"


class ConflictError(ForgeKitError):
    """重复的依赖名等冲突"""

    code = "CONFLICT"


class InvalidDataError(ForgeKitError):
    """清单、索引或远端响应内容无效"""

    code = "INVALID_DATA"


class ConfigError(InvalidDataError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(InvalidDataError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class StorageError(ForgeKitError):
    """文件系统读写失败"""

    code = "IO_FAILURE"


class NetworkError(ForgeKitError):
    """远端请求失败"""

    code = "NETWORK_FAILURE"


class ArchiveError(ForgeKitError):
    """包归档损坏或无法解压"""

    code = "ARCHIVE_FAILURE"
