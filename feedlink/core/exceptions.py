"""统一异常体系

所有业务异常继承 FeedLinkError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示。
"""

from __future__ import annotations


class FeedLinkError(Exception):
    """插件基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(FeedLinkError):
    """配置文件或 feed 声明内容无效"""

    code = "CONFIG_ERROR"


class FetchError(FeedLinkError):
    """外部下载命令失败，output 保留命令的原始输出"""

    code = "FETCH_ERROR"

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class RelocationError(FeedLinkError):
    """通配版本下载后目录迁移失败（源目录保持不动）"""

    code = "RELOCATION_ERROR"

    def __init__(self, message: str, source: str = "", target: str = "") -> None:
        super().__init__(message)
        self.source = source
        self.target = target


class LockFileError(FeedLinkError):
    """lock 文件无法读取或内容不是合法 JSON"""

    code = "LOCK_ERROR"
