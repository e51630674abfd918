"""日志配置

提供商接口把 access_token 放在查询参数里，httpx 会在 INFO 级别打印完整 URL，
所以根处理器上挂一个脱敏过滤器。
"""

import logging
import re

from config.providers import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class SensitiveDataFilter(logging.Filter):
    """屏蔽日志中的 token 和 secret"""

    PATTERNS = [
        (re.compile(r"(access_token|refresh_token|client_secret)=([^&\s\"']+)", re.IGNORECASE), r"\1=***"),
        (re.compile(r"(authorization:\s*bearer)\s+([^\s]+)", re.IGNORECASE), r"\1 ***"),
    ]

    @classmethod
    def sanitize(cls, message: str) -> str:
        for pattern, replacement in cls.PATTERNS:
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        sanitized = self.sanitize(message)
        if sanitized != message:
            record.msg = sanitized
            record.args = None
        return True


def setup_logging(level: str | None = None) -> None:
    """配置根 logger，重复调用不会叠加处理器"""
    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    for handler in root.handlers:
        if getattr(handler, "_weibo_token", False):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(SensitiveDataFilter())
    handler._weibo_token = True
    root.addHandler(handler)
