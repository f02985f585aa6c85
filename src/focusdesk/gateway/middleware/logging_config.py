"""日志配置 -- structlog 与标准库 logging 共用一条处理器链

- FOCUSDESK_LOG_FORMAT：dev（控制台可读输出，默认）或 json（每行一个 JSON 对象，异常以字典展开）
- FOCUSDESK_LOG_LEVEL：根 logger 级别，未知名称按 INFO 处理

uvicorn 访问日志与 LoggingMiddleware 的请求日志重复，aiosqlite/httpx 的调试输出过于琐碎，
这几个 logger 最低只输出 WARNING。
"""

import logging
import os
import sys

import structlog
from structlog.types import Processor

LOG_FORMATS = ("dev", "json")
HANDLER_NAME = "focusdesk"
QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "httpx", "httpcore")


def resolve_level(name: str) -> int:
    """日志级别名 -> logging 数值"""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _pre_chain(log_format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
    processors.append(structlog.processors.UnicodeDecoder())
    return processors


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化日志

    参数缺省时读取环境变量。可重复调用：只替换本模块安装的 handler，
    其他 handler（例如测试框架的捕获器）保持不变。
    """
    fmt = (log_format or os.environ.get("FOCUSDESK_LOG_FORMAT", "dev")).lower()
    if fmt not in LOG_FORMATS:
        fmt = "dev"
    level = resolve_level(log_level or os.environ.get("FOCUSDESK_LOG_LEVEL", "INFO"))

    pre_chain = _pre_chain(fmt)
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(fmt),
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
