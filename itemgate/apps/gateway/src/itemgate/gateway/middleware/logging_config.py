"""日志配置

ITEMGATE_LOG_FORMAT: dev（默认，控制台可读输出）/ json（每行一个 JSON 对象）
ITEMGATE_LOG_LEVEL: 标准 logging 级别名，默认 INFO
LOGFIRE_SEND_TO_LOGFIRE=true 时额外启用 Logfire，失败时降级为纯本地日志。

structlog 与标准库 logging 共用同一条处理链，aiosqlite / uvicorn 等第三方日志
也带上请求上下文（request_id、actor、item_id）一起输出。
"""

import logging
import os

import structlog

LOG_FORMATS = ("dev", "json")
DEFAULT_LOG_FORMAT = "dev"
DEFAULT_LOG_LEVEL = "INFO"

# aiosqlite 在 DEBUG 级别记录每一条语句；请求日志已由 RequestContextMiddleware 输出
_QUIET_LOGGERS = ("aiosqlite", "uvicorn.access")


def _read_log_settings() -> tuple[str, str, list[tuple[str, str, str]]]:
    """读取日志环境变量

    Returns:
        (格式, 级别名, 被拒绝的取值列表 [(环境变量, 原值, 回退值)])
    """
    rejected: list[tuple[str, str, str]] = []

    log_format = os.environ.get("ITEMGATE_LOG_FORMAT", DEFAULT_LOG_FORMAT).lower()
    if log_format not in LOG_FORMATS:
        rejected.append(("ITEMGATE_LOG_FORMAT", log_format, DEFAULT_LOG_FORMAT))
        log_format = DEFAULT_LOG_FORMAT

    level_name = os.environ.get("ITEMGATE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level_name), int):
        rejected.append(("ITEMGATE_LOG_LEVEL", level_name, DEFAULT_LOG_LEVEL))
        level_name = DEFAULT_LOG_LEVEL

    return log_format, level_name, rejected


def setup_logging() -> str:
    """初始化 structlog 与根 logger

    Returns:
        实际生效的日志格式
    """
    log_format, level_name, rejected = _read_log_settings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format == "json":
        render_chain: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        render_chain = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *render_chain,
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_name)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    log = structlog.get_logger(__name__)
    for env_var, value, fallback in rejected:
        log.warning("invalid_log_config", env_var=env_var, value=value, fallback=fallback)

    return log_format


def setup_logfire() -> bool:
    """按 LOGFIRE_SEND_TO_LOGFIRE 启用 Logfire

    Returns:
        Logfire 是否已启用
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return False
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi()
    except Exception as e:
        structlog.get_logger(__name__).warning("logfire_init_failed", error=str(e))
        return False
    return True
