"""RequestContextMiddleware -- 请求级日志上下文

为每个请求绑定一组 structlog 上下文，贯穿该请求内所有任务日志：
- request_id: 沿用调用方传入的 X-Request-ID，没有或不合法时生成 ULID
- actor: X-Member-Id 中声明的成员 id，未携带时为 public
  （成员是否真实存在由依赖注入层判断，这里只做标记）
- item_id: 从 /p/items/{id}/... 或 /p/items/thumbnails/{id}/... 路径中提取

请求结束时记录 request_completed（状态码 + 耗时），响应头回写 X-Request-ID。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

from ..deps import MEMBER_HEADER

REQUEST_ID_HEADER = "X-Request-ID"
PUBLIC_ACTOR_LABEL = "public"

_MAX_REQUEST_ID_LENGTH = 64

# 不是 item id 的路径段
_RESERVED_SEGMENTS = {"with-categories", "upload", "thumbnails"}

log = structlog.get_logger()


def extract_item_id(path: str) -> str | None:
    """从请求路径中提取 item id，没有时返回 None"""
    parts = [part for part in path.split("/") if part]
    if len(parts) < 3 or parts[:2] != ["p", "items"]:
        return None

    candidate = parts[2]
    if candidate == "thumbnails" and len(parts) >= 4:
        candidate = parts[3]
    if candidate in _RESERVED_SEGMENTS:
        return None
    return candidate


def resolve_request_id(incoming: str | None) -> str:
    """调用方提供的 request id 可打印且不超长时沿用，否则新生成"""
    if incoming and len(incoming) <= _MAX_REQUEST_ID_LENGTH and incoming.isprintable():
        return incoming
    return str(ULID())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """绑定 request_id / actor / item_id 并记录请求结果"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            actor=request.headers.get(MEMBER_HEADER) or PUBLIC_ACTOR_LABEL,
        )
        item_id = extract_item_id(request.url.path)
        if item_id:
            structlog.contextvars.bind_contextvars(item_id=item_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            raise

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
