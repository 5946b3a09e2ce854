"""依赖注入模块 -- 通过 FastAPI Depends 注入服务与当前 actor

服务实例通过 app.state 管理，在 lifespan 中初始化/清理。
X-Member-Id 请求头对应 members 表中的成员；缺失或未知时视为匿名请求，
使用配置中的公共 actor。
"""

from fastapi import Depends, Header, Request
from itemgate.core.errors import MemberNotSignedIn
from itemgate.core.models import Member

from .services.public_items import PublicItemsService

MEMBER_HEADER = "X-Member-Id"


def get_public_items(request: Request) -> PublicItemsService:
    """从 app.state 获取 PublicItemsService 实例"""
    return request.app.state.public_items


async def get_current_member(
    member_id: str | None = Header(default=None, alias=MEMBER_HEADER),
    public_items: PublicItemsService = Depends(get_public_items),
) -> Member | None:
    """解析请求中的成员身份，匿名时返回 None"""
    if not member_id:
        return None
    return await public_items.get_member(member_id)


async def get_actor(
    member: Member | None = Depends(get_current_member),
    public_items: PublicItemsService = Depends(get_public_items),
) -> Member:
    """当前 actor：已登录成员，否则为公共 actor"""
    return member if member is not None else public_items.public_actor


async def require_member(
    member: Member | None = Depends(get_current_member),
) -> Member:
    """需要登录的接口使用，匿名请求直接拒绝"""
    if member is None:
        raise MemberNotSignedIn()
    return member
