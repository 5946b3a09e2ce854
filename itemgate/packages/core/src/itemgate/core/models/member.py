"""Member / Actor Domain Model

每个 Task 都显式携带一个 actor。未登录请求使用由配置构造的公共 actor，
它是普通的 Member 值，不存放在全局状态中。
"""

from pydantic import BaseModel, Field

from .enums import MemberType


class Member(BaseModel):
    """成员（任务执行者）"""

    id: str = Field(description="唯一标识")
    name: str = Field(description="显示名称")
    email: str = Field(default="", description="邮箱")
    type: MemberType = Field(default=MemberType.INDIVIDUAL, description="成员类型")


# Task 的执行者即 Member
Actor = Member


def build_public_actor(actor_id: str, name: str) -> Member:
    """构造匿名访问时使用的公共 actor"""
    return Member(id=actor_id, name=name, email="")
