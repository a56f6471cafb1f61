"""
笔记数据模型定义

Note 是唯一的实体：标题 + 正文 + 创建时间。
- 标题创建后不可修改
- 正文可被 rewrite 动作原地覆盖
- 创建时间创建后不再变化
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Note:
    """
    笔记数据类

    Attributes:
        id: 笔记 ID（从 1 开始单调递增，删除后不复用）
        title: 笔记标题
        body: 笔记正文
        created_at: 创建时间（UTC）
    """
    id: int
    title: str
    body: str
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            'id': self.id,
            'title': self.title,
            'body': self.body,
            'created_at': self.created_at,
        }
