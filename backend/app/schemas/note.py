"""Note request / response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from domains.note_hub import Note as NoteRecord


class NoteCreate(BaseModel):
    """
    创建笔记请求

    两个字段都声明为可选：缺失、空串和纯空白统一由领域层判定，
    返回同一条 400 信息。
    """

    title: Optional[str] = Field(None, description="笔记标题")
    body: Optional[str] = Field(None, description="笔记正文")


class Note(BaseModel):
    """笔记，序列化时创建时间使用 createdAt"""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    body: str
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_domain(cls, note: NoteRecord) -> "Note":
        return cls(**note.to_dict())


class SummaryResponse(BaseModel):
    summary: str


class RewriteResponse(BaseModel):
    rewritten: str = Field(..., description="改写后的正文，已写回笔记")
