"""
个人笔记领域模块

核心功能：
- 笔记 CRUD：内存存储，进程重启即丢失
- AI 摘要：调用 LLM 网关生成 1-2 句摘要，不修改存储
- AI 改写：调用 LLM 网关改写正文，并覆盖原正文
"""

from .core.models import Note
from .core.store import NoteStore
from .services.note_service import NoteService

__all__ = [
    'Note',
    'NoteStore',
    'NoteService',
]
