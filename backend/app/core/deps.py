"""Route dependencies.

路由只依赖 NoteService；测试用 app.dependency_overrides[get_note_service] 注入替身。
"""

from typing import Annotated

from fastapi import Depends, Path

from domains.core import NotFoundError, get_service_registry, register_core_services
from domains.note_hub import Note, NoteService


def get_note_service() -> NoteService:
    registry = get_service_registry()
    if "note_service" not in registry:
        register_core_services()
    return registry.get("note_service")


def get_note_id(note_id: Annotated[str, Path(description="笔记 ID")]) -> int:
    """
    解析路径里的笔记 ID

    ID 按字符串接收，"abc"、"0"、"1.5" 这类值不会被 FastAPI 当作 422，
    而是和不存在的 ID 一样返回 404。
    """
    if not note_id.isdecimal() or int(note_id) < 1:
        raise NotFoundError("Note", note_id)
    return int(note_id)


def get_note_or_404(
    note_id: int = Depends(get_note_id),
    service: NoteService = Depends(get_note_service),
) -> Note:
    return service.get_note(note_id)
