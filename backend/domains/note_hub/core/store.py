"""
笔记存储层 - 进程内存数据源

笔记只在进程生命周期内存在，重启即丢失。
单次读写在同一把锁内完成。
"""

import logging
import threading
from dataclasses import replace
from typing import Any, List, Optional

from domains.core import NotFoundError, ValidationError

from .models import Note, utc_now

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Title and body are required"


def _require_text(value: Any, field_name: str) -> str:
    """校验必填文本字段，返回去除首尾空白后的值"""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(REQUIRED_FIELDS_MESSAGE, field=field_name)
    return value.strip()


class NoteStore:
    """
    笔记存储层 - 内存实现

    - 按插入顺序保存笔记
    - ID 单调递增，删除后不复用
    - 返回的 Note 均为副本，修改它们不会影响存储
    """

    def __init__(self):
        self._notes: List[Note] = []
        self._next_id = 1
        self._lock = threading.Lock()

    # ==================== 查询 ====================

    def get_all(self) -> List[Note]:
        """获取所有笔记（插入顺序，无分页）"""
        with self._lock:
            return [replace(note) for note in self._notes]

    def find_by_id(self, note_id: int) -> Optional[Note]:
        """按 ID 查找笔记，不存在返回 None"""
        with self._lock:
            note = self._find(note_id)
            return replace(note) if note else None

    def get(self, note_id: int) -> Note:
        """按 ID 获取笔记，不存在抛出 NotFoundError"""
        note = self.find_by_id(note_id)
        if note is None:
            raise NotFoundError("Note", note_id)
        return note

    def count(self) -> int:
        with self._lock:
            return len(self._notes)

    def __len__(self) -> int:
        return self.count()

    # ==================== 写入 ====================

    def create(self, title: Any, body: Any) -> Note:
        """
        创建笔记

        Raises:
            ValidationError: 标题或正文缺失、或去除空白后为空
        """
        title = _require_text(title, "title")
        body = _require_text(body, "body")

        with self._lock:
            note = Note(id=self._next_id, title=title, body=body, created_at=utc_now())
            self._next_id += 1
            self._notes.append(note)
            logger.debug(f"Note {note.id} stored, total={len(self._notes)}")
            return replace(note)

    def update_body(self, note_id: int, new_body: str) -> Note:
        """
        原地覆盖笔记正文

        仅供 rewrite 动作使用，不校验 new_body。

        Raises:
            NotFoundError: 笔记不存在（例如在改写期间已被删除）
        """
        with self._lock:
            note = self._find(note_id)
            if note is None:
                raise NotFoundError("Note", note_id)
            note.body = new_body
            return replace(note)

    def delete(self, note_id: int) -> None:
        """
        删除笔记

        Raises:
            NotFoundError: 笔记不存在
        """
        with self._lock:
            for index, note in enumerate(self._notes):
                if note.id == note_id:
                    del self._notes[index]
                    logger.debug(f"Note {note_id} removed, total={len(self._notes)}")
                    return
        raise NotFoundError("Note", note_id)

    def clear(self) -> None:
        """清空所有笔记，ID 计数器保持不变"""
        with self._lock:
            self._notes.clear()

    def _find(self, note_id: int) -> Optional[Note]:
        # 调用方必须持有锁
        for note in self._notes:
            if note.id == note_id:
                return note
        return None
