"""
笔记服务层

提供笔记的业务逻辑封装:
- CRUD：代理存储层
- summarize：生成摘要，不修改存储
- rewrite：改写正文，并写回存储
"""

from typing import Any, List, Protocol

from domains.core import GatewayError
from domains.infra.logging import get_logger

from ..core.models import Note
from ..core.store import NoteStore
from .prompts import (
    REWRITE_SYSTEM_PROMPT,
    SUMMARIZE_SYSTEM_PROMPT,
    rewrite_user_prompt,
    summarize_user_prompt,
)

logger = get_logger(__name__)


class TextGenerator(Protocol):
    """LLM 网关接口（LLMClient 满足该协议）"""

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        model_key: str | None = None,
        caller: str = "",
        purpose: str = "",
    ) -> str: ...


class NoteService:
    """
    笔记服务层

    封装笔记相关的业务逻辑，代理存储层操作。
    """

    def __init__(
        self,
        store: NoteStore | None = None,
        llm_client: TextGenerator | None = None,
    ):
        """
        初始化服务

        Args:
            store: 笔记存储层实例
            llm_client: LLM 网关，None 则首次使用时取全局客户端
        """
        self.store = store if store is not None else NoteStore()
        self._llm_client = llm_client

    @property
    def llm_client(self) -> TextGenerator:
        """延迟获取 LLM 网关"""
        if self._llm_client is None:
            from domains.infra.llm import get_llm_client
            self._llm_client = get_llm_client()
        return self._llm_client

    # ==================== CRUD ====================

    def list_notes(self) -> List[Note]:
        """获取所有笔记"""
        return self.store.get_all()

    def get_note(self, note_id: int) -> Note:
        """获取笔记详情，不存在抛出 NotFoundError"""
        return self.store.get(note_id)

    def create_note(self, title: Any, body: Any) -> Note:
        """创建笔记，标题或正文为空时抛出 ValidationError"""
        note = self.store.create(title, body)
        logger.info(
            "note_created",
            note_id=note.id,
            title_chars=len(note.title),
            body_chars=len(note.body),
        )
        return note

    def delete_note(self, note_id: int) -> None:
        """删除笔记，不存在抛出 NotFoundError"""
        self.store.delete(note_id)
        logger.info("note_deleted", note_id=note_id)

    # ==================== AI 动作 ====================

    async def summarize_note(self, note_id: int) -> str:
        """
        生成笔记摘要

        笔记不存在时在调用网关之前抛出 NotFoundError。
        摘要只返回给调用方，不写回存储。
        """
        note = self.store.get(note_id)

        try:
            summary = await self.llm_client.generate(
                SUMMARIZE_SYSTEM_PROMPT,
                summarize_user_prompt(note.body),
                caller="note_service",
                purpose="summarize",
            )
        except GatewayError as e:
            logger.error("note_ai_action_failed", action="summarize", note_id=note_id, error=str(e))
            raise GatewayError("Failed to summarize note", details={"note_id": note_id}, cause=e) from e

        logger.info("note_summarized", note_id=note_id, summary_chars=len(summary))
        return summary

    async def rewrite_note(self, note_id: int) -> str:
        """
        改写笔记正文

        笔记不存在时在调用网关之前抛出 NotFoundError。
        改写结果直接覆盖正文（不校验长度），标题/ID/创建时间保持不变。
        若改写期间笔记被删除，写回时抛出 NotFoundError。
        """
        note = self.store.get(note_id)

        try:
            rewritten = await self.llm_client.generate(
                REWRITE_SYSTEM_PROMPT,
                rewrite_user_prompt(note.body),
                caller="note_service",
                purpose="rewrite",
            )
        except GatewayError as e:
            logger.error("note_ai_action_failed", action="rewrite", note_id=note_id, error=str(e))
            raise GatewayError("Failed to rewrite note", details={"note_id": note_id}, cause=e) from e

        self.store.update_body(note_id, rewritten)
        logger.info(
            "note_rewritten",
            note_id=note_id,
            old_body_chars=len(note.body),
            new_body_chars=len(rewritten),
        )
        return rewritten
