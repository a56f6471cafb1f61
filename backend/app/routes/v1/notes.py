"""Note API routes.

提供笔记的 CRUD 接口和 AI 动作（摘要 / 改写）。

- 响应体直接返回笔记 JSON（无包装），错误统一由异常处理器转换
- summarize 不修改存储；rewrite 会把改写结果写回笔记正文
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.core.deps import get_note_id, get_note_or_404, get_note_service
from app.schemas import ErrorResponse, Note, NoteCreate, RewriteResponse, SummaryResponse
from domains.note_hub import NoteService

router = APIRouter()

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "笔记不存在"}}
GATEWAY_RESPONSES = {
    **NOT_FOUND_RESPONSE,
    500: {"model": ErrorResponse, "description": "LLM 网关调用失败"},
}


@router.get("", response_model=List[Note])
async def list_notes(service: NoteService = Depends(get_note_service)):
    """获取全部笔记（插入顺序）"""
    return [Note.from_domain(n) for n in service.list_notes()]


@router.post(
    "",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "标题或正文缺失"}},
)
async def create_note(
    request: NoteCreate,
    service: NoteService = Depends(get_note_service),
):
    """创建新笔记"""
    note = service.create_note(title=request.title, body=request.body)
    return Note.from_domain(note)


@router.get("/{note_id}", response_model=Note, responses=NOT_FOUND_RESPONSE)
async def get_note(note=Depends(get_note_or_404)):
    """获取笔记详情"""
    return Note.from_domain(note)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND_RESPONSE,
)
async def delete_note(
    note_id: int = Depends(get_note_id),
    service: NoteService = Depends(get_note_service),
):
    """删除笔记"""
    service.delete_note(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{note_id}/summarize", response_model=SummaryResponse, responses=GATEWAY_RESPONSES)
async def summarize_note(
    note_id: int = Depends(get_note_id),
    service: NoteService = Depends(get_note_service),
):
    """
    生成 AI 摘要

    摘要只返回给客户端，笔记本身不变。
    """
    summary = await service.summarize_note(note_id)
    return SummaryResponse(summary=summary)


@router.post("/{note_id}/rewrite", response_model=RewriteResponse, responses=GATEWAY_RESPONSES)
async def rewrite_note(
    note_id: int = Depends(get_note_id),
    service: NoteService = Depends(get_note_service),
):
    """
    AI 改写笔记

    改写结果会覆盖笔记正文，标题、ID 和创建时间保持不变。
    """
    rewritten = await service.rewrite_note(note_id)
    return RewriteResponse(rewritten=rewritten)
