"""笔记服务层"""

from .note_service import NoteService, TextGenerator

__all__ = ['NoteService', 'TextGenerator']
