# social/stores/__init__.py
"""
반응/댓글 문서를 MongoDB에 저장하는 저장소 계층

- ReactionStore: 콘텐츠별 반응 버킷 문서의 조건부 원자적 갱신
- CommentThreadStore: 콘텐츠별 댓글 스레드 문서의 $push/$pull 갱신
"""

from .reaction_store import ReactionStore
from .comment_store import CommentThreadStore

__all__ = ['ReactionStore', 'CommentThreadStore']
