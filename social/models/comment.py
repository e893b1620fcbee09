# social/models/comment.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from social.utils.datetime_utils import DateTimeUtils

@dataclass
class Reply:
    """Comment 내부에 저장되는 답글."""
    reply_id: str
    user_id: str
    text: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Reply':
        return cls(
            reply_id=data['reply_id'],
            user_id=data['user_id'],
            text=data.get('text', ''),
            created_at=DateTimeUtils.to_utc(data.get('created_at'))
        )

@dataclass
class Comment:
    """CommentThread 문서의 comments 배열에 저장되는 댓글. 답글 목록을 직접 소유합니다."""
    comment_id: str
    user_id: str
    text: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    replies: List[Reply] = field(default_factory=list)

    @property
    def reply_count(self) -> int:
        return len(self.replies)

    def find_reply(self, reply_id: str) -> Optional[Reply]:
        return next((r for r in self.replies if r.reply_id == reply_id), None)

    def remove_reply(self, reply_id: str) -> bool:
        before = len(self.replies)
        self.replies = [r for r in self.replies if r.reply_id != reply_id]
        return len(self.replies) < before

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Comment':
        return cls(
            comment_id=data['comment_id'],
            user_id=data['user_id'],
            text=data.get('text', ''),
            created_at=DateTimeUtils.to_utc(data.get('created_at')),
            replies=[Reply.from_dict(r) for r in data.get('replies') or []]
        )

@dataclass
class CommentThread:
    """
    MongoDB 'comment_threads' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    콘텐츠 하나당 문서 하나이며, comments는 생성 순서를 유지합니다.
    """
    content_type: str
    content_id: str
    comments: List[Comment] = field(default_factory=list)

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        return next((c for c in self.comments if c.comment_id == comment_id), None)

    def remove_comment(self, comment_id: str) -> bool:
        before = len(self.comments)
        self.comments = [c for c in self.comments if c.comment_id != comment_id]
        return len(self.comments) < before

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CommentThread':
        return cls(
            content_type=data.get('content_type'),
            content_id=data.get('content_id'),
            comments=[Comment.from_dict(c) for c in data.get('comments') or []]
        )
