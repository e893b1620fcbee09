# social/models/content.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

class ContentType(Enum):
    """반응/댓글의 대상이 되는 콘텐츠 유형"""
    POST = "post"
    REEL = "reel"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def comment_max_length(self) -> int:
        return COMMENT_MAX_LENGTH[self]

CONTENT_TYPE_VALUES = [c.value for c in ContentType]

# 콘텐츠 유형별 댓글 최대 길이. 답글은 유형과 관계없이 1000자입니다.
COMMENT_MAX_LENGTH = {
    ContentType.POST: 1000,
    ContentType.REEL: 500,
}
REPLY_MAX_LENGTH = 1000

@dataclass
class ContentInfo:
    """ContentGate가 반환하는 콘텐츠 존재 여부와 소유자 정보."""
    exists: bool
    owner_id: Optional[str] = None
