# social/models/reaction.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from social.utils.datetime_utils import DateTimeUtils

class ReactionType(Enum):
    """반응 종류. 선언 순서가 곧 출력 순서입니다."""
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    HUG = "hug"
    WOW = "wow"
    LIKE = "like"

REACTION_VALUES = [r.value for r in ReactionType]
DEFAULT_REACTION = ReactionType.LIKE.value

class ReactionAction(Enum):
    """apply_reaction 결과로 어떤 상태 전이가 일어났는지"""
    LIKED = "liked"
    UNLIKED = "unliked"
    REACTION_UPDATED = "reaction_updated"

def _empty_buckets() -> Dict[str, List[str]]:
    return {kind: [] for kind in REACTION_VALUES}

@dataclass
class ReactionRecord:
    """
    MongoDB 'reactions' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    _id는 '{content_type}_{content_id}'이며, buckets는 반응 종류별 사용자 ID 목록입니다.
    """
    content_type: str
    content_id: str
    buckets: Dict[str, List[str]] = field(default_factory=_empty_buckets)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    def find_reaction(self, user_id: str) -> Optional[str]:
        """사용자가 현재 남긴 반응 종류를 반환합니다. 버킷은 서로 배타적이므로 첫 매치만 봅니다."""
        for kind in REACTION_VALUES:
            if user_id in self.buckets.get(kind, []):
                return kind
        return None

    def add(self, user_id: str, kind: Union[str, ReactionType]) -> None:
        bucket = self.buckets.setdefault(ReactionType(kind).value, [])
        if user_id not in bucket:
            bucket.append(user_id)

    def remove(self, user_id: str, kind: Union[str, ReactionType]) -> None:
        key = ReactionType(kind).value
        self.buckets[key] = [uid for uid in self.buckets.get(key, []) if uid != user_id]

    def total(self) -> int:
        return sum(len(self.buckets.get(kind, [])) for kind in REACTION_VALUES)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def is_legacy_layout(data: Dict[str, Any]) -> bool:
        """위치 기반 'likes' 배열(6개의 사용자 배열)로 저장된 이전 형식인지 확인합니다."""
        return 'buckets' not in data and isinstance(data.get('likes'), list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReactionRecord':
        """
        DB 문서를 ReactionRecord로 변환합니다.
        - 이전 형식('likes' 배열)도 읽어서 종류별 맵으로 바꿉니다.
        - 중복 사용자와 여러 버킷에 걸친 사용자는 반응 종류 순서상 첫 버킷에만 남깁니다.
        """
        if cls.is_legacy_layout(data):
            raw = {kind: user_ids for kind, user_ids in zip(REACTION_VALUES, data['likes'])}
        else:
            raw = data.get('buckets') or {}

        buckets = _empty_buckets()
        seen = set()
        for kind in REACTION_VALUES:
            for user_id in raw.get(kind) or []:
                if not user_id:
                    continue
                user_id = str(user_id)
                if user_id in seen:
                    continue
                seen.add(user_id)
                buckets[kind].append(user_id)

        content_id = data.get('content_id') or data.get('contentId')
        updated_at = DateTimeUtils.to_utc(data.get('updated_at')) or DateTimeUtils.now()
        return cls(
            content_type=data.get('content_type') or data.get('content'),
            content_id=str(content_id) if content_id is not None else None,
            buckets=buckets,
            updated_at=updated_at
        )
