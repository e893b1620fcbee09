# social/api/reactions/services.py

import logging
from typing import Any, Dict, List, Optional
from marshmallow import ValidationError
from pymongo.errors import PyMongoError

from social.models.content import ContentType
from social.models.reaction import ReactionAction, ReactionRecord, REACTION_VALUES, DEFAULT_REACTION
from social.models.user import UserProfile
from social.utils.exceptions import ReactionConflictError
from social.utils.validators import is_valid_document_id
from .schemas import ApplyReactionSchema, ContentRefSchema, MyReactionsQuerySchema

class ReactionService:
    """
    반응(좋아요 포함 6종) 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 콘텐츠 존재 확인, 토글/변경 상태 전이, 반응 사용자 프로필 구성을 포함합니다.
    """
    def __init__(self, reaction_store, content_gate, user_profiles):
        self.reaction_store = reaction_store
        self.content_gate = content_gate
        self.user_profiles = user_profiles

    def apply_reaction(self, content_type: str, content_id: str, user_id: str,
                       reaction: Optional[str] = DEFAULT_REACTION) -> Dict[str, Any]:
        """
        사용자의 반응을 적용합니다.
        - 같은 반응을 다시 누르면 취소(unliked)
        - 다른 반응을 누르면 기존 반응을 옮김(reaction_updated)
        - 반응이 없으면 추가(liked)
        """
        payload = {'content_type': content_type, 'content_id': content_id, 'user_id': user_id}
        if reaction is not None:
            payload['reaction'] = reaction
        params = ApplyReactionSchema().load(payload)
        content_type, content_id = params['content_type'], params['content_id']
        user_id, reaction = params['user_id'], params['reaction']

        info = self.content_gate.check(content_type, content_id)
        if not info.exists:
            raise ValueError(f"{ContentType(content_type).label} 콘텐츠를 찾을 수 없습니다.")

        try:
            action, record = self.reaction_store.apply(content_type, content_id, user_id, reaction)
        except ReactionConflictError as e:
            logging.error(f"반응 충돌 재시도 초과 ({content_type}/{content_id}, user: {user_id}): {e}", exc_info=True)
            raise
        except PyMongoError as e:
            logging.error(f"반응 저장 실패 ({content_type}/{content_id}, user: {user_id}): {e}", exc_info=True)
            raise

        logging.info(f"반응 {action.value}: {content_type}/{content_id} user={user_id} reaction={reaction}")
        return {
            'action': action.value,
            'reaction': None if action is ReactionAction.UNLIKED else reaction,
            'like_count': record.total(),
            'is_liked': action is not ReactionAction.UNLIKED,
            'reactions': self._materialize(record)
        }

    def get_reactions(self, content_type: str, content_id: str) -> Dict[str, Dict[str, Any]]:
        """반응 종류별 {count, users}를 반환합니다. 비어 있는 종류는 제외합니다."""
        params = ContentRefSchema().load({'content_type': content_type, 'content_id': content_id})
        record = self.reaction_store.get(params['content_type'], params['content_id'])
        if record is None:
            return {}

        profiles = self.user_profiles.resolve_map(self.reaction_store.user_ids(record))
        summary = {}
        for kind in REACTION_VALUES:
            bucket = record.buckets.get(kind, [])
            if not bucket:
                continue
            summary[kind] = {
                'count': len(bucket),
                'users': [self._user_fragment(profiles[uid]) for uid in bucket if uid in profiles]
            }
        return summary

    def get_my_reactions(self, user_id: str, content_type: str, content_ids: List[Any]) -> Dict[str, Optional[str]]:
        """
        여러 콘텐츠에 대해 사용자가 남긴 반응을 한 번에 조회합니다.
        형식이 잘못된 ID는 결과에서 제외하고, 반응이 없으면 None을 넣습니다.
        """
        params = MyReactionsQuerySchema().load({
            'user_id': user_id, 'contentType': content_type, 'contentIds': content_ids
        })
        valid_ids = list(dict.fromkeys(cid for cid in params['content_ids'] if is_valid_document_id(cid)))
        if not valid_ids:
            raise ValidationError({'contentIds': ["유효한 콘텐츠 ID가 없습니다."]})

        records = self.reaction_store.find_many(params['content_type'], valid_ids)
        return {
            cid: records[cid].find_reaction(params['user_id']) if cid in records else None
            for cid in valid_ids
        }

    def purge(self, content_type: str, content_id: str) -> bool:
        """콘텐츠 삭제 시 호출하여 해당 콘텐츠의 반응 문서를 지웁니다."""
        params = ContentRefSchema().load({'content_type': content_type, 'content_id': content_id})
        deleted = self.reaction_store.delete(params['content_type'], params['content_id'])
        if deleted:
            logging.info(f"반응 문서 삭제: {content_type}/{content_id}")
        return deleted

    def _materialize(self, record: ReactionRecord) -> Dict[str, List[Dict[str, Any]]]:
        """모든 반응 종류(순서 고정)에 대해 사용자 프로필 목록을 만듭니다. 프로필 조회는 한 번입니다."""
        profiles = self.user_profiles.resolve_map(self.reaction_store.user_ids(record))
        return {
            kind: [self._user_fragment(profiles[uid]) for uid in record.buckets.get(kind, []) if uid in profiles]
            for kind in REACTION_VALUES
        }

    @staticmethod
    def _user_fragment(profile: UserProfile) -> Dict[str, Any]:
        return {'id': profile.id, 'name': profile.name, 'avatar': profile.avatar}
