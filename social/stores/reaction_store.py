# social/stores/reaction_store.py

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError
from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_random

from social.models.content import CONTENT_TYPE_VALUES
from social.models.reaction import ReactionAction, ReactionRecord, REACTION_VALUES
from social.utils.datetime_utils import DateTimeUtils
from social.utils.exceptions import ReactionConflictError

logger = logging.getLogger(__name__)

def decide_transition(current: Optional[str], requested: str) -> ReactionAction:
    """현재 반응과 요청한 반응으로 상태 전이를 결정합니다."""
    if current == requested:
        return ReactionAction.UNLIKED
    if current is not None:
        return ReactionAction.REACTION_UPDATED
    return ReactionAction.LIKED

class ReactionStore:
    """
    'reactions' 컬렉션 접근 계층.
    문서 하나가 콘텐츠 하나의 반응 버킷 전체를 담으며, 갱신은 항상 이 문서 하나에 대한
    조건부 find_one_and_update로 수행되므로 다중 문서 트랜잭션이 필요 없습니다.
    """
    def __init__(self, db, collection: str = 'reactions', max_attempts: int = 5):
        self.collection = db[collection]
        self.max_attempts = max_attempts

    @staticmethod
    def record_id(content_type: str, content_id: str) -> str:
        return f"{content_type}_{content_id}"

    def get(self, content_type: str, content_id: str) -> Optional[ReactionRecord]:
        data = self.collection.find_one({'_id': self.record_id(content_type, content_id)})
        return ReactionRecord.from_dict(data) if data else None

    def find_many(self, content_type: str, content_ids: Iterable[str]) -> Dict[str, ReactionRecord]:
        """여러 콘텐츠의 반응 문서를 한 번의 $in 쿼리로 읽어 content_id 기준 맵으로 반환합니다."""
        ids_by_record = {self.record_id(content_type, cid): cid for cid in content_ids}
        if not ids_by_record:
            return {}
        records = {}
        for data in self.collection.find({'_id': {'$in': list(ids_by_record)}}):
            records[ids_by_record[data['_id']]] = ReactionRecord.from_dict(data)
        return records

    def apply(self, content_type: str, content_id: str, user_id: str, reaction: str) -> Tuple[ReactionAction, ReactionRecord]:
        """
        사용자의 반응을 토글/변경하고 (전이 종류, 갱신 후 문서)를 반환합니다.

        같은 사용자의 요청이 동시에 들어와 조건부 갱신이 매치되지 않으면
        문서를 다시 읽어 max_attempts 횟수까지 재시도합니다.
        """
        return self._retrying()(self._apply_once, content_type, content_id, user_id, reaction)

    def _apply_once(self, content_type: str, content_id: str, user_id: str, reaction: str) -> Tuple[ReactionAction, ReactionRecord]:
        record_id = self.record_id(content_type, content_id)
        data = self._load_or_create(record_id, content_type, content_id)

        current = ReactionRecord.from_dict(data).find_reaction(user_id)
        action = decide_transition(current, reaction)
        query, update = self._build_update(record_id, user_id, current, reaction, action)

        updated = self.collection.find_one_and_update(query, update, return_document=ReturnDocument.AFTER)
        if updated is None:
            raise ReactionConflictError(f"반응 문서 갱신 충돌: {record_id} (user: {user_id})")
        return action, ReactionRecord.from_dict(updated)

    @staticmethod
    def _build_update(record_id: str, user_id: str, current: Optional[str], reaction: str,
                      action: ReactionAction) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """읽은 시점의 상태를 필터로 다시 확인하는 조건부 갱신 쿼리를 만듭니다."""
        touched = {'updated_at': DateTimeUtils.now()}
        if action is ReactionAction.LIKED:
            query = {'_id': record_id}
            query.update({f'buckets.{kind}': {'$ne': user_id} for kind in REACTION_VALUES})
            return query, {'$addToSet': {f'buckets.{reaction}': user_id}, '$set': touched}

        query = {'_id': record_id, f'buckets.{current}': user_id}
        if action is ReactionAction.UNLIKED:
            # 손상된 문서에 남아 있을 수 있는 다른 버킷의 중복도 함께 제거
            pull = {f'buckets.{kind}': user_id for kind in REACTION_VALUES}
            return query, {'$pull': pull, '$set': touched}

        pull = {f'buckets.{kind}': user_id for kind in REACTION_VALUES if kind != reaction}
        return query, {'$pull': pull, '$addToSet': {f'buckets.{reaction}': user_id}, '$set': touched}

    def _load_or_create(self, record_id: str, content_type: str, content_id: str) -> Dict[str, Any]:
        data = self.collection.find_one({'_id': record_id})
        if data is None:
            empty = ReactionRecord(content_type=content_type, content_id=content_id).to_dict()
            try:
                self.collection.update_one({'_id': record_id}, {'$setOnInsert': empty}, upsert=True)
            except DuplicateKeyError:
                # 다른 요청이 같은 문서를 먼저 만들었음
                logger.debug(f"반응 문서가 동시에 생성됨: {record_id}")
            data = self.collection.find_one({'_id': record_id})
        elif ReactionRecord.is_legacy_layout(data):
            self.upgrade_legacy(data)
            data = self.collection.find_one({'_id': record_id})

        if data is None:
            # 읽는 사이 문서가 삭제됨
            raise ReactionConflictError(f"반응 문서가 사라졌습니다: {record_id}")
        return data

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_random(min=0, max=0.05),
            retry=retry_if_exception_type(ReactionConflictError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )

    def upgrade_legacy(self, data: Dict[str, Any]) -> bool:
        """
        위치 기반 'likes' 배열 문서를 종류별 buckets 문서로 바꿉니다.
        - '{content_type}_{content_id}' 위치의 문서는 그 자리에서 교체합니다.
        - 다른 _id(ObjectId 등)로 저장된 문서는 해당 위치의 문서에 합친 뒤 원본을 지웁니다.
        이미 바뀐 문서는 건드리지 않습니다.
        """
        record = ReactionRecord.from_dict(data)
        if record.content_type is None or record.content_id is None:
            content_type, _, content_id = str(data['_id']).partition('_')
            record.content_type = record.content_type or content_type
            record.content_id = record.content_id or content_id
        if record.content_type not in CONTENT_TYPE_VALUES or not record.content_id:
            logger.warning(f"콘텐츠를 알 수 없는 이전 형식 반응 문서는 건너뜁니다: {data['_id']}")
            return False

        target_id = self.record_id(record.content_type, record.content_id)
        if data['_id'] == target_id:
            result = self.collection.replace_one(
                {'_id': target_id, 'buckets': {'$exists': False}},
                record.to_dict()
            )
            if result.modified_count:
                logger.info(f"이전 형식 반응 문서 변환: {target_id}")
            return bool(result.modified_count)

        self._retrying()(self._merge_into, target_id, record)
        self.collection.delete_one({'_id': data['_id']})
        logger.info(f"이전 형식 반응 문서 이동: {data['_id']} -> {target_id}")
        return True

    def _merge_into(self, target_id: str, legacy: ReactionRecord) -> None:
        """
        이전 형식 문서의 반응을 target_id 문서에 합칩니다.
        이미 반응이 있는 사용자는 현재 문서의 반응을 유지합니다.
        """
        existing = self.collection.find_one({'_id': target_id})
        if existing is not None and ReactionRecord.is_legacy_layout(existing):
            self.upgrade_legacy(existing)
            existing = self.collection.find_one({'_id': target_id})

        if existing is None:
            try:
                self.collection.insert_one(dict(legacy.to_dict(), _id=target_id))
            except DuplicateKeyError:
                raise ReactionConflictError(f"반응 문서가 동시에 생성됨: {target_id}")
            return

        merged = ReactionRecord.from_dict(existing)
        merged.content_type = merged.content_type or legacy.content_type
        merged.content_id = merged.content_id or legacy.content_id
        for kind in REACTION_VALUES:
            for user_id in legacy.buckets.get(kind, []):
                if merged.find_reaction(user_id) is None:
                    merged.add(user_id, kind)
        merged.updated_at = DateTimeUtils.now()

        # 읽은 뒤 다른 요청이 버킷을 바꿨으면 매치되지 않음
        result = self.collection.replace_one(
            {'_id': target_id, 'buckets': existing.get('buckets')},
            merged.to_dict()
        )
        if not result.matched_count:
            raise ReactionConflictError(f"반응 문서 병합 충돌: {target_id}")

    def iter_legacy(self) -> Iterator[Dict[str, Any]]:
        return self.collection.find({'buckets': {'$exists': False}, 'likes': {'$type': 'array'}})

    def delete(self, content_type: str, content_id: str) -> bool:
        result = self.collection.delete_one({'_id': self.record_id(content_type, content_id)})
        return result.deleted_count > 0

    @staticmethod
    def user_ids(record: ReactionRecord) -> List[str]:
        """반응 종류 순서대로 모든 버킷의 사용자 ID를 나열합니다."""
        return [uid for kind in REACTION_VALUES for uid in record.buckets.get(kind, [])]
