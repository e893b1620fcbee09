# social/services/user_profile_service.py
import logging
from typing import Dict, Iterable, List

from social.models.user import UserProfile
from social.utils.validators import is_valid_document_id, id_candidates

class UserProfileService:
    """사용자 ID 목록을 응답용 프로필 조각으로 변환하는 읽기 전용 서비스."""
    def __init__(self, db, users_collection: str = 'users'):
        self.db = db
        self.users_ref = self.db[users_collection]

    def resolve(self, user_ids: Iterable[str]) -> List[UserProfile]:
        """
        사용자 문서를 한 번의 $in 쿼리로 일괄 조회합니다.
        - 입력 순서를 유지하고 중복은 제거합니다.
        - 존재하지 않는 사용자는 결과에서 제외합니다.
        """
        unique_ids = [uid for uid in dict.fromkeys(user_ids) if is_valid_document_id(uid)]
        if not unique_ids:
            return []

        lookup = [candidate for uid in unique_ids for candidate in id_candidates(uid)]
        projection = {'name': 1, 'nickname': 1, 'first_name': 1, 'last_name': 1, 'profile_image_url': 1}
        profiles = {}
        for data in self.users_ref.find({'_id': {'$in': lookup}}, projection):
            user_id = str(data['_id'])
            profiles[user_id] = UserProfile.from_dict(user_id, data)

        missing = len([uid for uid in unique_ids if uid not in profiles])
        if missing:
            logging.warning(f"프로필을 찾을 수 없는 사용자 {missing}명 제외")
        return [profiles[uid] for uid in unique_ids if uid in profiles]

    def resolve_map(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        return {profile.id: profile for profile in self.resolve(user_ids)}
