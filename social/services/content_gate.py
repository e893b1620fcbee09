# social/services/content_gate.py
import logging

from social.models.content import ContentType, ContentInfo
from social.utils.validators import id_candidates

class ContentGate:
    """
    게시물/릴스 컬렉션을 읽어 콘텐츠 존재 여부와 소유자를 확인하는 읽기 전용 서비스.
    콘텐츠 문서 자체는 다른 서비스가 관리하므로 여기서는 절대 쓰지 않습니다.
    """
    def __init__(self, db, posts_collection: str = 'posts', reels_collection: str = 'reels'):
        self.db = db
        self.posts_ref = self.db[posts_collection]
        self.reels_ref = self.db[reels_collection]

    def collection(self, content_type: str):
        content_type = ContentType(content_type)
        return self.posts_ref if content_type is ContentType.POST else self.reels_ref

    def check(self, content_type: str, content_id: str) -> ContentInfo:
        """
        콘텐츠 문서를 조회합니다.

        :return: ContentInfo(exists, owner_id). 소유자는 문서의 author.user_id 입니다.
        """
        data = self.collection(content_type).find_one(
            {'_id': {'$in': id_candidates(content_id)}},
            {'author': 1, 'user_id': 1}
        )
        if data is None:
            logging.info(f"콘텐츠 없음: {content_type}/{content_id}")
            return ContentInfo(exists=False)

        owner_id = (data.get('author') or {}).get('user_id') or data.get('user_id')
        return ContentInfo(exists=True, owner_id=str(owner_id) if owner_id is not None else None)
