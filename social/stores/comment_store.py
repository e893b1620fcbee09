# social/stores/comment_store.py

import logging
from typing import Optional
from pymongo.errors import DuplicateKeyError
from tenacity import retry, retry_if_exception_type, stop_after_attempt

from social.models.comment import Comment, CommentThread, Reply

class CommentThreadStore:
    """
    'comment_threads' 컬렉션 접근 계층.
    콘텐츠 하나당 스레드 문서 하나이며, 댓글/답글은 문서 내부 배열에 순서대로 쌓입니다.
    모든 쓰기는 단일 문서에 대한 $push/$pull이므로 그 자체로 원자적입니다.
    """
    def __init__(self, db, collection: str = 'comment_threads'):
        self.collection = db[collection]

    @staticmethod
    def thread_id(content_type: str, content_id: str) -> str:
        return f"{content_type}_{content_id}"

    @staticmethod
    def _comment_filter(thread_id: str, comment_id: str):
        # 위치 연산자($)가 가리킬 댓글을 $elemMatch로 지정
        return {'_id': thread_id, 'comments': {'$elemMatch': {'comment_id': comment_id}}}

    def get(self, content_type: str, content_id: str) -> Optional[CommentThread]:
        data = self.collection.find_one({'_id': self.thread_id(content_type, content_id)})
        return CommentThread.from_dict(data) if data else None

    @retry(stop=stop_after_attempt(2), retry=retry_if_exception_type(DuplicateKeyError), reraise=True)
    def append_comment(self, content_type: str, content_id: str, comment: Comment) -> None:
        """스레드가 없으면 만들면서 댓글을 맨 뒤에 추가합니다. 동시 생성으로 upsert가 충돌하면 한 번 더 시도합니다."""
        self.collection.update_one(
            {'_id': self.thread_id(content_type, content_id)},
            {
                '$setOnInsert': {'content_type': content_type, 'content_id': content_id},
                '$push': {'comments': comment.to_dict()}
            },
            upsert=True
        )

    def append_reply(self, content_type: str, content_id: str, comment_id: str, reply: Reply) -> int:
        """
        댓글의 답글 목록 끝에 답글을 추가하고 추가 직후의 답글 수를 반환합니다.

        :raises ValueError: 스레드나 댓글이 없을 때
        """
        thread_id = self.thread_id(content_type, content_id)
        result = self.collection.update_one(
            self._comment_filter(thread_id, comment_id),
            {'$push': {'comments.$.replies': reply.to_dict()}}
        )
        if not result.matched_count:
            if self.collection.count_documents({'_id': thread_id}, limit=1) == 0:
                raise ValueError("댓글 스레드를 찾을 수 없습니다.")
            raise ValueError("댓글을 찾을 수 없습니다.")

        thread = self.get(content_type, content_id)
        comment = thread.find_comment(comment_id) if thread else None
        if comment is None:
            # 추가 직후 다른 요청이 댓글을 삭제함
            logging.warning(f"답글 추가 직후 댓글이 삭제됨: {thread_id}/{comment_id}")
            return 0
        return comment.reply_count

    def remove_comment(self, content_type: str, content_id: str, comment_id: str) -> bool:
        """댓글을 답글과 함께 제거합니다. 실제로 제거되었으면 True."""
        result = self.collection.update_one(
            self._comment_filter(self.thread_id(content_type, content_id), comment_id),
            {'$pull': {'comments': {'comment_id': comment_id}}}
        )
        return result.modified_count > 0

    def remove_reply(self, content_type: str, content_id: str, comment_id: str, reply_id: str) -> bool:
        result = self.collection.update_one(
            self._comment_filter(self.thread_id(content_type, content_id), comment_id),
            {'$pull': {'comments.$.replies': {'reply_id': reply_id}}}
        )
        return result.modified_count > 0

    def delete(self, content_type: str, content_id: str) -> bool:
        result = self.collection.delete_one({'_id': self.thread_id(content_type, content_id)})
        return result.deleted_count > 0
