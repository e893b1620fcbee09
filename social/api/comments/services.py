# social/api/comments/services.py

import logging
import math
import uuid
from typing import Any, Dict, List, Mapping, Optional

from social.models.comment import Comment, Reply
from social.models.content import ContentType
from social.models.user import UserProfile
from social.api.reactions.schemas import ContentRefSchema # 콘텐츠 참조 검사는 반응 스키마의 것을 재사용
from .schemas import (
    CommentCreateSchema, ReplyCreateSchema, CommentTargetSchema, ReplyTargetSchema,
    CommentListQuerySchema, ReplyListQuerySchema
)

# 정렬 키(요청 값) -> 정렬 기준 함수
_COMMENT_SORT_KEYS = {
    'createdAt': lambda c: c.created_at,
    'replyCount': lambda c: c.reply_count,
}
_REPLY_SORT_KEYS = {
    'createdAt': lambda r: r.created_at,
}

class CommentService:
    """
    댓글/답글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 콘텐츠 하나당 스레드 문서 하나에 댓글과 답글을 모두 저장합니다.
    - 삭제 권한: 댓글은 작성자/콘텐츠 소유자, 답글은 답글 작성자/부모 댓글 작성자/콘텐츠 소유자.
    """
    def __init__(self, comment_store, content_gate, user_profiles):
        self.comment_store = comment_store
        self.content_gate = content_gate
        self.user_profiles = user_profiles

    def _require_content(self, content_type: str, content_id: str):
        info = self.content_gate.check(content_type, content_id)
        if not info.exists:
            raise ValueError(f"{ContentType(content_type).label} 콘텐츠를 찾을 수 없습니다.")
        return info

    def add_comment(self, user_id: str, content_id: str, content_type: str, text: str) -> Dict[str, Any]:
        """새 댓글을 스레드 끝에 추가합니다. 스레드가 없으면 함께 만듭니다."""
        params = CommentCreateSchema().load({
            'user_id': user_id, 'content_id': content_id, 'content_type': content_type, 'text': text
        })
        self._require_content(params['content_type'], params['content_id'])

        comment = Comment(comment_id=uuid.uuid4().hex, user_id=params['user_id'], text=params['text'])
        try:
            self.comment_store.append_comment(params['content_type'], params['content_id'], comment)
        except Exception as e:
            logging.error(f"댓글 저장 실패 ({content_type}/{content_id}): {e}", exc_info=True)
            raise

        logging.info(f"댓글 작성: {content_type}/{content_id} comment={comment.comment_id} user={user_id}")
        profiles = self.user_profiles.resolve_map([comment.user_id])
        return self._format_comment(comment, profiles)

    def add_reply(self, user_id: str, content_id: str, content_type: str, comment_id: str, text: str) -> Dict[str, Any]:
        """댓글에 답글을 추가하고 답글과 부모 댓글의 최신 답글 수를 반환합니다."""
        params = ReplyCreateSchema().load({
            'user_id': user_id, 'content_id': content_id, 'content_type': content_type,
            'comment_id': comment_id, 'text': text
        })
        self._require_content(params['content_type'], params['content_id'])

        reply = Reply(reply_id=uuid.uuid4().hex, user_id=params['user_id'], text=params['text'])
        reply_count = self.comment_store.append_reply(
            params['content_type'], params['content_id'], params['comment_id'], reply
        )

        logging.info(f"답글 작성: {content_type}/{content_id} comment={comment_id} reply={reply.reply_id}")
        profiles = self.user_profiles.resolve_map([reply.user_id])
        return {
            'reply': self._format_reply(reply, profiles),
            'comment': {'id': params['comment_id'], 'reply_count': reply_count}
        }

    def get_comments(self, content_id: str, content_type: str, page: int = 1, limit: int = 15,
                     sort_by: str = 'createdAt', sort_order: int = -1) -> Dict[str, Any]:
        """댓글 목록을 페이지 단위로 조회합니다. 각 댓글의 답글은 전부 포함합니다."""
        params = CommentListQuerySchema().load({
            'contentId': content_id, 'contentType': content_type, 'page': page,
            'limit': limit, 'sortBy': sort_by, 'sortOrder': sort_order
        })
        return self._list_comments(params)

    def get_comments_by_query(self, query: Mapping[str, Any]) -> Dict[str, Any]:
        """
        쿼리 파라미터 맵(contentId, contentType, page, limit, sortBy, sortOrder)으로 댓글 목록을 조회합니다.
        응답에 contentId/contentType을 함께 돌려줍니다.
        """
        params = CommentListQuerySchema().load(dict(query or {}))
        result = self._list_comments(params)
        result['content_id'] = params['content_id']
        result['content_type'] = params['content_type']
        return result

    def _list_comments(self, params: Dict[str, Any]) -> Dict[str, Any]:
        content_type, content_id = params['content_type'], params['content_id']
        self._require_content(content_type, content_id)

        thread = self.comment_store.get(content_type, content_id)
        comments = thread.comments if thread else []
        ordered = sorted(comments, key=_COMMENT_SORT_KEYS[params['sort_by']], reverse=params['sort_order'] == -1)
        window = self._slice(ordered, params['page'], params['limit'])

        user_ids = []
        for comment in window:
            user_ids.append(comment.user_id)
            user_ids.extend(r.user_id for r in comment.replies)
        profiles = self.user_profiles.resolve_map(user_ids)

        return {
            'comments': [self._format_comment(c, profiles) for c in window],
            'pagination': self._pagination(params['page'], params['limit'], len(comments))
        }

    def get_replies(self, content_id: str, content_type: str, comment_id: str, page: int = 1,
                    limit: int = 10, sort_by: str = 'createdAt', sort_order: int = 1) -> Dict[str, Any]:
        """
        댓글 하나의 답글을 페이지 단위로 조회합니다.
        콘텐츠가 없으면 ValueError, 스레드나 댓글이 없으면 빈 목록을 반환합니다.
        """
        params = ReplyListQuerySchema().load({
            'contentId': content_id, 'contentType': content_type, 'commentId': comment_id,
            'page': page, 'limit': limit, 'sortBy': sort_by, 'sortOrder': sort_order
        })
        self._require_content(params['content_type'], params['content_id'])
        thread = self.comment_store.get(params['content_type'], params['content_id'])
        comment = thread.find_comment(params['comment_id']) if thread else None
        replies = comment.replies if comment else []

        ordered = sorted(replies, key=_REPLY_SORT_KEYS[params['sort_by']], reverse=params['sort_order'] == -1)
        window = self._slice(ordered, params['page'], params['limit'])
        profiles = self.user_profiles.resolve_map([r.user_id for r in window])
        return {
            'replies': [self._format_reply(r, profiles) for r in window],
            'pagination': self._pagination(params['page'], params['limit'], len(replies))
        }

    def delete_comment(self, user_id: str, content_id: str, content_type: str, comment_id: str) -> None:
        """댓글을 답글과 함께 삭제합니다. 댓글 작성자 또는 콘텐츠 소유자만 가능합니다."""
        params = CommentTargetSchema().load({
            'user_id': user_id, 'content_id': content_id, 'content_type': content_type, 'comment_id': comment_id
        })
        content_type, content_id = params['content_type'], params['content_id']
        info = self._require_content(content_type, content_id)

        thread = self.comment_store.get(content_type, content_id)
        if thread is None:
            raise ValueError("댓글 스레드를 찾을 수 없습니다.")
        comment = thread.find_comment(params['comment_id'])
        if comment is None:
            raise ValueError("삭제할 댓글이 없습니다.")

        if params['user_id'] not in (comment.user_id, info.owner_id):
            raise PermissionError("댓글을 삭제할 권한이 없습니다.")

        if not self.comment_store.remove_comment(content_type, content_id, params['comment_id']):
            raise ValueError("삭제할 댓글이 없습니다.")
        logging.info(f"댓글 삭제: {content_type}/{content_id} comment={comment_id} by={user_id}")

    def delete_reply(self, user_id: str, content_id: str, content_type: str, comment_id: str, reply_id: str) -> None:
        """답글을 삭제합니다. 답글 작성자, 부모 댓글 작성자, 콘텐츠 소유자만 가능합니다."""
        params = ReplyTargetSchema().load({
            'user_id': user_id, 'content_id': content_id, 'content_type': content_type,
            'comment_id': comment_id, 'reply_id': reply_id
        })
        content_type, content_id = params['content_type'], params['content_id']
        info = self._require_content(content_type, content_id)

        thread = self.comment_store.get(content_type, content_id)
        if thread is None:
            raise ValueError("댓글 스레드를 찾을 수 없습니다.")
        comment = thread.find_comment(params['comment_id'])
        if comment is None:
            raise ValueError("댓글을 찾을 수 없습니다.")
        reply = comment.find_reply(params['reply_id'])
        if reply is None:
            raise ValueError("삭제할 답글이 없습니다.")

        if params['user_id'] not in (reply.user_id, comment.user_id, info.owner_id):
            raise PermissionError("답글을 삭제할 권한이 없습니다.")

        if not self.comment_store.remove_reply(content_type, content_id, params['comment_id'], params['reply_id']):
            raise ValueError("삭제할 답글이 없습니다.")
        logging.info(f"답글 삭제: {content_type}/{content_id} comment={comment_id} reply={reply_id} by={user_id}")

    def purge(self, content_type: str, content_id: str) -> bool:
        """콘텐츠 삭제 시 호출하여 해당 콘텐츠의 댓글 스레드를 지웁니다."""
        params = ContentRefSchema().load({'content_type': content_type, 'content_id': content_id})
        deleted = self.comment_store.delete(params['content_type'], params['content_id'])
        if deleted:
            logging.info(f"댓글 스레드 삭제: {content_type}/{content_id}")
        return deleted

    # --- 응답 구성 ---

    @staticmethod
    def _slice(items: List[Any], page: int, limit: int) -> List[Any]:
        start = (page - 1) * limit
        return items[start:start + limit]

    @staticmethod
    def _pagination(page: int, limit: int, total: int) -> Dict[str, int]:
        return {'page': page, 'limit': limit, 'total': total, 'pages': math.ceil(total / limit)}

    @staticmethod
    def _user_fragment(profile: Optional[UserProfile]) -> Optional[Dict[str, Any]]:
        if profile is None:
            return None
        return {
            'id': profile.id, 'name': profile.name, 'first_name': profile.first_name,
            'last_name': profile.last_name, 'avatar': profile.avatar
        }

    def _format_reply(self, reply: Reply, profiles: Dict[str, UserProfile]) -> Dict[str, Any]:
        return {
            'id': reply.reply_id,
            'user_id': reply.user_id,
            'user': self._user_fragment(profiles.get(reply.user_id)),
            'text': reply.text,
            'created_at': reply.created_at
        }

    def _format_comment(self, comment: Comment, profiles: Dict[str, UserProfile]) -> Dict[str, Any]:
        return {
            'id': comment.comment_id,
            'user_id': comment.user_id,
            'user': self._user_fragment(profiles.get(comment.user_id)),
            'text': comment.text,
            'replies': [self._format_reply(r, profiles) for r in comment.replies],
            'reply_count': comment.reply_count,
            'created_at': comment.created_at
        }
