# social/api/comments/handlers.py
import logging
from typing import Any, Dict, Mapping, Optional
from marshmallow import ValidationError

from social.utils.responses import ServiceResult, success, failure
from .schemas import CommentResponseSchema, ReplyCreatedSchema, CommentListSchema, ReplyListSchema

def _validation_failure(err: ValidationError) -> ServiceResult:
    return failure(400, "VALIDATION_ERROR", "입력값이 올바르지 않습니다.", details=err.messages)

def add_comment(comment_service, user_id: str, content_type: str, content_id: str,
                body: Optional[Dict[str, Any]] = None) -> ServiceResult:
    """
    콘텐츠에 새 댓글을 작성합니다.
    - 성공 시, 생성된 댓글 정보를 201 상태 코드와 함께 반환합니다.
    """
    body = body or {}
    try:
        comment = comment_service.add_comment(user_id, content_id, content_type, body.get('text'))
        return success("댓글이 작성되었습니다.", {"comment": CommentResponseSchema().dump(comment)}, status_code=201)
    except ValidationError as err:
        return _validation_failure(err)
    except ValueError as e: # 콘텐츠가 없는 경우
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"댓글 생성 중 오류 발생 ({content_type}/{content_id}): {e}", exc_info=True)
        return failure(500, "COMMENT_CREATION_FAILED", "댓글 생성 중 오류가 발생했습니다.", error=str(e))

def add_reply(comment_service, user_id: str, content_type: str, content_id: str, comment_id: str,
              body: Optional[Dict[str, Any]] = None) -> ServiceResult:
    """댓글에 답글을 작성합니다. 성공 시 201."""
    body = body or {}
    try:
        result = comment_service.add_reply(user_id, content_id, content_type, comment_id, body.get('text'))
        return success("답글이 작성되었습니다.", ReplyCreatedSchema().dump(result), status_code=201)
    except ValidationError as err:
        return _validation_failure(err)
    except ValueError as e: # 콘텐츠, 스레드 또는 댓글이 없는 경우
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"답글 생성 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return failure(500, "REPLY_CREATION_FAILED", "답글 생성 중 오류가 발생했습니다.", error=str(e))

def get_comments(comment_service, content_type: str, content_id: str,
                 query: Optional[Mapping[str, Any]] = None) -> ServiceResult:
    """콘텐츠의 댓글 목록을 페이지네이션으로 조회합니다. query: page, limit, sortBy, sortOrder"""
    query = query or {}
    try:
        result = comment_service.get_comments(
            content_id, content_type,
            page=query.get('page', 1), limit=query.get('limit', 15),
            sort_by=query.get('sortBy', 'createdAt'), sort_order=query.get('sortOrder', -1)
        )
        return success("댓글 목록을 조회했습니다.", CommentListSchema().dump(result))
    except ValidationError as err:
        return _validation_failure(err)
    except ValueError as e:
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"댓글 목록 조회 중 오류 발생 ({content_type}/{content_id}): {e}", exc_info=True)
        return failure(500, "INTERNAL_SERVER_ERROR", "댓글 목록 조회 중 오류가 발생했습니다.", error=str(e))

def get_comments_by_query(comment_service, query: Optional[Mapping[str, Any]] = None) -> ServiceResult:
    """contentId/contentType을 쿼리 파라미터로 받아 댓글 목록을 조회합니다."""
    try:
        result = comment_service.get_comments_by_query(query or {})
        return success("댓글 목록을 조회했습니다.", CommentListSchema().dump(result))
    except ValidationError as err:
        return _validation_failure(err)
    except ValueError as e:
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"댓글 목록 조회 중 오류 발생 (query: {query}): {e}", exc_info=True)
        return failure(500, "INTERNAL_SERVER_ERROR", "댓글 목록 조회 중 오류가 발생했습니다.", error=str(e))

def get_replies(comment_service, content_type: str, content_id: str, comment_id: str,
                query: Optional[Mapping[str, Any]] = None) -> ServiceResult:
    query = query or {}
    try:
        result = comment_service.get_replies(
            content_id, content_type, comment_id,
            page=query.get('page', 1), limit=query.get('limit', 10),
            sort_by=query.get('sortBy', 'createdAt'), sort_order=query.get('sortOrder', 1)
        )
        return success("답글 목록을 조회했습니다.", ReplyListSchema().dump(result))
    except ValidationError as err:
        return _validation_failure(err)
    except ValueError as e: # 콘텐츠가 없는 경우
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"답글 목록 조회 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return failure(500, "INTERNAL_SERVER_ERROR", "답글 목록 조회 중 오류가 발생했습니다.", error=str(e))

def delete_comment(comment_service, user_id: str, content_type: str, content_id: str, comment_id: str) -> ServiceResult:
    """
    댓글을 삭제합니다. (댓글 작성자 또는 콘텐츠 소유자만 가능)
    - 댓글에 달린 답글도 함께 삭제됩니다.
    """
    try:
        comment_service.delete_comment(user_id, content_id, content_type, comment_id)
        return success("댓글이 삭제되었습니다.")
    except ValidationError as err:
        return _validation_failure(err)
    except PermissionError as e:
        return failure(403, "FORBIDDEN", str(e))
    except ValueError as e:
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"댓글 삭제 중 오류 발생 (comment_id: {comment_id}): {e}", exc_info=True)
        return failure(500, "COMMENT_DELETION_FAILED", "댓글 삭제 중 오류가 발생했습니다.", error=str(e))

def delete_reply(comment_service, user_id: str, content_type: str, content_id: str, comment_id: str,
                 reply_id: str) -> ServiceResult:
    """답글을 삭제합니다. (답글 작성자, 부모 댓글 작성자, 콘텐츠 소유자만 가능)"""
    try:
        comment_service.delete_reply(user_id, content_id, content_type, comment_id, reply_id)
        return success("답글이 삭제되었습니다.")
    except ValidationError as err:
        return _validation_failure(err)
    except PermissionError as e:
        return failure(403, "FORBIDDEN", str(e))
    except ValueError as e:
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"답글 삭제 중 오류 발생 (reply_id: {reply_id}): {e}", exc_info=True)
        return failure(500, "REPLY_DELETION_FAILED", "답글 삭제 중 오류가 발생했습니다.", error=str(e))
