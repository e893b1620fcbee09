# social/api/reactions/handlers.py
import logging
from typing import Any, Dict, Optional
from marshmallow import ValidationError

from social.models.content import ContentType
from social.utils.responses import ServiceResult, success, failure
from .schemas import ReactionResultSchema, ReactionSummarySchema

def toggle_reaction(reaction_service, user_id: str, content_type: str, content_id: str,
                    body: Optional[Dict[str, Any]] = None) -> ServiceResult:
    """
    콘텐츠에 반응을 남기거나 바꾸거나 취소합니다.
    - body의 reaction을 생략하면 'like'로 처리합니다.
    """
    body = body or {}
    try:
        result = reaction_service.apply_reaction(content_type, content_id, user_id, body.get('reaction'))
        return success("반응이 반영되었습니다.", ReactionResultSchema().dump(result))
    except ValidationError as err:
        return failure(400, "VALIDATION_ERROR", "입력값이 올바르지 않습니다.", details=err.messages)
    except ValueError as e:
        return failure(404, "RESOURCE_NOT_FOUND", str(e))
    except Exception as e:
        logging.error(f"반응 처리 중 오류 발생 ({content_type}/{content_id}): {e}", exc_info=True)
        return failure(500, "REACTION_FAILED", "반응 처리 중 오류가 발생했습니다.", error=str(e))

def toggle_post_reaction(reaction_service, user_id: str, post_id: str, body: Optional[Dict[str, Any]] = None) -> ServiceResult:
    return toggle_reaction(reaction_service, user_id, ContentType.POST.value, post_id, body)

def toggle_reel_reaction(reaction_service, user_id: str, reel_id: str, body: Optional[Dict[str, Any]] = None) -> ServiceResult:
    return toggle_reaction(reaction_service, user_id, ContentType.REEL.value, reel_id, body)

def get_reactions(reaction_service, content_type: str, content_id: str) -> ServiceResult:
    """콘텐츠의 반응 종류별 집계를 조회합니다."""
    try:
        summary = reaction_service.get_reactions(content_type, content_id)
        data = {kind: ReactionSummarySchema().dump(item) for kind, item in summary.items()}
        return success("반응 목록을 조회했습니다.", data)
    except ValidationError as err:
        return failure(400, "VALIDATION_ERROR", "입력값이 올바르지 않습니다.", details=err.messages)
    except Exception as e:
        logging.error(f"반응 목록 조회 중 오류 발생 ({content_type}/{content_id}): {e}", exc_info=True)
        return failure(500, "INTERNAL_SERVER_ERROR", "반응 목록 조회 중 오류가 발생했습니다.", error=str(e))

def get_my_reactions(reaction_service, user_id: str, body: Optional[Dict[str, Any]] = None) -> ServiceResult:
    """
    여러 콘텐츠에 대한 내 반응을 한 번에 조회합니다.
    body: {"contentType": "post", "contentIds": [...]}
    """
    body = body or {}
    try:
        reactions = reaction_service.get_my_reactions(user_id, body.get('contentType'), body.get('contentIds'))
        return success("내 반응을 조회했습니다.", {"reactions": reactions})
    except ValidationError as err:
        return failure(400, "VALIDATION_ERROR", "입력값이 올바르지 않습니다.", details=err.messages)
    except Exception as e:
        logging.error(f"내 반응 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return failure(500, "INTERNAL_SERVER_ERROR", "내 반응 조회 중 오류가 발생했습니다.", error=str(e))
