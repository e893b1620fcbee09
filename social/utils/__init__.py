# social/utils/__init__.py
"""
유틸리티 모듈 패키지

시간 처리, 문서 ID 검증, 핸들러 결과 디스크립터처럼 프로젝트 전체에서 공통으로 사용하는 기능을 포함합니다.
"""

from .datetime_utils import DateTimeUtils
from .validators import is_valid_document_id, validate_document_id, id_candidates, text_length
from .exceptions import RetryableError, ReactionConflictError
from .responses import ServiceResult, success, failure

__all__ = [
    'DateTimeUtils',
    'is_valid_document_id', 'validate_document_id', 'id_candidates', 'text_length',
    'RetryableError', 'ReactionConflictError',
    'ServiceResult', 'success', 'failure'
]
