# social/utils/validators.py
import re
from typing import List, Union
from bson import ObjectId
from marshmallow import ValidationError

# ObjectId 16진 문자열, uuid4 hex, 짧은 슬러그형 ID를 모두 허용합니다.
_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,128}$')

def is_valid_document_id(value) -> bool:
    """문서 ID로 사용할 수 있는 문자열인지 확인합니다."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))

def validate_document_id(value):
    """marshmallow 필드 validator. 잘못된 ID면 ValidationError를 발생시킵니다."""
    if not is_valid_document_id(value):
        raise ValidationError("유효하지 않은 ID 형식입니다.")

def id_candidates(value: str) -> List[Union[str, ObjectId]]:
    """
    외부 컬렉션(posts/reels/users)은 문자열 ID와 ObjectId를 섞어 쓰므로
    24자리 16진 문자열이면 두 형태로 모두 조회합니다.
    """
    candidates: List[Union[str, ObjectId]] = [value]
    if ObjectId.is_valid(value):
        candidates.append(ObjectId(value))
    return candidates

def text_length(text: str) -> int:
    """UTF-16 코드 단위 기준 글자 수. 이모지 등 BMP 밖 문자는 2자로 셉니다."""
    return len(text.encode('utf-16-le')) // 2
