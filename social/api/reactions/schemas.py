# social/api/reactions/schemas.py
from marshmallow import Schema, fields, validate

from social.models.content import CONTENT_TYPE_VALUES
from social.models.reaction import REACTION_VALUES, DEFAULT_REACTION
from social.utils.validators import validate_document_id

# --- 요청 스키마 ---

class ContentRefSchema(Schema):
    """반응 대상 콘텐츠(유형 + ID)를 검사합니다."""
    content_type = fields.Str(required=True, validate=validate.OneOf(CONTENT_TYPE_VALUES, error="지원하지 않는 콘텐츠 유형입니다."))
    content_id = fields.Str(required=True, validate=validate_document_id)

class ApplyReactionSchema(ContentRefSchema):
    """반응 토글/변경 요청. reaction을 생략하면 'like'로 처리합니다."""
    user_id = fields.Str(required=True, validate=validate_document_id)
    reaction = fields.Str(load_default=DEFAULT_REACTION, validate=validate.OneOf(REACTION_VALUES, error="지원하지 않는 반응 종류입니다."))

class MyReactionsQuerySchema(Schema):
    """
    여러 콘텐츠에 대한 내 반응 일괄 조회 요청.
    잘못된 형식의 ID는 서비스에서 조용히 걸러내므로 여기서는 목록 여부만 확인합니다.
    """
    user_id = fields.Str(required=True, validate=validate_document_id)
    content_type = fields.Str(required=True, data_key='contentType', validate=validate.OneOf(CONTENT_TYPE_VALUES, error="지원하지 않는 콘텐츠 유형입니다."))
    content_ids = fields.List(fields.Raw(allow_none=True), required=True, data_key='contentIds', validate=validate.Length(min=1, error="콘텐츠 ID 목록이 비어 있습니다."))

# --- 응답 스키마 ---

class ReactionUserSchema(Schema):
    """반응 버킷에 포함되는 사용자 프로필 조각."""
    id = fields.Str(required=True)
    name = fields.Str()
    avatar = fields.Str(allow_none=True)

class ReactionResultSchema(Schema):
    """반응 토글/변경 결과 응답 형식."""
    action = fields.Str(required=True)
    reaction = fields.Str(allow_none=True)
    like_count = fields.Int(required=True, data_key='likeCount')
    is_liked = fields.Bool(required=True, data_key='isLiked')
    reactions = fields.Dict(keys=fields.Str(), values=fields.List(fields.Nested(ReactionUserSchema)))

class ReactionSummarySchema(Schema):
    """반응 종류 하나의 집계 (비어 있는 종류는 응답에서 제외)."""
    count = fields.Int(required=True)
    users = fields.List(fields.Nested(ReactionUserSchema), required=True)
