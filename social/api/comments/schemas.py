# social/api/comments/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from social.models.content import ContentType, CONTENT_TYPE_VALUES, REPLY_MAX_LENGTH
from social.utils.validators import validate_document_id, text_length

def _content_type_field(**kwargs):
    return fields.Str(required=True, validate=validate.OneOf(CONTENT_TYPE_VALUES, error="지원하지 않는 콘텐츠 유형입니다."), **kwargs)

def _id_field(**kwargs):
    return fields.Str(required=True, validate=validate_document_id, **kwargs)

# --- 요청 스키마 ---

class CommentTargetSchema(Schema):
    """댓글 하나를 가리키는 요청 (삭제 등)."""
    user_id = _id_field()
    content_id = _id_field()
    content_type = _content_type_field()
    comment_id = _id_field()

class ReplyTargetSchema(CommentTargetSchema):
    reply_id = _id_field()

class CommentCreateSchema(Schema):
    """
    댓글 작성 요청의 유효성을 검사합니다.
    본문 최대 길이는 콘텐츠 유형에 따라 다릅니다 (게시물 1000자, 릴스 500자).
    """
    user_id = _id_field()
    content_id = _id_field()
    content_type = _content_type_field()
    text = fields.Str(required=True)

    @validates_schema
    def validate_text(self, data, **kwargs):
        text = data.get('text')
        if text is None:
            return
        if not text.strip():
            raise ValidationError("댓글 내용을 입력해주세요.", field_name='text')
        if data.get('content_type') in CONTENT_TYPE_VALUES:
            max_length = ContentType(data['content_type']).comment_max_length
            if text_length(text) > max_length:
                raise ValidationError(f"댓글은 {max_length}자를 넘을 수 없습니다.", field_name='text')

class ReplyCreateSchema(Schema):
    """답글 작성 요청. 답글은 콘텐츠 유형과 관계없이 1000자까지 허용합니다."""
    user_id = _id_field()
    content_id = _id_field()
    content_type = _content_type_field()
    comment_id = _id_field()
    text = fields.Str(required=True)

    @validates_schema
    def validate_text(self, data, **kwargs):
        text = data.get('text')
        if text is None:
            return
        if not text.strip():
            raise ValidationError("답글 내용을 입력해주세요.", field_name='text')
        if text_length(text) > REPLY_MAX_LENGTH:
            raise ValidationError(f"답글은 {REPLY_MAX_LENGTH}자를 넘을 수 없습니다.", field_name='text')

class CommentListQuerySchema(Schema):
    """댓글 목록 조회 쿼리. 정의되지 않은 키는 무시합니다."""
    class Meta:
        unknown = EXCLUDE

    content_id = _id_field(data_key='contentId')
    content_type = _content_type_field(data_key='contentType')
    page = fields.Int(load_default=1, validate=validate.Range(min=1, error="page는 1 이상이어야 합니다."))
    limit = fields.Int(load_default=15, validate=validate.Range(min=1, max=100, error="limit은 1~100 사이여야 합니다."))
    sort_by = fields.Str(data_key='sortBy', load_default='createdAt', validate=validate.OneOf(['createdAt', 'replyCount']))
    sort_order = fields.Int(data_key='sortOrder', load_default=-1, validate=validate.OneOf([1, -1]))

class ReplyListQuerySchema(Schema):
    """답글 목록 조회 쿼리. 기본 정렬은 오래된 순입니다."""
    class Meta:
        unknown = EXCLUDE

    content_id = _id_field(data_key='contentId')
    content_type = _content_type_field(data_key='contentType')
    comment_id = _id_field(data_key='commentId')
    page = fields.Int(load_default=1, validate=validate.Range(min=1, error="page는 1 이상이어야 합니다."))
    limit = fields.Int(load_default=10, validate=validate.Range(min=1, max=100, error="limit은 1~100 사이여야 합니다."))
    sort_by = fields.Str(data_key='sortBy', load_default='createdAt', validate=validate.OneOf(['createdAt']))
    sort_order = fields.Int(data_key='sortOrder', load_default=1, validate=validate.OneOf([1, -1]))

# --- 응답 스키마 ---

class CommentUserSchema(Schema):
    """댓글/답글 작성자 정보."""
    id = fields.Str(required=True)
    name = fields.Str()
    first_name = fields.Str(data_key='firstName')
    last_name = fields.Str(data_key='lastName')
    avatar = fields.Str(allow_none=True)

class ReplyResponseSchema(Schema):
    id = fields.Str(required=True)
    user_id = fields.Str(required=True, data_key='userId')
    user = fields.Nested(CommentUserSchema, allow_none=True)
    text = fields.Str(required=True)
    created_at = fields.DateTime(required=True, data_key='createdAt')

class CommentResponseSchema(Schema):
    """댓글 응답. 답글은 페이지 없이 전부 포함합니다."""
    id = fields.Str(required=True)
    user_id = fields.Str(required=True, data_key='userId')
    user = fields.Nested(CommentUserSchema, allow_none=True)
    text = fields.Str(required=True)
    replies = fields.List(fields.Nested(ReplyResponseSchema), dump_default=list)
    reply_count = fields.Int(required=True, data_key='replyCount')
    created_at = fields.DateTime(required=True, data_key='createdAt')

class ParentCommentSchema(Schema):
    id = fields.Str(required=True)
    reply_count = fields.Int(required=True, data_key='replyCount')

class ReplyCreatedSchema(Schema):
    reply = fields.Nested(ReplyResponseSchema, required=True)
    comment = fields.Nested(ParentCommentSchema, required=True)

class PaginationSchema(Schema):
    page = fields.Int(required=True)
    limit = fields.Int(required=True)
    total = fields.Int(required=True)
    pages = fields.Int(required=True)

class CommentListSchema(Schema):
    content_id = fields.Str(data_key='contentId')
    content_type = fields.Str(data_key='contentType')
    comments = fields.List(fields.Nested(CommentResponseSchema), required=True)
    pagination = fields.Nested(PaginationSchema, required=True)

class ReplyListSchema(Schema):
    replies = fields.List(fields.Nested(ReplyResponseSchema), required=True)
    pagination = fields.Nested(PaginationSchema, required=True)
