# social/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging

# - 설정
from social.core.config import config_by_name
from social.models.database import connect

# - 협력 서비스 및 저장소
from social.services.content_gate import ContentGate
from social.services.user_profile_service import UserProfileService
from social.stores.reaction_store import ReactionStore
from social.stores.comment_store import CommentThreadStore

# - 도메인 서비스
from social.api.reactions.services import ReactionService
from social.api.comments.services import CommentService

def create_services(config_name=None, db=None):
    """
    반응/댓글 서비스 팩토리 함수.
    - config_name이 없으면 APP_ENV 환경 변수(기본 'development')로 설정 클래스를 고릅니다.
    - db를 주입하면 MongoDB 연결을 건너뜁니다 (테스트용).
    """
    config_name = config_name or os.getenv('APP_ENV', 'development')
    config = config_by_name[config_name]

    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    )

    if db is None:
        db = connect(config)

    # =====================================================================================
    # 3. 서비스 인스턴스 생성 (의존성 주입)
    # =====================================================================================
    services = {}

    # 3-1. 다른 서비스의 기반이 되는 읽기 전용 협력 서비스와 저장소
    services['content_gate'] = ContentGate(db, config.POSTS_COLLECTION, config.REELS_COLLECTION)
    services['user_profiles'] = UserProfileService(db, config.USERS_COLLECTION)
    services['reaction_store'] = ReactionStore(db, config.REACTIONS_COLLECTION, max_attempts=config.REACTION_MAX_ATTEMPTS)
    services['comment_store'] = CommentThreadStore(db, config.COMMENT_THREADS_COLLECTION)

    # 3-2. 도메인 서비스
    services['reactions'] = ReactionService(
        reaction_store=services['reaction_store'],
        content_gate=services['content_gate'],
        user_profiles=services['user_profiles']
    )
    services['comments'] = CommentService(
        comment_store=services['comment_store'],
        content_gate=services['content_gate'],
        user_profiles=services['user_profiles']
    )

    logging.info(f"Social services created for '{config_name}' environment.")
    return services
