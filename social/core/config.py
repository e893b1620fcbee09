# social/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://localhost:27017')
    MONGODB_DB_NAME = os.getenv('MONGODB_DB_NAME', 'social')

    # 컬렉션 이름. 게시물/릴스/사용자 컬렉션은 다른 서비스가 소유하며 여기서는 읽기만 합니다.
    POSTS_COLLECTION = os.getenv('POSTS_COLLECTION', 'posts')
    REELS_COLLECTION = os.getenv('REELS_COLLECTION', 'reels')
    USERS_COLLECTION = os.getenv('USERS_COLLECTION', 'users')
    REACTIONS_COLLECTION = os.getenv('REACTIONS_COLLECTION', 'reactions')
    COMMENT_THREADS_COLLECTION = os.getenv('COMMENT_THREADS_COLLECTION', 'comment_threads')

    # 같은 사용자의 동시 반응 요청이 충돌했을 때 다시 시도하는 최대 횟수
    REACTION_MAX_ATTEMPTS = int(os.getenv('REACTION_MAX_ATTEMPTS', 5))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    DEBUG = False
    TESTING = False

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')
    MONGODB_DB_NAME = os.getenv('DEV_MONGODB_DB_NAME', Config.MONGODB_DB_NAME)

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    MONGODB_DB_NAME = os.getenv('TEST_MONGODB_DB_NAME', 'social_test')

class ProductionConfig(Config):
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')

# APP_ENV 값('development', 'testing', 'production')에 따라 create_services에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
