# social/models/database.py
import logging
from pymongo import MongoClient
from pymongo.errors import ConnectionFailure

logger = logging.getLogger(__name__)

def connect(config):
    """
    설정 클래스의 MONGODB_URI로 클라이언트를 만들고 ping으로 연결을 확인한 뒤 DB 핸들을 반환합니다.
    클라이언트는 스레드 안전하므로 프로세스 전체에서 하나만 만들어 공유합니다.
    """
    try:
        client = MongoClient(config.MONGODB_URI, tz_aware=True)
        client.admin.command('ping')
        logger.info("Successfully connected to MongoDB")
    except ConnectionFailure as e:
        logger.critical(f"Failed to connect to MongoDB: {str(e)}")
        raise
    return client[config.MONGODB_DB_NAME]
