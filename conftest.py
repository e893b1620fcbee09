# conftest.py
"""
공용 pytest 픽스처

mongomock으로 만든 인메모리 DB에 게시물/릴스/사용자 문서를 미리 넣어두고,
create_services에 주입해 실제 저장소와 서비스를 그대로 사용합니다.
"""

import pytest
import mongomock
from bson import ObjectId

from social import create_services

POST_OWNER = 'owner1'
REEL_OWNER = 'owner2'
OBJECT_ID_POST = '65a1f0c2e4b0a1b2c3d4e5f6'
BULK_USERS = [f'user{i:02d}' for i in range(60)]

@pytest.fixture
def db():
    client = mongomock.MongoClient(tz_aware=True)
    database = client['social_test']
    database['posts'].insert_many([
        {'_id': 'P1', 'author': {'user_id': POST_OWNER, 'nickname': 'owner'}, 'text': '첫 게시물'},
        {'_id': 'P2', 'author': {'user_id': POST_OWNER, 'nickname': 'owner'}, 'text': '두 번째 게시물'},
        {'_id': ObjectId(OBJECT_ID_POST), 'user_id': POST_OWNER, 'text': 'ObjectId 게시물'},
    ])
    database['reels'].insert_one({'_id': 'R1', 'user_id': REEL_OWNER, 'video_url': 'https://example.com/r1.mp4'})

    users = [
        {'_id': 'U1', 'name': '김하나', 'first_name': '하나', 'last_name': '김', 'profile_image_url': 'https://example.com/u1.png'},
        {'_id': 'U2', 'nickname': 'dubu', 'first_name': '두리', 'last_name': '이'},
        {'_id': 'U3', 'first_name': '세찬', 'last_name': '박'},
        {'_id': POST_OWNER, 'name': '게시물 주인'},
        {'_id': REEL_OWNER, 'name': '릴스 주인'},
    ]
    users.extend({'_id': uid, 'name': f'사용자 {uid}'} for uid in BULK_USERS)
    database['users'].insert_many(users)
    return database

@pytest.fixture
def services(db):
    return create_services('testing', db=db)

@pytest.fixture
def reaction_service(services):
    return services['reactions']

@pytest.fixture
def comment_service(services):
    return services['comments']
