# scripts/test_migrate_reaction_buckets.py
"""
이전 형식 반응 문서 변환 스크립트 테스트

사용법: python -m pytest scripts/test_migrate_reaction_buckets.py -v
"""

from bson import ObjectId

from conftest import OBJECT_ID_POST
from migrate_reaction_buckets import migrate_reaction_buckets
from social.stores.reaction_store import ReactionStore

def _seed(db):
    db['reactions'].insert_many([
        {'_id': 'post_P1', 'content': 'post', 'contentId': 'P1', 'likes': [['U1'], [], [], [], ['U2', 'U1'], []]},
        {'_id': 'reel_R1', 'likes': [[], [], [], [], [], ['U3']]},
        {'_id': 'post_P2', 'content_type': 'post', 'content_id': 'P2', 'buckets': {'like': ['U1']}},
    ])

def test_dry_run_only_counts(db):
    _seed(db)
    store = ReactionStore(db)
    assert migrate_reaction_buckets(store, dry_run=True) == 2
    assert 'likes' in db['reactions'].find_one({'_id': 'post_P1'})

def test_migration_converts_legacy_documents(db):
    _seed(db)
    store = ReactionStore(db)
    assert migrate_reaction_buckets(store) == 2

    converted = db['reactions'].find_one({'_id': 'post_P1'})
    assert 'likes' not in converted
    assert converted['content_type'] == 'post'
    assert converted['content_id'] == 'P1'
    assert converted['buckets']['happy'] == ['U1']
    assert converted['buckets']['wow'] == ['U2']

    # content 필드가 없던 문서는 _id에서 유형과 ID를 복원합니다.
    reel = db['reactions'].find_one({'_id': 'reel_R1'})
    assert reel['content_type'] == 'reel'
    assert reel['content_id'] == 'R1'
    assert reel['buckets']['like'] == ['U3']

    assert migrate_reaction_buckets(store) == 0
    assert store.get('post', 'P2').buckets['like'] == ['U1']

def test_migration_moves_object_id_keyed_documents(db, reaction_service):
    db['reactions'].insert_one({
        '_id': ObjectId(), 'content': 'post', 'contentId': ObjectId(OBJECT_ID_POST),
        'likes': [[], [], [], [], ['U1'], []],
    })
    assert migrate_reaction_buckets(reaction_service.reaction_store) == 1

    # 원본 문서는 '{유형}_{ID}' 문서로 옮겨지고 지워집니다.
    assert db['reactions'].count_documents({}) == 1
    assert db['reactions'].find_one({'_id': f'post_{OBJECT_ID_POST}'})['buckets']['wow'] == ['U1']
    assert reaction_service.get_my_reactions('U1', 'post', [OBJECT_ID_POST]) == {OBJECT_ID_POST: 'wow'}
    assert reaction_service.get_reactions('post', OBJECT_ID_POST)['wow']['count'] == 1

    result = reaction_service.apply_reaction('post', OBJECT_ID_POST, 'U1', 'wow')
    assert result['action'] == 'unliked'
    assert db['reactions'].count_documents({}) == 1

def test_migration_merges_into_existing_record(db, reaction_service):
    reaction_service.apply_reaction('post', OBJECT_ID_POST, 'U2', 'sad')
    db['reactions'].insert_one({
        '_id': ObjectId(), 'content': 'post', 'contentId': ObjectId(OBJECT_ID_POST),
        'likes': [['U2'], [], [], [], [], ['U3']],
    })
    assert migrate_reaction_buckets(reaction_service.reaction_store) == 1

    record = reaction_service.reaction_store.get('post', OBJECT_ID_POST)
    # 이미 반응한 사용자는 현재 반응을 유지합니다.
    assert record.find_reaction('U2') == 'sad'
    assert record.find_reaction('U3') == 'like'
    assert db['reactions'].count_documents({}) == 1

def test_migration_skips_documents_without_content(db):
    legacy_id = ObjectId()
    db['reactions'].insert_one({'_id': legacy_id, 'likes': [['U1'], [], [], [], [], []]})
    assert migrate_reaction_buckets(ReactionStore(db)) == 0
    assert 'likes' in db['reactions'].find_one({'_id': legacy_id})
