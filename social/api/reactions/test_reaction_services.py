# social/api/reactions/test_reaction_services.py
"""
반응 서비스 테스트

사용법: python -m pytest social/api/reactions/test_reaction_services.py -v
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from marshmallow import ValidationError
from pymongo.errors import PyMongoError

from conftest import BULK_USERS, OBJECT_ID_POST
from social.models.reaction import REACTION_VALUES

def _buckets_of(reaction_service, user_id, content_type='post', content_id='P1'):
    record = reaction_service.reaction_store.get(content_type, content_id)
    return [kind for kind in REACTION_VALUES if user_id in record.buckets[kind]]

def test_wow_then_like_then_like_again(reaction_service):
    """P1에 U1이 wow -> like -> like 순서로 반응하는 시나리오"""
    first = reaction_service.apply_reaction('post', 'P1', 'U1', 'wow')
    assert first['action'] == 'liked'
    assert first['reaction'] == 'wow'
    assert first['like_count'] == 1
    assert first['is_liked'] is True
    assert first['reactions']['wow'] == [{'id': 'U1', 'name': '김하나', 'avatar': 'https://example.com/u1.png'}]

    second = reaction_service.apply_reaction('post', 'P1', 'U1', 'like')
    assert second['action'] == 'reaction_updated'
    assert second['reaction'] == 'like'
    assert second['like_count'] == 1
    assert second['reactions']['wow'] == []
    assert [u['id'] for u in second['reactions']['like']] == ['U1']

    third = reaction_service.apply_reaction('post', 'P1', 'U1', 'like')
    assert third['action'] == 'unliked'
    assert third['reaction'] is None
    assert third['like_count'] == 0
    assert third['is_liked'] is False

def test_reactions_mapping_lists_every_kind_in_order(reaction_service):
    result = reaction_service.apply_reaction('reel', 'R1', 'U2', 'hug')
    assert list(result['reactions']) == REACTION_VALUES

def test_default_reaction_is_like(reaction_service):
    assert reaction_service.apply_reaction('post', 'P1', 'U1')['reaction'] == 'like'
    assert reaction_service.apply_reaction('post', 'P2', 'U1', None)['reaction'] == 'like'

def test_same_kind_twice_restores_count(reaction_service):
    reaction_service.apply_reaction('post', 'P1', 'U2', 'sad')
    before = reaction_service.apply_reaction('post', 'P1', 'U3', 'happy')['like_count']

    assert reaction_service.apply_reaction('post', 'P1', 'U1', 'angry')['action'] == 'liked'
    after = reaction_service.apply_reaction('post', 'P1', 'U1', 'angry')
    assert after['action'] == 'unliked'
    assert after['like_count'] == before

def test_switching_moves_user_to_new_bucket_only(reaction_service):
    reaction_service.apply_reaction('post', 'P1', 'U1', 'happy')
    result = reaction_service.apply_reaction('post', 'P1', 'U1', 'hug')
    assert result['action'] == 'reaction_updated'
    assert _buckets_of(reaction_service, 'U1') == ['hug']

def test_user_is_in_at_most_one_bucket_after_any_sequence(reaction_service):
    sequence = ['like', 'wow', 'wow', 'sad', 'happy', 'happy', 'angry', 'like', 'hug', 'like']
    for kind in sequence:
        reaction_service.apply_reaction('post', 'P1', 'U1', kind)
        assert len(_buckets_of(reaction_service, 'U1')) <= 1

def test_concurrent_reactions_from_fifty_users(reaction_service):
    # 빈 반응 문서를 먼저 만들어 둔 상태에서 서로 다른 50명이 동시에 반응합니다.
    reaction_service.apply_reaction('post', 'P1', 'U1', 'like')
    reaction_service.apply_reaction('post', 'P1', 'U1', 'like')

    users = BULK_USERS[:50]
    kinds = [REACTION_VALUES[i % len(REACTION_VALUES)] for i in range(len(users))]
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(
            lambda args: reaction_service.apply_reaction('post', 'P1', args[0], args[1]),
            zip(users, kinds)
        ))

    assert all(r['action'] == 'liked' for r in results)
    record = reaction_service.reaction_store.get('post', 'P1')
    assert record.total() == 50
    assert reaction_service.apply_reaction('post', 'P1', 'U2', 'like')['like_count'] == 51

def test_concurrent_repeats_from_same_user_keep_single_bucket(reaction_service):
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: reaction_service.apply_reaction('post', 'P1', 'U1', 'wow'), range(8)))
    assert len(_buckets_of(reaction_service, 'U1')) <= 1

def test_object_id_content_is_reactable(reaction_service):
    result = reaction_service.apply_reaction('post', OBJECT_ID_POST, 'U1', 'like')
    assert result['like_count'] == 1

@pytest.mark.parametrize('args', [
    ('story', 'P1', 'U1', 'like'),
    ('post', 'posts/P1', 'U1', 'like'),
    ('post', 'P1', '', 'like'),
    ('post', 'P1', 'U1', 'love'),
])
def test_apply_reaction_validation(reaction_service, args):
    with pytest.raises(ValidationError):
        reaction_service.apply_reaction(*args)

def test_apply_reaction_missing_content(reaction_service):
    with pytest.raises(ValueError):
        reaction_service.apply_reaction('reel', 'P1', 'U1', 'like')
    assert reaction_service.reaction_store.get('reel', 'P1') is None

def test_apply_reaction_propagates_store_failure(reaction_service, monkeypatch):
    def broken_apply(*args, **kwargs):
        raise PyMongoError("connection reset")
    monkeypatch.setattr(reaction_service.reaction_store, 'apply', broken_apply)

    with pytest.raises(PyMongoError):
        reaction_service.apply_reaction('post', 'P1', 'U1', 'like')

def test_get_reactions_without_record_is_empty(reaction_service):
    assert reaction_service.get_reactions('post', 'P1') == {}
    # 존재하지 않는 콘텐츠도 오류 없이 빈 결과입니다.
    assert reaction_service.get_reactions('post', 'nope') == {}

def test_get_reactions_omits_empty_buckets(reaction_service):
    reaction_service.apply_reaction('post', 'P1', 'U1', 'wow')
    reaction_service.apply_reaction('post', 'P1', 'U2', 'wow')
    reaction_service.apply_reaction('post', 'P1', 'U3', 'like')

    summary = reaction_service.get_reactions('post', 'P1')
    assert set(summary) == {'wow', 'like'}
    assert summary['wow']['count'] == 2
    assert [u['id'] for u in summary['wow']['users']] == ['U1', 'U2']
    assert summary['like']['users'][0]['name'] == '세찬 박'

def test_get_reactions_validation(reaction_service):
    with pytest.raises(ValidationError):
        reaction_service.get_reactions('video', 'P1')

def test_get_my_reactions_batch(reaction_service):
    reaction_service.apply_reaction('post', 'P1', 'U1', 'wow')
    reaction_service.apply_reaction('post', 'P2', 'U2', 'like')

    result = reaction_service.get_my_reactions('U1', 'post', ['P1', 'P2', 'P9', 'bad id', None, 'P1'])
    assert result == {'P1': 'wow', 'P2': None, 'P9': None}

def test_get_my_reactions_ignores_null_ids(reaction_service):
    reaction_service.apply_reaction('post', 'P1', 'U1', 'wow')
    assert reaction_service.get_my_reactions('U1', 'post', ['P1', None]) == {'P1': 'wow'}

def test_get_my_reactions_reads_legacy_records(db, reaction_service):
    db['reactions'].insert_one({'_id': 'reel_R1', 'likes': [[], [], [], ['U1'], [], []]})
    assert reaction_service.get_my_reactions('U1', 'reel', ['R1']) == {'R1': 'hug'}

def test_get_my_reactions_validation(reaction_service):
    with pytest.raises(ValidationError):
        reaction_service.get_my_reactions('U1', 'post', [])
    with pytest.raises(ValidationError):
        reaction_service.get_my_reactions('U1', 'post', ['bad id', 42])
    with pytest.raises(ValidationError):
        reaction_service.get_my_reactions('U1', 'story', ['P1'])

def test_purge_removes_record(reaction_service):
    reaction_service.apply_reaction('post', 'P1', 'U1', 'like')
    assert reaction_service.purge('post', 'P1') is True
    assert reaction_service.get_reactions('post', 'P1') == {}
    assert reaction_service.purge('post', 'P1') is False
