# social/services/test_collaborators.py
"""
콘텐츠 존재 확인/사용자 프로필 조회 서비스 테스트

사용법: python -m pytest social/services/test_collaborators.py -v
"""

import pytest

from conftest import OBJECT_ID_POST, POST_OWNER, REEL_OWNER
from social.services.content_gate import ContentGate
from social.services.user_profile_service import UserProfileService

def test_gate_reports_owner_for_existing_content(db):
    gate = ContentGate(db)
    post = gate.check('post', 'P1')
    assert post.exists is True
    assert post.owner_id == POST_OWNER

    reel = gate.check('reel', 'R1')
    assert reel.exists is True
    assert reel.owner_id == REEL_OWNER

def test_gate_finds_object_id_documents(db):
    info = ContentGate(db).check('post', OBJECT_ID_POST)
    assert info.exists is True
    assert info.owner_id == POST_OWNER

def test_gate_missing_content(db):
    gate = ContentGate(db)
    assert gate.check('post', 'nope').exists is False
    # 릴스 컬렉션에만 있는 ID는 게시물로 조회되지 않습니다.
    assert gate.check('post', 'R1').exists is False
    assert gate.check('reel', 'P1').owner_id is None

def test_gate_rejects_unknown_content_type(db):
    with pytest.raises(ValueError):
        ContentGate(db).check('story', 'P1')

def test_resolve_keeps_order_dedupes_and_skips_missing(db):
    profiles = UserProfileService(db).resolve(['U3', 'U1', 'ghost', 'U3', 'bad/id'])
    assert [p.id for p in profiles] == ['U3', 'U1']
    assert profiles[0].name == '세찬 박'
    assert profiles[1].avatar == 'https://example.com/u1.png'

def test_resolve_map_and_empty_input(db):
    service = UserProfileService(db)
    assert service.resolve([]) == []
    assert set(service.resolve_map(['U1', 'U2'])) == {'U1', 'U2'}
    assert service.resolve_map(['U2'])['U2'].name == 'dubu'
