# social/test_factory.py
"""
서비스 팩토리(create_services) 테스트

사용법: python -m pytest social/test_factory.py -v
"""

import pytest
from pymongo.errors import ConnectionFailure

import social
from social import create_services
from social.api.comments.services import CommentService
from social.api.reactions.services import ReactionService
from social.core.config import TestingConfig, DevelopmentConfig
from social.models import database

def test_create_services_wires_shared_collaborators(db):
    services = create_services('testing', db=db)
    assert set(services) == {'content_gate', 'user_profiles', 'reaction_store', 'comment_store', 'reactions', 'comments'}
    assert isinstance(services['reactions'], ReactionService)
    assert isinstance(services['comments'], CommentService)
    assert services['reactions'].content_gate is services['comments'].content_gate
    assert services['reactions'].user_profiles is services['comments'].user_profiles
    assert services['reaction_store'].max_attempts == TestingConfig.REACTION_MAX_ATTEMPTS

def test_create_services_connects_with_selected_config(db, monkeypatch):
    seen = {}
    def fake_connect(config):
        seen['config'] = config
        return db
    monkeypatch.setattr(social, 'connect', fake_connect)
    monkeypatch.setenv('APP_ENV', 'development')

    services = create_services()
    assert seen['config'] is DevelopmentConfig
    assert services['content_gate'].check('post', 'P1').exists is True

def test_connect_propagates_connection_failure(monkeypatch):
    class UnreachableClient:
        def __init__(self, *args, **kwargs):
            self.admin = self
        def command(self, name):
            raise ConnectionFailure("no server")
    monkeypatch.setattr(database, 'MongoClient', UnreachableClient)

    with pytest.raises(ConnectionFailure):
        database.connect(TestingConfig)
