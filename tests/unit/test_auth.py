"""
Unit tests for bearer-token identity verification.
"""
import pytest

from roster.routes.auth import Actor, IdentityVerifier, StaticTokenVerifier, get_current_actor


class TestIdentityVerifiers:

    @pytest.mark.unit
    def test_verifier_interface_is_abstract(self):
        with pytest.raises(TypeError):
            IdentityVerifier()

    @pytest.mark.unit
    def test_static_tokens(self):
        actor = Actor(uid='svc-1', email='svc@example.com')
        verifier = StaticTokenVerifier({'abc': actor})
        assert verifier.verify('abc') == actor
        assert verifier.verify('other') is None

    @pytest.mark.unit
    @pytest.mark.parametrize('header,expected_uid', [
        ('Bearer test-token', 'admin-1'),
        ('bearer test-token', 'admin-1'),
        ('Bearer ', None),
        ('Basic test-token', None),
        ('', None),
    ])
    def test_current_actor_from_header(self, app, header, expected_uid):
        with app.test_request_context('/', headers={'Authorization': header}):
            actor = get_current_actor()
            assert (actor.uid if actor else None) == expected_uid
