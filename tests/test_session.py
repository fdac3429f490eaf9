import dataclasses

import pytest

from conftest import RecordingConnection
from pairchat.application.services import Session, SessionState
from pairchat.domain.value_objects import UserId


def test_session_starts_unauthenticated():
    session = Session(connection=RecordingConnection())
    assert session.state is SessionState.CONNECTING
    assert session.identity is None
    assert not session.is_authenticated


def test_authenticate_binds_immutable_context():
    session = Session(connection=RecordingConnection())
    context = session.authenticate(UserId("u1"))

    assert session.is_authenticated
    assert context.identity == UserId("u1")
    assert context.session_id == session.id
    with pytest.raises(dataclasses.FrozenInstanceError):
        context.identity = UserId("u2")


def test_cannot_authenticate_twice():
    session = Session(connection=RecordingConnection())
    session.authenticate(UserId("u1"))
    with pytest.raises(RuntimeError):
        session.authenticate(UserId("u2"))
    assert session.identity == UserId("u1")
