"""Tests for journal.identity: session subject vs device id."""

from healthnote.journal.identity import IdentityResolver, SessionProvider


def test_session_subject_wins(store, session):
    resolver = IdentityResolver(store, session)
    assert resolver.resolve() == "user-123"
    assert resolver.is_authenticated()
    assert store.read_device_id() is None  # nothing generated


def test_device_id_generated_once(store):
    resolver = IdentityResolver(store)
    first = resolver.resolve()
    assert first
    assert store.read_device_id() == first
    assert resolver.resolve() == first
    assert IdentityResolver(store).resolve() == first


def test_signed_out_session_falls_back_to_device_id(store, session):
    session.user_id = None
    resolver = IdentityResolver(store, session)
    assert not resolver.is_authenticated()
    device_id = resolver.resolve()
    assert device_id != "user-123"
    assert device_id == store.read_device_id()


def test_existing_device_id_reused(store):
    store.write_device_id("stable-device")
    assert IdentityResolver(store).resolve() == "stable-device"


def test_fake_session_satisfies_protocol(session):
    assert isinstance(session, SessionProvider)
