from src.rndc_admin.session import SessionStore
from src.rndc_admin.storage import AUTH_TOKEN_KEY, AUTH_USER_KEY, CURRENT_VIEW_KEY


def test_storage_set_get_remove(storage):
    assert storage.get("x") is None
    storage.set("x", "1")
    storage.set("x", "2")
    assert storage.get("x") == "2"
    storage.remove("x")
    assert storage.get("x", "def") == "def"


def test_login_persists_and_restore_rehydrates(storage, admin_session):
    SessionStore(storage).login(admin_session)
    assert storage.get(AUTH_TOKEN_KEY) == "tok-admin"
    assert "tok-admin" not in storage.get(AUTH_USER_KEY)
    restored = SessionStore(storage).restore()
    assert restored == admin_session


def test_logout_clears_credentials_but_keeps_last_view(storage, session_store, admin_session):
    session_store.login(admin_session)
    session_store.set_current_view("pagos")
    session_store.logout()
    assert session_store.current is None
    assert session_store.token() is None
    for key in (AUTH_TOKEN_KEY, AUTH_USER_KEY):
        assert storage.get(key) is None
    assert storage.get(CURRENT_VIEW_KEY) == "pagos"
    session_store.login(admin_session)
    assert session_store.current_view() == "pagos"


def test_restore_discards_corrupt_or_disallowed(storage, session_store):
    storage.set(AUTH_USER_KEY, "{no json")
    storage.set(AUTH_TOKEN_KEY, "t")
    assert session_store.restore() is None
    assert storage.get(AUTH_TOKEN_KEY) is None
    storage.set(AUTH_USER_KEY, '{"dni": "1", "rol": "Oyente"}')
    storage.set(AUTH_TOKEN_KEY, "t")
    assert session_store.restore() is None
