import json

import pytest

from taskweb.errors import AuthenticationError
from taskweb.permissions import CASHIER
from taskweb.session import PROFILE_KEY, SESSION_KEYS, TOKEN_KEY, USER_ID_KEY, Credentials, SessionStore

from .fakes import FakeResponse, connection_refused, login_body


def test_login_success_persists_three_keys(store, storage, http):
    http.reply("POST", "/users/login", 200, login_body(user_id="42", roles=["Gerente"]))

    session = store.login(Credentials(email="ana@example.com", password="secret"))

    assert session.subject_id == "42"
    assert session.display_name == "Ana López"
    assert session.roles == ("Gerente",)
    assert set(storage) == set(SESSION_KEYS)
    assert storage[TOKEN_KEY] == "tok-123"
    assert storage[USER_ID_KEY] == "42"
    assert json.loads(storage[PROFILE_KEY])["roles"] == ["Gerente"]

    call = http.calls[0]
    assert call.json == {"emails": "ana@example.com", "password": "secret"}
    assert "Authorization" not in call.headers


def test_login_failure_passes_backend_detail_verbatim(store, storage, http):
    http.reply("POST", "/users/login", 401, {"detail": "Credenciales inválidas"})

    with pytest.raises(AuthenticationError) as excinfo:
        store.login(Credentials(email="ana@example.com", password="bad"))

    assert str(excinfo.value) == "Credenciales inválidas"
    assert storage == {}
    assert not store.is_authenticated()


def test_login_failure_without_detail_uses_generic_message(store, http):
    http.route("POST", "/users/login", FakeResponse(500, text="boom", content_type="text/plain"))

    with pytest.raises(AuthenticationError, match="Error de autenticación"):
        store.login(Credentials(email="ana@example.com", password="x"))


def test_login_network_failure(store, storage, http):
    http.fail_with = connection_refused()

    with pytest.raises(AuthenticationError, match="Error de conexión con el servidor"):
        store.login(Credentials(email="ana@example.com", password="x"))
    assert storage == {}


def test_login_without_token_is_rejected(store, storage, http):
    body = login_body()
    del body["access_token"]
    http.reply("POST", "/users/login", 200, body)

    with pytest.raises(AuthenticationError):
        store.login(Credentials(email="ana@example.com", password="x"))
    assert storage == {}


def test_login_requires_client(storage):
    with pytest.raises(RuntimeError):
        SessionStore(storage).login(Credentials(email="a", password="b"))


def test_logout_is_idempotent(login_as, storage):
    store = login_as("Empleado")
    storage["unrelated"] = 1

    store.logout()
    store.logout()

    assert storage == {"unrelated": 1}
    assert not store.is_authenticated()


def test_projections_on_empty_store(storage):
    store = SessionStore(storage)
    assert store.get_token() is None
    assert store.get_user_id() is None
    assert store.get_user_profile() is None
    assert store.get_username() == ""
    assert store.get_user_roles() == ()
    assert store.current() is None
    assert not store.has_permission("read")
    assert not store.has_role("Administrador")


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "null"])
def test_corrupt_profile_reads_as_absent(storage, raw):
    storage[TOKEN_KEY] = "tok"
    storage[PROFILE_KEY] = raw
    store = SessionStore(storage)

    assert store.get_user_profile() is None
    assert store.get_user_roles() == ()
    assert store.is_authenticated()


def test_cashier_can_read_and_update_only(login_as):
    store = login_as(CASHIER)

    assert store.has_permission("read")
    assert store.has_permission("update")
    assert not store.has_permission("create")
    assert not store.has_permission("delete")
    assert store.has_role(CASHIER)
    assert not store.has_role("Administrador")


def test_current_session_reflects_stored_keys(login_as):
    store = login_as("Administrador", user_id="7")

    current = store.current()
    assert current is not None
    assert current.subject_id == "7"
    assert current.token == "tok-123"
    assert current.roles == ("Administrador",)


def test_profile_roles_that_are_not_a_list_read_as_none(storage):
    storage[TOKEN_KEY] = "tok"
    storage[PROFILE_KEY] = json.dumps({"id": "u1", "firstName": "Ana", "roles": "Administrador"})
    store = SessionStore(storage)

    assert store.get_user_roles() == ()
    assert not store.has_role("Administrador")
    assert not store.has_permission("delete")
    assert store.get_username() == "Ana"


def test_login_with_string_roles_grants_nothing(store, http):
    http.reply("POST", "/users/login", 200, dict(login_body(), roles="Administrador"))

    session = store.login(Credentials(email="ana@example.com", password="secret"))

    assert session.roles == ()
    assert store.get_user_roles() == ()
