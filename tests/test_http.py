import pytest

from taskweb.errors import NetworkError, NotAuthenticated, RequestFailed, SessionExpired
from taskweb.http import ApiResponse, AuthorizedApi
from taskweb.session import SessionStore

from .fakes import FakeResponse, connection_refused


def test_authorized_call_sends_bearer_token(login_as, api, http):
    login_as("Empleado")
    http.reply("GET", "/tasks", 200, [])

    assert api.get("/tasks") == []

    call = http.calls[0]
    assert call.url == "http://api.test/tasks"
    assert call.headers["Authorization"] == "Bearer tok-123"
    assert call.headers["Content-Type"] == "application/json"
    assert call.verify is False
    assert call.timeout == 5.0


def test_no_token_raises_without_sending(api, http):
    with pytest.raises(NotAuthenticated):
        api.get("/tasks")
    assert http.calls == []


def test_401_clears_session_then_raises(login_as, api, http, storage):
    store = login_as("Administrador")
    http.reply("GET", "/users", 401, {"detail": "Token expired"})

    with pytest.raises(SessionExpired):
        api.get("/users")

    assert storage == {}
    assert not store.is_authenticated()


def test_error_detail_is_surfaced(login_as, api, http):
    login_as("Administrador")
    http.reply("DELETE", "/users/9", 404, {"detail": "Usuario no encontrado"})

    with pytest.raises(RequestFailed) as excinfo:
        api.delete("/users/9")

    assert excinfo.value.detail == "Usuario no encontrado"
    assert excinfo.value.status_code == 404


def test_error_without_detail_falls_back_to_status(login_as, api, http):
    login_as("Administrador")
    http.route("GET", "/tasks", FakeResponse(500, text="<html>oops</html>", content_type="text/html"))

    with pytest.raises(RequestFailed, match="Error 500"):
        api.get("/tasks")


def test_validation_errors_are_joined(login_as, api, http):
    login_as("Administrador")
    http.reply("POST", "/tasks", 422, {"detail": [{"msg": "field required"}, {"msg": "bad state"}]})

    with pytest.raises(RequestFailed, match="field required; bad state"):
        api.post("/tasks", json_body={})


def test_transport_failure_becomes_network_error(login_as, api, http):
    login_as("Empleado")
    http.fail_with = connection_refused()

    with pytest.raises(NetworkError):
        api.get("/tasks")


def test_empty_success_body_is_none(login_as, api, http):
    login_as("Administrador")
    http.route("DELETE", "/users/3", FakeResponse(204))

    assert api.delete("/users/3") is None


def test_json_body_served_as_text_is_parsed(client, http):
    http.route("GET", "/health", FakeResponse(200, text='{"status": "ok"}', content_type="text/plain"))

    resp = client.request("get", "health")

    assert resp.ok
    assert resp.method == "GET"
    assert resp.data == {"status": "ok"}


def test_error_detail_ignores_non_dict_bodies():
    resp = ApiResponse(ok=False, status_code=400, url="u", method="GET", data=["x"])
    assert resp.error_detail() is None


def test_store_without_token_never_reaches_transport(client, http):
    api = AuthorizedApi(client, SessionStore({}))
    with pytest.raises(NotAuthenticated):
        api.post("/tasks", json_body={"title": "x"})
    assert http.calls == []
