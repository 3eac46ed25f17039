from datetime import datetime

from taskweb.permissions import ADMIN, EMPLOYEE, MANAGER

from .fakes import user_body

NOW = datetime(2024, 5, 10, 12, 0, 0)


def test_list_users_maps_backend_fields(login_as, admin, http):
    login_as(ADMIN)
    http.reply("GET", "/users", 200, [user_body("u1", age=31, roles=[MANAGER])])

    [user] = admin.list_users()

    assert user.id == "u1"
    assert user.full_name == "Ana López"
    assert user.email == "ana@example.com"
    assert user.age == 31
    assert user.current_role == MANAGER
    assert user.active
    assert user.to_record()["nombre"] == "Ana López"


def test_deleted_users_are_inactive(login_as, admin, http):
    login_as(ADMIN)
    http.reply("GET", "/users/deleted", 200, [user_body("u5", delete_at=None)])

    [user] = admin.list_deleted_users()

    assert not user.active


def test_create_user_body(login_as, admin, http):
    login_as(ADMIN)
    http.reply("POST", "/users", 201, user_body("u3"))

    admin.create_user(first_name="Ana", last_name="López", email="ana@example.com", password="pw", age="30")

    assert http.calls[0].json == {
        "firstName": "Ana",
        "lastName": "López",
        "emails": "ana@example.com",
        "password": "pw",
        "ages": 30,
    }


def test_update_user_sends_only_given_fields(login_as, admin, http):
    login_as(ADMIN)
    http.reply("PUT", "/users/u3", 200, user_body("u3"))

    admin.update_user("u3", email="nuevo@example.com")

    assert http.calls[0].json == {"emails": "nuevo@example.com"}


def test_role_and_soft_delete_endpoints(login_as, admin, http):
    login_as(ADMIN)
    http.reply("POST", "/users/u3/roles", 200, user_body("u3", roles=[MANAGER]))
    http.reply("DELETE", "/users/u3", 200, {"ok": True})
    http.reply("POST", "/users/u3/restore", 200, {"ok": True})

    updated = admin.assign_role("u3", MANAGER)
    admin.delete_user("u3")
    admin.restore_user("u3")

    assert updated.roles == (MANAGER,)
    assert [(c.method, c.path) for c in http.calls] == [
        ("POST", "/users/u3/roles"),
        ("DELETE", "/users/u3"),
        ("POST", "/users/u3/restore"),
    ]
    assert http.calls[0].json == {"role_name": MANAGER}


def test_roles_listing(login_as, admin, http):
    login_as(ADMIN)
    http.reply("GET", "/roles", 200, [{"id": 1, "rol_nombre": ADMIN, "rol_permisos": "todo"}])

    [role] = admin.list_roles()

    assert (role.id, role.name, role.permissions) == ("1", ADMIN, "todo")


def test_user_stats_counts_and_recent_window(login_as, admin, http):
    login_as(ADMIN)
    http.reply(
        "GET",
        "/users",
        200,
        [
            user_body("u1", roles=[ADMIN], create_at="2024-05-09T08:00:00"),
            user_body("u2", roles=[EMPLOYEE], create_at="2024-05-03T12:00:00Z"),
            user_body("u3", roles=[EMPLOYEE], create_at="2024-04-01T00:00:00"),
            user_body("u4", roles=[], create_at=None),
        ],
    )
    http.reply("GET", "/users/deleted", 200, [user_body("u9", roles=[EMPLOYEE])])

    stats = admin.user_stats(now=NOW)

    assert stats.total_users == 5
    assert stats.active_users == 4
    assert stats.inactive_users == 1
    assert stats.users_by_role == {ADMIN: 1, EMPLOYEE: 2}
    # u1 is two days old, u2 exactly seven.
    assert stats.recent_registrations == 2


def test_simple_listing_and_role_removal(login_as, admin, http):
    login_as(ADMIN)
    http.reply("GET", "/users/simple", 200, [{"id": 4, "firstName": "Luis", "lastName": "Pérez", "emails": "luis@example.com"}])
    http.reply("DELETE", f"/users/u4/roles/{MANAGER}", 200, user_body("u4", roles=[]))

    [summary] = admin.list_user_summaries()
    updated = admin.remove_role("u4", MANAGER)

    assert (summary.id, summary.full_name) == ("4", "Luis Pérez")
    assert updated.roles == ()
