import pytest

from taskweb.models import COMPLETED, IN_PROGRESS, PENDING

from .fakes import task_body

ANA = {"id": "u1", "firstName": "Ana", "lastName": "López", "emails": "ana@example.com"}
LUIS = {"id": "u2", "firstName": "Luis", "lastName": "Pérez", "emails": "luis@example.com"}


def test_create_then_get_round_trip(login_as, tasks, http):
    login_as("Empleado")
    http.reply("POST", "/tasks", 201, task_body("t9", title="X", users=[ANA]))
    http.reply("GET", "/tasks/t9", 200, task_body("t9", title="X", users=[ANA]))

    created = tasks.create_task(title="X", user_id="u1")
    fetched = tasks.get_task(created.id)

    assert http.calls[0].json == {"title": "X", "description": "", "state": "pending", "user_id": "u1"}
    assert fetched.title == "X"
    assert fetched.state == PENDING
    assert fetched.to_record()["estado"] == "pendiente"
    assert fetched.to_record()["titulo"] == "X"


def test_create_without_user_omits_user_id(login_as, tasks, http):
    login_as("Administrador")
    http.reply("POST", "/tasks", 201, task_body("t1"))

    tasks.create_task(title="Sin dueño", description="d", state=IN_PROGRESS)

    assert http.calls[0].json == {"title": "Sin dueño", "description": "d", "state": "in-progress"}


def test_unknown_state_is_rejected_before_sending(login_as, tasks, http):
    login_as("Administrador")

    with pytest.raises(ValueError):
        tasks.create_task(title="x", state="archivada")
    with pytest.raises(ValueError):
        tasks.update_task_state("t1", "en-progreso")
    assert http.calls == []


def test_legacy_payload_is_normalized(login_as, tasks, http):
    login_as("Empleado")
    http.reply(
        "GET",
        "/tasks",
        200,
        [
            {
                "id": 5,
                "titulo": "Inventario",
                "descripcion": "Contar cajas",
                "estado": "en-progreso",
                "usuariosAsignados": ["Ana López"],
                "fechaCreacion": "2024-04-01",
            }
        ],
    )

    [task] = tasks.list_tasks()

    assert task.id == "5"
    assert task.title == "Inventario"
    assert task.description == "Contar cajas"
    assert task.state == IN_PROGRESS
    assert task.status_label == "En Progreso"
    assert task.created_at == "2024-04-01"
    assert [u.full_name for u in task.assigned_users] == ["Ana López"]


def test_update_sends_only_given_fields(login_as, tasks, http):
    login_as("Empleado")
    http.reply("PUT", "/tasks/t1", 200, task_body("t1", title="Nuevo", state="completed"))

    updated = tasks.update_task("t1", title="Nuevo")
    tasks.update_task_state("t1", COMPLETED)

    assert [c.json for c in http.calls] == [{"title": "Nuevo"}, {"state": "completed"}]
    assert updated.state == COMPLETED


def test_update_with_nothing_to_change_is_an_error(login_as, tasks, http):
    login_as("Empleado")
    with pytest.raises(ValueError):
        tasks.update_task("t1")
    assert http.calls == []


def test_assign_and_unassign_paths(login_as, tasks, http):
    login_as("Administrador")
    http.reply("POST", "/tasks/t1/assign", 200, {"ok": True})
    http.reply("DELETE", "/tasks/t1/assign/u2", 200, {"ok": True})

    tasks.assign_user("t1", "u2")
    tasks.unassign_user("t1", "u2")

    assert [(c.method, c.path, c.json) for c in http.calls] == [
        ("POST", "/tasks/t1/assign", {"user_id": "u2"}),
        ("DELETE", "/tasks/t1/assign/u2", None),
    ]


def test_list_tasks_for_user_keeps_only_assigned(login_as, tasks, http):
    login_as("Empleado")
    http.reply(
        "GET",
        "/tasks",
        200,
        [
            task_body("t1", users=[ANA]),
            task_body("t2", users=[LUIS]),
            task_body("t3", users=[LUIS, ANA, ANA]),
        ],
    )

    mine = tasks.list_tasks_for_user("u1")

    assert [t.id for t in mine] == ["t1", "t3"]
    assert mine[1].assigned_user_ids == ("u2", "u1")


def test_non_list_payload_reads_as_empty(login_as, tasks, http):
    login_as("Empleado")
    http.reply("GET", "/tasks", 200, {"detail": "nope"})

    assert tasks.list_tasks() == []
