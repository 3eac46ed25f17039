from __future__ import annotations

from typing import List, Optional

from taskweb import permissions
from taskweb.errors import TaskWebError
from taskweb.models import AdminUser, filter_users
from taskweb.services.admin import AdminService
from taskweb.session import SessionStore
from taskweb.views.common import Notice, after_reload, failure, load_failure, run_action, success
from taskweb.views.forms import UserForm


class AdminUsersView:
    """User administration. Every action here requires the admin role."""

    def __init__(self, store: SessionStore, admin: AdminService) -> None:
        self.store = store
        self.admin = admin
        self.users: List[AdminUser] = []
        self.deleted_users: List[AdminUser] = []
        self.loaded = False

    def load(self) -> Optional[Notice]:
        self.loaded = True
        try:
            self.users = self.admin.list_users()
            self.deleted_users = self.admin.list_deleted_users()
        except TaskWebError as exc:
            return load_failure(exc, "Error al cargar los datos de usuarios")
        return None

    def ensure_loaded(self) -> Optional[Notice]:
        return None if self.loaded else self.load()

    def filtered(self, term: str) -> List[AdminUser]:
        return filter_users(self.users, term)

    def find(self, user_id: str) -> Optional[AdminUser]:
        return next((u for u in self.users if u.id == user_id), None)

    def _reload_after(self, notice: Notice) -> Notice:
        return after_reload(notice, self.load())

    def _run(self, action, error_message: str) -> Notice:
        return run_action(self.store, action, error_message=error_message, role=permissions.ADMIN)

    def save_user(self, form: UserForm, user_id: Optional[str] = None) -> Notice:
        creating = user_id is None

        def action() -> Notice:
            if form.missing_fields():
                return failure("Todos los campos son obligatorios")
            if creating and not form.password:
                return failure("La contraseña es obligatoria para nuevos usuarios")
            try:
                age = int(str(form.age).strip())
            except ValueError:
                return failure("La edad debe ser un número entero")

            if creating:
                self.admin.create_user(
                    first_name=form.first_name.strip(),
                    last_name=form.last_name.strip(),
                    email=form.email.strip(),
                    password=form.password,
                    age=age,
                )
                notice = success("Usuario creado", "El usuario ha sido creado exitosamente")
            else:
                self.admin.update_user(
                    user_id,
                    first_name=form.first_name.strip(),
                    last_name=form.last_name.strip(),
                    email=form.email.strip(),
                    age=age,
                )
                notice = success("Usuario actualizado", "El usuario ha sido actualizado exitosamente")
            return self._reload_after(notice)

        return self._run(action, "Error al guardar el usuario")

    def delete_user(self, user_id: str) -> Notice:
        def action() -> Notice:
            self.admin.delete_user(user_id)
            return self._reload_after(success("Usuario eliminado", "El usuario ha sido eliminado exitosamente"))

        return self._run(action, "Error al eliminar el usuario")

    def restore_user(self, user_id: str) -> Notice:
        def action() -> Notice:
            self.admin.restore_user(user_id)
            return self._reload_after(success("Usuario restaurado", "El usuario ha sido restaurado exitosamente"))

        return self._run(action, "Error al restaurar el usuario")

    def save_role(self, user_id: str, role_name: str) -> Notice:
        """Give the user exactly one role; the new role replaces the old one."""

        def action() -> Notice:
            user = self.find(user_id)
            if user is None:
                return failure("Usuario no encontrado")
            if user.current_role == role_name:
                return success("Sin cambios", "No se detectaron cambios en el rol")
            if not role_name:
                return failure("Debe seleccionar un rol")
            if role_name not in permissions.ROLES:
                return failure(f"Rol desconocido: {role_name}")

            updated = self.admin.assign_role(user_id, role_name)
            notice = success("Rol actualizado", f'Se asignó el rol "{role_name}" a {user.full_name}')
            if updated.id:
                self.users = [updated if u.id == user_id else u for u in self.users]
                return notice
            return self._reload_after(notice)

        return self._run(action, "Error al actualizar roles")
