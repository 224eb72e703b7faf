from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.validators import parse_enum
from ..common.web import current_user_id, json_body, login_required, roles_required
from ..container import Container
from ..core.enums import Role
from .model import CreateUserRequest, UpdateUserRequest


def _create_request(data: dict, *, role: Role | None = None) -> CreateUserRequest:
    if role is None:
        role = parse_enum(Role, data["role"], "Role") if data.get("role") else Role.STUDENT
    return CreateUserRequest(
        email=data.get("email", ""),
        password=data.get("password", ""),
        full_name=data.get("full_name", ""),
        phone=data.get("phone"),
        role=role,
    )


def update_request_from(data: dict) -> UpdateUserRequest:
    return UpdateUserRequest(
        full_name=data.get("full_name"),
        phone=data.get("phone"),
        email=data.get("email"),
        password=data.get("password"),
        role=parse_enum(Role, data["role"], "Role") if data.get("role") else None,
    )


def register(app: Flask, container: Container) -> None:
    @app.post("/api/auth/login", endpoint="auth_login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        return jsonify(s_user)

    @app.post("/api/auth/logout", endpoint="auth_logout")
    def logout():
        session.clear()
        return "", 204

    @app.get("/api/auth/me", endpoint="auth_me")
    @login_required
    def me():
        return jsonify(container.user_service.get_user(current_user_id()))

    @app.get("/api/users", endpoint="users_list")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def list_users():
        return jsonify(container.user_service.list_users())

    @app.post("/api/users", endpoint="users_create")
    @roles_required(Role.ADMIN)
    def create_user():
        user = container.user_service.create_user(_create_request(json_body()), current_user_id=current_user_id())
        return jsonify(user), 201

    @app.post("/api/users/students", endpoint="users_create_student")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def create_student():
        request_ = _create_request(json_body(), role=Role.STUDENT)
        user = container.user_service.create_user(request_, current_user_id=current_user_id())
        return jsonify(user), 201

    @app.get("/api/users/students", endpoint="users_students")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def list_students():
        return jsonify(container.user_service.list_by_role(Role.STUDENT))

    @app.get("/api/users/teachers", endpoint="users_teachers")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def list_teachers():
        return jsonify(container.user_service.list_by_role(Role.TEACHER))

    @app.get("/api/users/<int:user_id>", endpoint="users_get")
    @login_required
    def get_user(user_id: int):
        if session.get("role") == Role.STUDENT.value and user_id != current_user_id():
            return jsonify({"error": "Access denied"}), 403
        return jsonify(container.user_service.get_user(user_id))

    @app.put("/api/users/<int:user_id>", endpoint="users_update")
    @login_required
    def update_user(user_id: int):
        user = container.user_service.update_user(
            user_id, update_request_from(json_body()), current_user_id=current_user_id()
        )
        return jsonify(user)

    @app.delete("/api/users/<int:user_id>", endpoint="users_delete")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def delete_user(user_id: int):
        container.user_service.delete_user(user_id, current_user_id=current_user_id())
        return "", 204

    @app.get("/api/teacher/students", endpoint="teacher_students")
    @roles_required(Role.TEACHER)
    def teacher_students():
        return jsonify(container.group_service.list_teacher_students(current_user_id()))

    @app.get("/api/teacher/students/<int:student_id>", endpoint="teacher_student")
    @roles_required(Role.TEACHER)
    def teacher_student(student_id: int):
        return jsonify(container.group_service.get_student_for_teacher(student_id, teacher_id=current_user_id()))

    @app.put("/api/teacher/students/<int:student_id>", endpoint="teacher_student_update")
    @roles_required(Role.TEACHER)
    def teacher_student_update(student_id: int):
        user = container.user_service.update_user(
            student_id, update_request_from(json_body()), current_user_id=current_user_id()
        )
        return jsonify(user)

    @app.get("/api/admin/students/orphaned", endpoint="admin_orphaned_students")
    @roles_required(Role.ADMIN)
    def orphaned_students():
        return jsonify(container.user_service.list_orphaned_students())
