from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.validators import parse_enum, require_positive_int
from ..common.web import current_user_id, json_body, login_required, roles_required
from ..container import Container
from ..core.enums import GroupStatus, Role
from .model import CreateGroupRequest, UpdateGroupRequest


def register(app: Flask, container: Container) -> None:
    @app.post("/api/groups", endpoint="groups_create")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def create_group():
        data = json_body()
        if data.get("teacher_id") is not None:
            teacher_id = require_positive_int(data["teacher_id"], "teacher_id")
        else:
            # Teachers usually omit it and create groups for themselves.
            teacher_id = current_user_id()
        request_ = CreateGroupRequest(
            name=data.get("name", ""),
            teacher_id=teacher_id,
            description=data.get("description"),
            schedule=data.get("schedule"),
        )
        group = container.group_service.create_group(request_, current_user_id=current_user_id())
        return jsonify(group), 201

    @app.put("/api/groups/<int:group_id>", endpoint="groups_update")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def update_group(group_id: int):
        data = json_body()
        request_ = UpdateGroupRequest(
            name=data.get("name"),
            description=data.get("description"),
            schedule=data.get("schedule"),
            status=parse_enum(GroupStatus, data["status"], "Status") if data.get("status") else None,
        )
        return jsonify(container.group_service.update_group(group_id, request_, current_user_id=current_user_id()))

    @app.delete("/api/groups/<int:group_id>", endpoint="groups_delete")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def delete_group(group_id: int):
        container.group_service.delete_group(group_id, current_user_id=current_user_id())
        return "", 204

    @app.post("/api/groups/<int:group_id>/enroll/<int:student_id>", endpoint="groups_enroll")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def enroll_student(group_id: int, student_id: int):
        container.group_service.enroll_student(group_id, student_id, current_user_id=current_user_id())
        return jsonify({"message": "Student enrolled successfully"}), 201

    @app.delete("/api/groups/<int:group_id>/students/<int:student_id>", endpoint="groups_remove_student")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def remove_student(group_id: int, student_id: int):
        container.group_service.remove_student(group_id, student_id, current_user_id=current_user_id())
        return "", 204

    @app.get("/api/groups", endpoint="groups_list")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def list_groups():
        return jsonify(container.group_service.list_groups())

    @app.get("/api/groups/<int:group_id>", endpoint="groups_get")
    @login_required
    def get_group(group_id: int):
        # Membership first: students get the same 403 for missing and foreign groups
        if session.get("role") == Role.STUDENT.value and not container.enrollments_repo.get(group_id, current_user_id()):
            return jsonify({"error": "You are not a member of this group"}), 403
        return jsonify(container.group_service.get_group(group_id))

    @app.get("/api/groups/<int:group_id>/students", endpoint="groups_students")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def group_students(group_id: int):
        return jsonify(container.group_service.list_group_students(group_id))

    @app.get("/api/teacher/groups", endpoint="teacher_groups")
    @roles_required(Role.TEACHER)
    def teacher_groups():
        return jsonify(container.group_service.list_groups_by_teacher(current_user_id()))

    @app.get("/api/teacher/groups/<int:group_id>", endpoint="teacher_group")
    @roles_required(Role.TEACHER)
    def teacher_group(group_id: int):
        return jsonify(container.group_service.get_managed_group(group_id, current_user_id=current_user_id()))

    @app.get("/api/teacher/groups/<int:group_id>/students", endpoint="teacher_group_students")
    @roles_required(Role.TEACHER)
    def teacher_group_students(group_id: int):
        container.group_service.get_managed_group(group_id, current_user_id=current_user_id())
        return jsonify(container.group_service.list_group_students(group_id))

    @app.get("/api/student/groups", endpoint="student_groups")
    @roles_required(Role.STUDENT)
    def student_groups():
        return jsonify(container.group_service.list_groups_by_student(current_user_id()))
