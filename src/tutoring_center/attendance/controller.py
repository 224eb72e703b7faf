from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import optional_date
from ..common.validators import parse_enum, require_positive_int
from ..common.web import current_user_id, json_body, roles_required
from ..container import Container
from ..core.enums import AttendanceStatus, Role
from .model import MarkAttendanceRequest, UpdateAttendanceRequest


def register(app: Flask, container: Container) -> None:
    # --- teacher ---
    @app.post("/api/teacher/attendance", endpoint="teacher_mark_attendance")
    @roles_required(Role.TEACHER)
    def mark_attendance():
        data = json_body()
        request_ = MarkAttendanceRequest(
            student_id=require_positive_int(data.get("student_id"), "student_id"),
            group_id=require_positive_int(data.get("group_id"), "group_id"),
            status=parse_enum(AttendanceStatus, data.get("status"), "Status"),
            lesson_date=optional_date(data.get("lesson_date")),
            notes=data.get("notes"),
        )
        record = container.attendance_service.mark_attendance(request_, current_user_id=current_user_id())
        return jsonify(record), 201

    @app.put("/api/teacher/attendance/<int:attendance_id>", endpoint="teacher_update_attendance")
    @roles_required(Role.TEACHER)
    def update_attendance(attendance_id: int):
        data = json_body()
        request_ = UpdateAttendanceRequest(
            status=parse_enum(AttendanceStatus, data["status"], "Status") if data.get("status") else None,
            notes=data.get("notes"),
        )
        record = container.attendance_service.update_attendance(
            attendance_id, request_, current_user_id=current_user_id()
        )
        return jsonify(record)

    @app.delete("/api/teacher/attendance/<int:attendance_id>", endpoint="teacher_delete_attendance")
    @roles_required(Role.TEACHER)
    def delete_attendance(attendance_id: int):
        container.attendance_service.delete_attendance(attendance_id, current_user_id=current_user_id())
        return "", 204

    @app.get("/api/teacher/attendance/group/<int:group_id>", endpoint="teacher_group_attendance")
    @roles_required(Role.TEACHER)
    def group_attendance(group_id: int):
        container.group_service.get_managed_group(group_id, current_user_id=current_user_id())
        return jsonify(container.attendance_service.list_by_group(group_id))

    @app.get("/api/teacher/attendance/student/<int:student_id>", endpoint="teacher_student_attendance")
    @roles_required(Role.TEACHER)
    def student_attendance(student_id: int):
        container.group_service.get_student_for_teacher(student_id, teacher_id=current_user_id())
        group_id = request.args.get("group_id", type=int)
        return jsonify(container.attendance_service.list_by_student(student_id, group_id))

    # --- student ---
    @app.get("/api/student/attendance", endpoint="student_attendance")
    @roles_required(Role.STUDENT)
    def my_attendance():
        return jsonify(container.attendance_service.list_by_student(current_user_id()))

    @app.get("/api/student/attendance/group/<int:group_id>", endpoint="student_group_attendance")
    @roles_required(Role.STUDENT)
    def my_group_attendance(group_id: int):
        return jsonify(container.attendance_service.list_by_student(current_user_id(), group_id))

    @app.get("/api/student/attendance/summary", endpoint="student_attendance_summary")
    @roles_required(Role.STUDENT)
    def my_attendance_summary():
        return jsonify(container.attendance_service.summary(current_user_id()))
