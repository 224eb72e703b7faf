from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.get("/api/admin/dashboard", endpoint="admin_dashboard")
    @roles_required(Role.ADMIN)
    def admin_dashboard():
        return jsonify(container.dashboard_service.admin_dashboard())

    @app.get("/api/teacher/dashboard", endpoint="teacher_dashboard")
    @roles_required(Role.TEACHER)
    def teacher_dashboard():
        return jsonify(container.dashboard_service.teacher_dashboard(current_user_id()))

    @app.get("/api/student/dashboard", endpoint="student_dashboard")
    @roles_required(Role.STUDENT)
    def student_dashboard():
        return jsonify(container.dashboard_service.student_dashboard(current_user_id()))
