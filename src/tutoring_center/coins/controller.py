from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_positive_int
from ..common.web import current_user_id, json_body, roles_required
from ..container import Container
from ..core.enums import Role
from .model import AwardCoinsRequest


def register(app: Flask, container: Container) -> None:
    # --- teacher ---
    @app.post("/api/teacher/coins", endpoint="teacher_award_coins")
    @roles_required(Role.TEACHER)
    def award_coins():
        data = json_body()
        request_ = AwardCoinsRequest(
            student_id=require_positive_int(data.get("student_id"), "student_id"),
            group_id=require_positive_int(data.get("group_id"), "group_id"),
            amount=data.get("amount"),
            reason=data.get("reason", ""),
        )
        coin = container.coin_service.award_coins(request_, current_user_id=current_user_id())
        return jsonify(coin), 201

    @app.get("/api/teacher/coins/student/<int:student_id>", endpoint="teacher_student_coins")
    @roles_required(Role.TEACHER)
    def student_coins(student_id: int):
        container.group_service.get_student_for_teacher(student_id, teacher_id=current_user_id())
        group_id = request.args.get("group_id", type=int)
        return jsonify(container.coin_service.list_by_student(student_id, group_id))

    @app.get("/api/teacher/coins/group/<int:group_id>", endpoint="teacher_group_coins")
    @roles_required(Role.TEACHER)
    def group_coins(group_id: int):
        container.group_service.get_managed_group(group_id, current_user_id=current_user_id())
        return jsonify(container.coin_service.list_by_group(group_id))

    @app.get("/api/teacher/coins/leaderboard/<int:group_id>", endpoint="teacher_leaderboard")
    @roles_required(Role.TEACHER)
    def teacher_leaderboard(group_id: int):
        container.group_service.get_managed_group(group_id, current_user_id=current_user_id())
        return jsonify(container.coin_service.leaderboard(group_id))

    # --- student ---
    @app.get("/api/student/coins", endpoint="student_coins")
    @roles_required(Role.STUDENT)
    def my_coins():
        return jsonify(container.coin_service.list_by_student(current_user_id()))

    @app.get("/api/student/coins/group/<int:group_id>", endpoint="student_group_coins")
    @roles_required(Role.STUDENT)
    def my_group_coins(group_id: int):
        return jsonify(container.coin_service.list_by_student(current_user_id(), group_id))

    @app.get("/api/student/coins/leaderboard/<int:group_id>", endpoint="student_leaderboard")
    @roles_required(Role.STUDENT)
    def student_leaderboard(group_id: int):
        return jsonify(container.coin_service.leaderboard_for_student(current_user_id(), group_id))

    @app.get("/api/student/coins/grouped", endpoint="student_coins_grouped")
    @roles_required(Role.STUDENT)
    def my_coins_grouped():
        return jsonify(container.coin_service.grouped_for_student(current_user_id()))

    @app.get("/api/student/coins/summary", endpoint="student_coins_summary")
    @roles_required(Role.STUDENT)
    def my_coins_summary():
        return jsonify(container.coin_service.summary(current_user_id()))

    @app.get("/api/student/coins/total", endpoint="student_coins_total")
    @roles_required(Role.STUDENT)
    def my_coins_total():
        student_id = current_user_id()
        return jsonify({"student_id": student_id, "total_coins": container.coin_service.total_for_student(student_id)})
