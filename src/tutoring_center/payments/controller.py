from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import optional_datetime
from ..common.validators import parse_enum, require_positive_int
from ..common.web import current_user_id, json_body, roles_required
from ..container import Container
from ..core.enums import PaymentMethod, Role
from .model import CreatePaymentRequest, UpdatePaymentRequest


def register(app: Flask, container: Container) -> None:
    # --- teacher ---
    @app.post("/api/teacher/payments", endpoint="teacher_record_payment")
    @roles_required(Role.TEACHER)
    def record_payment():
        data = json_body()
        request_ = CreatePaymentRequest(
            student_id=require_positive_int(data.get("student_id"), "student_id"),
            group_id=require_positive_int(data.get("group_id"), "group_id"),
            amount=data.get("amount"),
            method=parse_enum(PaymentMethod, data["method"], "Method") if data.get("method") else PaymentMethod.CASH,
            payment_date=optional_datetime(data.get("payment_date")),
            notes=data.get("notes"),
        )
        payment = container.payment_service.create_payment(request_, current_user_id=current_user_id())
        return jsonify(payment), 201

    @app.put("/api/teacher/payments/<int:payment_id>", endpoint="teacher_update_payment")
    @roles_required(Role.TEACHER)
    def update_payment(payment_id: int):
        data = json_body()
        request_ = UpdatePaymentRequest(
            amount=data.get("amount"),
            payment_date=optional_datetime(data.get("payment_date")),
            method=parse_enum(PaymentMethod, data["method"], "Method") if data.get("method") else None,
            notes=data.get("notes"),
        )
        payment = container.payment_service.update_payment(payment_id, request_, current_user_id=current_user_id())
        return jsonify(payment)

    @app.get("/api/teacher/payments", endpoint="teacher_payments")
    @roles_required(Role.TEACHER)
    def my_recorded_payments():
        return jsonify(container.payment_service.list_by_teacher(current_user_id()))

    @app.get("/api/teacher/payments/student/<int:student_id>", endpoint="teacher_student_payments")
    @roles_required(Role.TEACHER)
    def student_payments(student_id: int):
        container.group_service.get_student_for_teacher(student_id, teacher_id=current_user_id())
        group_id = request.args.get("group_id", type=int)
        return jsonify(container.payment_service.list_by_student(student_id, group_id))

    @app.get("/api/teacher/payments/group/<int:group_id>", endpoint="teacher_group_payments")
    @roles_required(Role.TEACHER)
    def group_payments(group_id: int):
        container.group_service.get_managed_group(group_id, current_user_id=current_user_id())
        return jsonify(container.payment_service.list_by_group(group_id))

    @app.get("/api/teacher/payments/stats", endpoint="teacher_payment_stats")
    @roles_required(Role.TEACHER)
    def teacher_stats():
        return jsonify(container.payment_service.stats(teacher_id=current_user_id()))

    # --- student ---
    @app.get("/api/student/payments", endpoint="student_payments")
    @roles_required(Role.STUDENT)
    def my_payments():
        return jsonify(container.payment_service.list_by_student(current_user_id()))

    @app.get("/api/student/payments/group/<int:group_id>", endpoint="student_group_payments")
    @roles_required(Role.STUDENT)
    def my_group_payments(group_id: int):
        return jsonify(container.payment_service.list_by_student(current_user_id(), group_id))

    # --- admin ---
    @app.get("/api/admin/payments/stats", endpoint="admin_payment_stats")
    @roles_required(Role.ADMIN)
    def admin_stats():
        teacher_id = request.args.get("teacher_id", type=int)
        return jsonify(container.payment_service.stats(teacher_id=teacher_id))

    @app.delete("/api/admin/payments/<int:payment_id>", endpoint="admin_delete_payment")
    @roles_required(Role.ADMIN)
    def delete_payment(payment_id: int):
        container.payment_service.delete_payment(payment_id, current_user_id=current_user_id())
        return "", 204
