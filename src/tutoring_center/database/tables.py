"""ORM rows (Flask-SQLAlchemy).

Repositories map these rows to the frozen domain dataclasses of each feature,
so services never touch a session-bound object.
"""
from datetime import datetime

from ..core.enums import (
    AttendanceStatus,
    EnrollmentStatus,
    GroupStatus,
    PaymentMethod,
    PaymentStatus,
    Role,
)
from ..extensions import db


class UserRow(db.Model):
    __tablename__ = "users"

    user_id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(150), nullable=False)
    phone = db.Column(db.String(30))
    role = db.Column(db.String(20), nullable=False, default=Role.STUDENT.value)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class GroupRow(db.Model):
    # "groups" is a reserved word in MySQL 8
    __tablename__ = "study_groups"

    group_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    teacher_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    schedule = db.Column(db.String(255))
    status = db.Column(db.String(20), nullable=False, default=GroupStatus.ACTIVE.value)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    teacher = db.relationship("UserRow", lazy="joined")


class EnrollmentRow(db.Model):
    __tablename__ = "group_students"
    __table_args__ = (db.UniqueConstraint("group_id", "student_id", name="uq_group_student"),)

    enrollment_id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey("study_groups.group_id"), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=EnrollmentStatus.ACTIVE.value)
    enrolled_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    completed_at = db.Column(db.DateTime)

    student = db.relationship("UserRow", lazy="joined")
    group = db.relationship("GroupRow", lazy="joined")


class AttendanceRow(db.Model):
    __tablename__ = "attendance"
    __table_args__ = (
        db.UniqueConstraint("student_id", "group_id", "lesson_date", name="uq_attendance_lesson"),
    )

    attendance_id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey("study_groups.group_id"), nullable=False, index=True)
    marked_by_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False)
    lesson_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=AttendanceStatus.PRESENT.value)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class PaymentRow(db.Model):
    __tablename__ = "payments"

    payment_id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey("study_groups.group_id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    payment_date = db.Column(db.DateTime, nullable=False, default=datetime.now)
    method = db.Column(db.String(20), nullable=False, default=PaymentMethod.CASH.value)
    status = db.Column(db.String(20), nullable=False, default=PaymentStatus.CONFIRMED.value)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)


class CoinRow(db.Model):
    __tablename__ = "coins"

    coin_id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey("users.user_id"), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey("study_groups.group_id"), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.String(255), nullable=False)
    awarded_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
