from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from werkzeug.security import generate_password_hash

from tutoring_center.attendance.model import AttendanceRecord
from tutoring_center.attendance.service import AttendanceService
from tutoring_center.coins.model import CoinAward
from tutoring_center.coins.service import CoinService
from tutoring_center.core.enums import EnrollmentStatus, GroupStatus, PaymentStatus, Role
from tutoring_center.dashboard.service import DashboardService
from tutoring_center.enrollments.model import Enrollment
from tutoring_center.groups.access import GroupAccess
from tutoring_center.groups.model import Group
from tutoring_center.groups.service import GroupService
from tutoring_center.payments.model import Payment
from tutoring_center.payments.service import PaymentService
from tutoring_center.users.model import User
from tutoring_center.users.service import AuthService, UserService

FIXED_NOW = datetime(2024, 3, 4, 10, 30)


class InMemoryUsers:
    def __init__(self):
        self.items: Dict[int, User] = {}
        self._id = 0

    def add(self, full_name: str, role: Role, *, email: Optional[str] = None, password: str = "secret1") -> User:
        user_id = self.create_user(
            email=email or f"{full_name.lower().replace(' ', '.')}@example.com",
            password_hash=generate_password_hash(password),
            full_name=full_name,
            phone=None,
            role=role,
        )
        return self.items[user_id]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.items.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self.items.values():
            if u.email.lower() == email.lower():
                return u
        return None

    def list_all(self):
        return sorted(self.items.values(), key=lambda u: u.user_id)

    def list_by_role(self, role: Role):
        return sorted((u for u in self.items.values() if u.role == role), key=lambda u: u.full_name)

    def list_recent(self, limit: int):
        return sorted(self.items.values(), key=lambda u: u.user_id, reverse=True)[:limit]

    def count_by_role(self, role: Optional[Role] = None) -> int:
        return sum(1 for u in self.items.values() if role is None or u.role == role)

    def create_user(self, *, email, password_hash, full_name, phone, role) -> int:
        self._id += 1
        self.items[self._id] = User(
            user_id=self._id,
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            phone=phone,
            role=role,
            created_at=FIXED_NOW,
        )
        return self._id

    def update(self, user: User) -> bool:
        if user.user_id not in self.items:
            return False
        self.items[user.user_id] = user
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.items.pop(int(user_id), None) is not None


class InMemoryGroups:
    def __init__(self):
        self.items: Dict[int, Group] = {}
        self._id = 0

    def get_by_id(self, group_id: int) -> Optional[Group]:
        return self.items.get(int(group_id))

    def list_all(self):
        return sorted(self.items.values(), key=lambda g: g.group_id)

    def list_by_teacher(self, teacher_id: int):
        return [g for g in self.list_all() if g.teacher_id == int(teacher_id)]

    def count_by_status(self, status: Optional[GroupStatus] = None) -> int:
        return sum(1 for g in self.items.values() if status is None or g.status == status)

    def create_group(self, *, name, description, teacher_id, schedule, status) -> int:
        self._id += 1
        self.items[self._id] = Group(
            group_id=self._id,
            name=name,
            description=description,
            teacher_id=teacher_id,
            schedule=schedule,
            status=status,
            created_at=FIXED_NOW,
        )
        return self._id

    def update(self, group: Group) -> bool:
        if group.group_id not in self.items:
            return False
        self.items[group.group_id] = group
        return True

    def delete_by_id(self, group_id: int) -> bool:
        return self.items.pop(int(group_id), None) is not None


class InMemoryEnrollments:
    def __init__(self):
        self.items: Dict[int, Enrollment] = {}
        self._id = 0

    def get(self, group_id: int, student_id: int) -> Optional[Enrollment]:
        for e in self.items.values():
            if e.group_id == int(group_id) and e.student_id == int(student_id):
                return e
        return None

    def list_by_student(self, student_id: int, status: Optional[EnrollmentStatus] = None):
        return [
            e for e in self.items.values()
            if e.student_id == int(student_id) and (status is None or e.status == status)
        ]

    def list_by_group(self, group_id: int, status: Optional[EnrollmentStatus] = None):
        return [
            e for e in self.items.values()
            if e.group_id == int(group_id) and (status is None or e.status == status)
        ]

    def count_by_group(self, group_id: int, status: Optional[EnrollmentStatus] = None) -> int:
        return len(self.list_by_group(group_id, status))

    def create(self, *, group_id, student_id, enrolled_at) -> int:
        self._id += 1
        self.items[self._id] = Enrollment(
            enrollment_id=self._id,
            group_id=group_id,
            student_id=student_id,
            status=EnrollmentStatus.ACTIVE,
            enrolled_at=enrolled_at,
        )
        return self._id

    def set_status(self, *, enrollment_id, status, enrolled_at=None, completed_at=None) -> bool:
        current = self.items.get(int(enrollment_id))
        if current is None:
            return False
        changes = {"status": status, "completed_at": completed_at}
        if enrolled_at is not None:
            changes["enrolled_at"] = enrolled_at
        self.items[current.enrollment_id] = replace(current, **changes)
        return True

    def delete_by_student(self, student_id: int) -> int:
        return _delete_where(self.items, lambda e: e.student_id == int(student_id))

    def delete_by_group(self, group_id: int) -> int:
        return _delete_where(self.items, lambda e: e.group_id == int(group_id))


class InMemoryAttendance:
    def __init__(self):
        self.items: Dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.items.get(int(attendance_id))

    def get_for_lesson(self, *, student_id: int, group_id: int, lesson_date: date) -> Optional[AttendanceRecord]:
        for r in self.items.values():
            if (r.student_id, r.group_id, r.lesson_date) == (student_id, group_id, lesson_date):
                return r
        return None

    def list_by_group(self, group_id: int):
        return [r for r in self.items.values() if r.group_id == int(group_id)]

    def list_by_student(self, student_id: int, group_id: Optional[int] = None):
        return [
            r for r in self.items.values()
            if r.student_id == int(student_id) and (group_id is None or r.group_id == int(group_id))
        ]

    def create(self, *, student_id, group_id, marked_by_id, lesson_date, status, notes=None) -> int:
        self._id += 1
        self.items[self._id] = AttendanceRecord(
            attendance_id=self._id,
            student_id=student_id,
            group_id=group_id,
            marked_by_id=marked_by_id,
            lesson_date=lesson_date,
            status=status,
            notes=notes,
            created_at=FIXED_NOW,
        )
        return self._id

    def update(self, record: AttendanceRecord) -> bool:
        if record.attendance_id not in self.items:
            return False
        self.items[record.attendance_id] = record
        return True

    def delete_by_id(self, attendance_id: int) -> bool:
        return self.items.pop(int(attendance_id), None) is not None

    def delete_by_student(self, student_id: int) -> int:
        return _delete_where(self.items, lambda r: r.student_id == int(student_id))

    def delete_by_marked_by(self, user_id: int) -> int:
        return _delete_where(self.items, lambda r: r.marked_by_id == int(user_id))

    def delete_by_group(self, group_id: int) -> int:
        return _delete_where(self.items, lambda r: r.group_id == int(group_id))


class InMemoryPayments:
    def __init__(self):
        self.items: Dict[int, Payment] = {}
        self._id = 0

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        return self.items.get(int(payment_id))

    def list_by_student(self, student_id: int, group_id: Optional[int] = None):
        return [
            p for p in self.items.values()
            if p.student_id == int(student_id) and (group_id is None or p.group_id == int(group_id))
        ]

    def list_by_teacher(self, teacher_id: int):
        return [p for p in self.items.values() if p.teacher_id == int(teacher_id)]

    def list_by_group(self, group_id: int):
        return [p for p in self.items.values() if p.group_id == int(group_id)]

    def totals(self, *, teacher_id=None, student_id=None, status=PaymentStatus.CONFIRMED):
        matching = [
            p for p in self.items.values()
            if p.status == status
            and (teacher_id is None or p.teacher_id == int(teacher_id))
            and (student_id is None or p.student_id == int(student_id))
        ]
        return len(matching), sum((p.amount for p in matching), Decimal("0.00"))

    def create(self, *, student_id, teacher_id, group_id, amount, payment_date, method, status, notes=None) -> int:
        self._id += 1
        self.items[self._id] = Payment(
            payment_id=self._id,
            student_id=student_id,
            teacher_id=teacher_id,
            group_id=group_id,
            amount=amount,
            payment_date=payment_date,
            method=method,
            status=status,
            notes=notes,
            created_at=FIXED_NOW,
        )
        return self._id

    def update(self, payment: Payment) -> bool:
        if payment.payment_id not in self.items:
            return False
        self.items[payment.payment_id] = payment
        return True

    def delete_by_id(self, payment_id: int) -> bool:
        return self.items.pop(int(payment_id), None) is not None

    def delete_by_student(self, student_id: int) -> int:
        return _delete_where(self.items, lambda p: p.student_id == int(student_id))

    def delete_by_teacher(self, teacher_id: int) -> int:
        return _delete_where(self.items, lambda p: p.teacher_id == int(teacher_id))

    def delete_by_group(self, group_id: int) -> int:
        return _delete_where(self.items, lambda p: p.group_id == int(group_id))


class InMemoryCoins:
    def __init__(self):
        self.items: Dict[int, CoinAward] = {}
        self._id = 0

    def get_by_id(self, coin_id: int) -> Optional[CoinAward]:
        return self.items.get(int(coin_id))

    def list_by_student(self, student_id: int, group_id: Optional[int] = None):
        items = [
            c for c in self.items.values()
            if c.student_id == int(student_id) and (group_id is None or c.group_id == int(group_id))
        ]
        return sorted(items, key=lambda c: c.coin_id, reverse=True)

    def list_by_group(self, group_id: int):
        return sorted((c for c in self.items.values() if c.group_id == int(group_id)), key=lambda c: -c.coin_id)

    def totals_by_student(self, group_id: int) -> Dict[int, int]:
        out: Dict[int, int] = {}
        for c in self.list_by_group(group_id):
            out[c.student_id] = out.get(c.student_id, 0) + c.amount
        return out

    def total_for_student(self, student_id: int) -> int:
        return sum(c.amount for c in self.list_by_student(student_id))

    def count_by_teacher(self, teacher_id: int) -> int:
        return sum(1 for c in self.items.values() if c.teacher_id == int(teacher_id))

    def create(self, *, student_id, teacher_id, group_id, amount, reason) -> int:
        self._id += 1
        self.items[self._id] = CoinAward(
            coin_id=self._id,
            student_id=student_id,
            teacher_id=teacher_id,
            group_id=group_id,
            amount=amount,
            reason=reason,
            awarded_at=FIXED_NOW,
        )
        return self._id

    def delete_by_student(self, student_id: int) -> int:
        return _delete_where(self.items, lambda c: c.student_id == int(student_id))

    def delete_by_teacher(self, teacher_id: int) -> int:
        return _delete_where(self.items, lambda c: c.teacher_id == int(teacher_id))

    def delete_by_group(self, group_id: int) -> int:
        return _delete_where(self.items, lambda c: c.group_id == int(group_id))


def _delete_where(items: dict, predicate) -> int:
    doomed = [key for key, value in items.items() if predicate(value)]
    for key in doomed:
        del items[key]
    return len(doomed)


@dataclass
class World:
    """Fake repositories plus services wired the same way build_container() does."""

    users: InMemoryUsers
    groups: InMemoryGroups
    enrollments: InMemoryEnrollments
    attendance: InMemoryAttendance
    payments: InMemoryPayments
    coins: InMemoryCoins

    auth_service: AuthService
    user_service: UserService
    group_service: GroupService
    attendance_service: AttendanceService
    payment_service: PaymentService
    coin_service: CoinService
    dashboard_service: DashboardService


def build_world(*, today: date = FIXED_NOW.date()) -> World:
    users = InMemoryUsers()
    groups = InMemoryGroups()
    enrollments = InMemoryEnrollments()
    attendance = InMemoryAttendance()
    payments = InMemoryPayments()
    coins = InMemoryCoins()
    access = GroupAccess(users, groups, enrollments)

    group_service = GroupService(
        groups, enrollments, users, attendance, payments, coins, access=access, clock=lambda: FIXED_NOW
    )
    user_service = UserService(users, groups, enrollments, attendance, payments, coins, group_service, access=access)
    attendance_service = AttendanceService(attendance, users, groups, access, today=lambda: today)
    payment_service = PaymentService(payments, users, groups, access, clock=lambda: FIXED_NOW)
    coin_service = CoinService(coins, users, groups, enrollments, access)
    dashboard_service = DashboardService(
        users, groups, coins, group_service, attendance_service, payment_service, coin_service
    )
    return World(
        users=users,
        groups=groups,
        enrollments=enrollments,
        attendance=attendance,
        payments=payments,
        coins=coins,
        auth_service=AuthService(users),
        user_service=user_service,
        group_service=group_service,
        attendance_service=attendance_service,
        payment_service=payment_service,
        coin_service=coin_service,
        dashboard_service=dashboard_service,
    )
