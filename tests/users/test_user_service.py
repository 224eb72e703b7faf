from __future__ import annotations

from decimal import Decimal

import pytest

from tutoring_center.attendance.model import MarkAttendanceRequest
from tutoring_center.coins.model import AwardCoinsRequest
from tutoring_center.core.enums import AttendanceStatus, Role
from tutoring_center.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ResourceNotFoundError,
    ValidationError,
)
from tutoring_center.payments.model import CreatePaymentRequest
from tutoring_center.users.model import CreateUserRequest, UpdateUserRequest


def test_authenticate_returns_session_data(world):
    world.users.add("Ann Student", Role.STUDENT, email="ann@example.com", password="secret1")

    result = world.auth_service.authenticate(" ann@example.com ", "secret1")

    assert result.email == "ann@example.com"
    assert result.role == Role.STUDENT


@pytest.mark.parametrize("email,password", [("ann@example.com", "wrong"), ("nobody@example.com", "secret1")])
def test_authenticate_rejects_bad_credentials(world, email, password):
    world.users.add("Ann Student", Role.STUDENT, email="ann@example.com", password="secret1")

    with pytest.raises(AuthenticationError):
        world.auth_service.authenticate(email, password)


def test_authenticate_tolerates_unparseable_hash(world):
    user_id = world.users.create_user(
        email="x@example.com", password_hash="CHANGE_ME", full_name="X", phone=None, role=Role.STUDENT
    )
    assert user_id

    with pytest.raises(AuthenticationError):
        world.auth_service.authenticate("x@example.com", "anything")


def test_create_user_normalizes_email_and_hides_hash(world, people):
    dto = world.user_service.create_user(
        CreateUserRequest(email="New.Kid@Example.com", password="secret1", full_name="  New Kid "),
        current_user_id=people.admin.user_id,
    )

    assert dto.email == "new.kid@example.com"
    assert dto.full_name == "New Kid"
    assert dto.role == Role.STUDENT
    assert not hasattr(dto, "password_hash")


def test_create_user_rejects_duplicate_email(world, people):
    with pytest.raises(ValidationError):
        world.user_service.create_user(
            CreateUserRequest(email=people.ann.email.upper(), password="secret1", full_name="Ann Again"),
            current_user_id=people.admin.user_id,
        )


def test_create_user_rejects_short_password(world, people):
    with pytest.raises(ValidationError):
        world.user_service.create_user(
            CreateUserRequest(email="kid@example.com", password="123", full_name="Kid"),
            current_user_id=people.admin.user_id,
        )


def test_teacher_can_only_create_students(world, people):
    with pytest.raises(AuthorizationError):
        world.user_service.create_user(
            CreateUserRequest(email="boss@example.com", password="secret1", full_name="Boss", role=Role.ADMIN),
            current_user_id=people.tom.user_id,
        )


def test_self_update_changes_only_profile_basics(world, people):
    dto = world.user_service.update_user(
        people.ann.user_id,
        UpdateUserRequest(full_name="Ann B.", phone="555", email="other@example.com", role=Role.ADMIN),
        current_user_id=people.ann.user_id,
    )

    assert dto.full_name == "Ann B."
    assert dto.phone == "555"
    assert dto.email == people.ann.email
    assert dto.role == Role.STUDENT


def test_admin_can_change_role_and_password(world, people):
    dto = world.user_service.update_user(
        people.cid.user_id,
        UpdateUserRequest(role=Role.TEACHER, password="newpass1"),
        current_user_id=people.admin.user_id,
    )

    assert dto.role == Role.TEACHER
    world.auth_service.authenticate(people.cid.email, "newpass1")


def test_teacher_updates_own_student(world, people):
    dto = world.user_service.update_user(
        people.ann.user_id,
        UpdateUserRequest(email="ann.new@example.com"),
        current_user_id=people.tom.user_id,
    )

    assert dto.email == "ann.new@example.com"


def test_teacher_cannot_change_role_of_own_student(world, people):
    with pytest.raises(AuthorizationError, match="Only admins"):
        world.user_service.update_user(
            people.ann.user_id,
            UpdateUserRequest(role=Role.TEACHER),
            current_user_id=people.tom.user_id,
        )


@pytest.mark.parametrize("target", ["cid", "tina"])
def test_teacher_cannot_update_strangers(world, people, target):
    with pytest.raises(AuthorizationError):
        world.user_service.update_user(
            getattr(people, target).user_id,
            UpdateUserRequest(full_name="Hacked"),
            current_user_id=people.tom.user_id,
        )


def test_student_of_teacher_includes_dropped_enrollments(world, people):
    world.group_service.remove_student(people.group_id, people.bob.user_id, current_user_id=people.tom.user_id)

    dto = world.user_service.update_user(
        people.bob.user_id, UpdateUserRequest(phone="123"), current_user_id=people.tom.user_id
    )

    assert dto.phone == "123"


def test_update_unknown_user_is_not_found(world, people):
    with pytest.raises(ResourceNotFoundError, match="User not found with id: 999"):
        world.user_service.update_user(999, UpdateUserRequest(full_name="X"), current_user_id=people.admin.user_id)


def test_cannot_delete_yourself(world, people):
    with pytest.raises(ValidationError):
        world.user_service.delete_user(people.admin.user_id, current_user_id=people.admin.user_id)


def test_teacher_cannot_delete_foreign_student(world, people):
    with pytest.raises(AuthorizationError):
        world.user_service.delete_user(people.cid.user_id, current_user_id=people.tom.user_id)


def test_student_cannot_delete_anyone(world, people):
    with pytest.raises(AuthorizationError):
        world.user_service.delete_user(people.bob.user_id, current_user_id=people.ann.user_id)


def test_deleting_student_removes_their_rows(world, people):
    world.payment_service.create_payment(
        CreatePaymentRequest(student_id=people.ann.user_id, group_id=people.group_id, amount=Decimal("50")),
        current_user_id=people.tom.user_id,
    )
    world.coin_service.award_coins(
        AwardCoinsRequest(student_id=people.ann.user_id, group_id=people.group_id, amount=5, reason="Homework"),
        current_user_id=people.tom.user_id,
    )

    world.user_service.delete_user(people.ann.user_id, current_user_id=people.tom.user_id)

    assert world.users.get_by_id(people.ann.user_id) is None
    assert not world.payments.items
    assert not world.coins.items
    assert world.enrollments.get(people.group_id, people.ann.user_id) is None
    assert world.enrollments.get(people.group_id, people.bob.user_id) is not None


def test_deleting_teacher_cascades_to_their_groups(world, people):
    world.coin_service.award_coins(
        AwardCoinsRequest(student_id=people.bob.user_id, group_id=people.group_id, amount=3, reason="Quiz"),
        current_user_id=people.tom.user_id,
    )

    world.user_service.delete_user(people.tom.user_id, current_user_id=people.admin.user_id)

    assert world.groups.get_by_id(people.group_id) is None
    assert not world.enrollments.items
    assert not world.coins.items
    # students themselves survive
    assert world.users.get_by_id(people.bob.user_id) is not None


def test_deleting_admin_removes_rows_they_recorded(world, people):
    other_admin = world.users.add("Ava Admin", Role.ADMIN)
    world.attendance_service.mark_attendance(
        MarkAttendanceRequest(
            student_id=people.ann.user_id, group_id=people.group_id, status=AttendanceStatus.PRESENT
        ),
        current_user_id=people.admin.user_id,
    )
    world.coin_service.award_coins(
        AwardCoinsRequest(student_id=people.bob.user_id, group_id=people.group_id, amount=2, reason="Board work"),
        current_user_id=people.admin.user_id,
    )

    world.user_service.delete_user(people.admin.user_id, current_user_id=other_admin.user_id)

    assert world.users.get_by_id(people.admin.user_id) is None
    assert not world.attendance.items
    assert not world.coins.items
    assert world.groups.get_by_id(people.group_id) is not None


def test_deleting_demoted_teacher_purges_groups_they_still_own(world, people):
    world.user_service.update_user(
        people.tom.user_id, UpdateUserRequest(role=Role.STUDENT), current_user_id=people.admin.user_id
    )

    world.user_service.delete_user(people.tom.user_id, current_user_id=people.admin.user_id)

    assert world.groups.get_by_id(people.group_id) is None
    assert not world.enrollments.items


def test_orphaned_students_have_no_active_group(world, people):
    world.group_service.remove_student(people.group_id, people.bob.user_id, current_user_id=people.tom.user_id)

    orphaned = world.user_service.list_orphaned_students()

    assert [s.user_id for s in orphaned] == [people.bob.user_id, people.cid.user_id]
