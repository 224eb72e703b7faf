from __future__ import annotations

from decimal import Decimal

import pytest

from tutoring_center.coins.model import AwardCoinsRequest
from tutoring_center.coins.service import rank_entries
from tutoring_center.core.exceptions import AuthorizationError, ValidationError
from tutoring_center.groups.model import CreateGroupRequest
from tutoring_center.payments.model import CreatePaymentRequest


def _award(world, people, student, amount, *, group_id=None, by=None, reason="Good work"):
    return world.coin_service.award_coins(
        AwardCoinsRequest(
            student_id=student.user_id, group_id=group_id or people.group_id, amount=amount, reason=reason
        ),
        current_user_id=(by or people.tom).user_id,
    )


def test_rank_entries_uses_competition_ranking():
    entries = rank_entries([(1, "Zed", 5), (2, "amy", 10), (3, "Bob", 5), (4, "Cat", 1)])

    assert [(e.rank, e.student_name) for e in entries] == [(1, "amy"), (2, "Bob"), (2, "Zed"), (4, "Cat")]


def test_rank_entries_all_tied_at_zero():
    entries = rank_entries([(2, "B", 0), (1, "A", 0)])

    assert [(e.rank, e.student_id) for e in entries] == [(1, 1), (1, 2)]


def test_award_coins(world, people):
    dto = _award(world, people, people.ann, 7)

    assert dto.amount == 7
    assert dto.teacher_name == "Tom Teacher"
    assert dto.group_name == "Algebra"
    assert world.coin_service.total_for_student(people.ann.user_id) == 7


@pytest.mark.parametrize("amount", [0, -3, 101, "x", 2.5, True])
def test_award_amount_must_be_whole_and_in_range(world, people, amount):
    with pytest.raises(ValidationError):
        _award(world, people, people.ann, amount)


def test_award_needs_reason(world, people):
    with pytest.raises(ValidationError):
        _award(world, people, people.ann, 5, reason="   ")


def test_foreign_teacher_cannot_award(world, people):
    with pytest.raises(AuthorizationError):
        _award(world, people, people.ann, 5, by=people.tina)


def test_award_requires_active_membership(world, people):
    with pytest.raises(ValidationError):
        _award(world, people, people.cid, 5)


def test_leaderboard_includes_students_without_coins(world, people):
    world.group_service.enroll_student(people.group_id, people.cid.user_id, current_user_id=people.tom.user_id)
    _award(world, people, people.bob, 10)
    _award(world, people, people.bob, 5)
    _award(world, people, people.ann, 15)

    board = world.coin_service.leaderboard(people.group_id)

    assert [(e.rank, e.student_name, e.total_coins) for e in board] == [
        (1, "Ann Student", 15),
        (1, "Bob Student", 15),
        (3, "Cid Student", 0),
    ]


def test_leaderboard_skips_dropped_students(world, people):
    _award(world, people, people.ann, 15)
    world.group_service.remove_student(people.group_id, people.ann.user_id, current_user_id=people.tom.user_id)

    board = world.coin_service.leaderboard(people.group_id)

    assert [e.student_id for e in board] == [people.bob.user_id]


def test_leaderboard_for_student_requires_membership(world, people):
    assert world.coin_service.leaderboard_for_student(people.ann.user_id, people.group_id)

    with pytest.raises(AuthorizationError, match="not a member"):
        world.coin_service.leaderboard_for_student(people.cid.user_id, people.group_id)


def test_grouped_and_summary(world, people):
    physics = world.group_service.create_group(
        CreateGroupRequest(name="Physics", teacher_id=people.tom.user_id), current_user_id=people.tom.user_id
    )
    world.group_service.enroll_student(physics.group_id, people.ann.user_id, current_user_id=people.tom.user_id)
    _award(world, people, people.ann, 3)
    _award(world, people, people.ann, 20, group_id=physics.group_id)
    _award(world, people, people.ann, 4)

    grouped = world.coin_service.grouped_for_student(people.ann.user_id)
    summary = world.coin_service.summary(people.ann.user_id)

    assert [(g.group_name, g.total_coins, len(g.coins)) for g in grouped] == [("Physics", 20, 1), ("Algebra", 7, 2)]
    assert summary.total_coins == 27
    assert summary.awards_count == 3
    assert [g.group_id for g in summary.groups] == [physics.group_id, people.group_id]


def test_dashboards(world, people):
    _award(world, people, people.ann, 5)
    world.payment_service.create_payment(
        CreatePaymentRequest(student_id=people.ann.user_id, group_id=people.group_id, amount=Decimal("30")),
        current_user_id=people.tom.user_id,
    )

    admin = world.dashboard_service.admin_dashboard()
    teacher = world.dashboard_service.teacher_dashboard(people.tom.user_id)
    student = world.dashboard_service.student_dashboard(people.ann.user_id)

    assert (admin.total_users, admin.total_teachers, admin.total_students) == (6, 2, 3)
    assert admin.total_groups == admin.active_groups == 1
    assert len(admin.recent_users) == 5
    assert (teacher.total_groups, teacher.total_students, teacher.coins_awarded) == (1, 2, 1)
    assert teacher.payment_stats.total_amount == Decimal("30")
    assert student.total_coins == 5
    assert student.payments.total_payments == 1
    assert [g.name for g in student.groups] == ["Algebra"]
