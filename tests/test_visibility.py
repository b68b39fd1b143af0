from __future__ import annotations

import pytest

from app.core.errors import InvalidArgument, NotFound
from app.models.user import User
from app.services import blocks, visibility


def test_blocked_pair_is_symmetric(db, clock, make_user) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")
    carol = make_user("Carol")

    blocks.create_block(db, alice, bob, clock.now())

    assert visibility.is_blocked_pair(db, alice, bob)
    assert visibility.is_blocked_pair(db, bob, alice)
    assert not visibility.is_blocked_pair(db, alice, carol)
    assert not visibility.is_blocked_pair(db, bob, carol)


def test_filter_blocked_removes_both_directions(db, clock, make_user) -> None:
    me = make_user("Me")
    i_blocked = make_user("Blocked by me")
    blocked_me = make_user("Blocked me")
    friend = make_user("Friend")

    blocks.create_block(db, me, i_blocked, clock.now())
    blocks.create_block(db, blocked_me, me, clock.now())

    candidates = db.query(User).filter(User.id != me).all()
    visible = visibility.filter_blocked(db, me, candidates)

    assert [u.id for u in visible] == [friend]


def test_filter_blocked_reads_fresh_state(db, clock, make_user) -> None:
    me = make_user()
    other = make_user()
    candidates = [db.get(User, other)]

    blocks.create_block(db, me, other, clock.now())
    assert visibility.filter_blocked(db, me, candidates) == []

    blocks.delete_block(db, me, other)
    assert [u.id for u in visibility.filter_blocked(db, me, candidates)] == [other]


def test_cannot_block_yourself(db, clock, make_user) -> None:
    me = make_user()

    with pytest.raises(InvalidArgument):
        blocks.create_block(db, me, me, clock.now())


def test_cannot_block_twice(db, clock, make_user) -> None:
    me = make_user()
    other = make_user()
    blocks.create_block(db, me, other, clock.now())

    with pytest.raises(InvalidArgument):
        blocks.create_block(db, me, other, clock.now())


def test_block_requires_target(db, clock, make_user) -> None:
    me = make_user()

    with pytest.raises(InvalidArgument):
        blocks.create_block(db, me, None, clock.now())

    with pytest.raises(NotFound):
        blocks.create_block(db, me, "missing-user", clock.now())


def test_list_blocks_newest_first(db, clock, make_user) -> None:
    me = make_user()
    first = make_user()
    second = make_user()

    blocks.create_block(db, me, first, clock.now())
    clock.advance(10)
    blocks.create_block(db, me, second, clock.now())
    blocks.create_block(db, second, me, clock.now())

    listed = blocks.list_blocks(db, me)

    assert [b.blocked_id for b in listed] == [second, first]


def test_delete_only_removes_own_direction(db, clock, make_user) -> None:
    me = make_user()
    other = make_user()
    blocks.create_block(db, other, me, clock.now())

    assert blocks.delete_block(db, me, other) == 0
    assert visibility.is_blocked_pair(db, me, other)
