"""
Unit tests for voucher code generation and allocation.
"""

import pytest

from reward_ledger.models import Reward, RewardPin, RewardStatus, RewardType
from reward_ledger.services.exceptions import PinAllocationExhausted
from reward_ledger.services.ledger_store import LedgerStore
from reward_ledger.services.pin_allocator import PIN_PATTERN, PinAllocator, generate_pin


def _issue_pin(session, user, pin_number):
    reward = Reward(
        user_id=user.id,
        points_used=5000,
        reward_type=RewardType.FIVE_THOUSAND,
        quantity=1,
        status=RewardStatus.APPROVED,
    )
    reward.pins = [RewardPin(pin_number=pin_number)]
    session.add(reward)
    session.commit()


class TestGeneratePin:
    """Tests for the code format."""

    def test_format_matches_pattern(self):
        for _ in range(200):
            pin = generate_pin()
            assert len(pin) == 19
            assert PIN_PATTERN.match(pin)

    def test_group_bounds(self):
        assert generate_pin(lambda _: 0) == "1000-1000-1000-1000"
        assert generate_pin(lambda _: 8999) == "9999-9999-9999-9999"

    def test_draws_from_9000_values(self):
        seen = []

        def fake_randbelow(upper):
            seen.append(upper)
            return 1234

        assert generate_pin(fake_randbelow) == "2234-2234-2234-2234"
        assert seen == [9000, 9000, 9000, 9000]


class TestPinAllocator:
    """Tests for uniqueness handling."""

    def test_allocates_requested_count(self, session):
        pins = PinAllocator(LedgerStore(session)).allocate(10)

        assert len(pins) == 10
        assert len(set(pins)) == 10
        assert all(PIN_PATTERN.match(pin) for pin in pins)

    def test_allocate_zero_returns_empty(self, session):
        assert PinAllocator(LedgerStore(session)).allocate(0) == []

    def test_regenerates_pin_already_in_store(self, session, make_user):
        user = make_user(5000)
        _issue_pin(session, user, "1111-1111-1111-1111")

        candidates = iter(["1111-1111-1111-1111", "2222-2222-2222-2222"])
        allocator = PinAllocator(LedgerStore(session), generator=lambda: next(candidates))

        assert allocator.allocate(1) == ["2222-2222-2222-2222"]

    def test_regenerates_duplicate_within_batch(self, session):
        candidates = iter([
            "1111-1111-1111-1111",
            "1111-1111-1111-1111",
            "3333-3333-3333-3333",
        ])
        allocator = PinAllocator(LedgerStore(session), generator=lambda: next(candidates))

        assert allocator.allocate(2) == ["1111-1111-1111-1111", "3333-3333-3333-3333"]

    def test_gives_up_after_max_attempts(self, session, make_user):
        user = make_user(5000)
        _issue_pin(session, user, "4444-4444-4444-4444")

        calls = []

        def always_taken():
            calls.append(1)
            return "4444-4444-4444-4444"

        allocator = PinAllocator(LedgerStore(session), max_attempts=3, generator=always_taken)

        with pytest.raises(PinAllocationExhausted):
            allocator.allocate(1)
        assert len(calls) == 3
