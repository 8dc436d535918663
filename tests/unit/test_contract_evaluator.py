"""
Unit tests for contract date arithmetic and display helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.features.contracts.evaluator import (
    evaluate_contract,
    format_days_remaining,
    is_expiring_soon,
    status_color,
    status_label,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def evaluate(start, duration_days=30, stored_status="active"):
    return evaluate_contract(
        start,
        duration_days,
        NOW,
        tenant_id="t-1",
        tenant_name="Loja X",
        stored_status=stored_status,
    )


@pytest.mark.unit
class TestEvaluateContract:

    def test_fresh_contract(self):
        info = evaluate(NOW)

        assert info.contract_end_date == NOW + timedelta(days=30)
        assert info.days_remaining == 30
        assert info.is_expired is False
        assert info.days_since_expiry == 0
        assert info.contract_status == "active"

    def test_days_remaining_rounds_up(self):
        # Ends in 1 second
        info = evaluate(NOW - timedelta(days=30) + timedelta(seconds=1))

        assert info.is_expired is False
        assert info.days_remaining == 1

    def test_ending_exactly_now_is_not_expired(self):
        info = evaluate(NOW - timedelta(days=30))

        assert info.is_expired is False
        assert info.days_remaining == 0

    def test_days_since_expiry_rounds_down(self):
        # Ended 23 hours ago
        info = evaluate(NOW - timedelta(days=30, hours=23))

        assert info.is_expired is True
        assert info.days_remaining == 0
        assert info.days_since_expiry == 0
        assert info.contract_status == "expired"

    def test_ended_ten_days_ago(self):
        info = evaluate(NOW - timedelta(days=40))

        assert info.is_expired is True
        assert info.days_since_expiry == 10

    def test_stale_expired_status_reads_as_active(self):
        info = evaluate(NOW, stored_status="expired")

        assert info.is_expired is False
        assert info.contract_status == "active"

    def test_trial_and_suspended_are_kept_while_running(self):
        assert evaluate(NOW, stored_status="trial").contract_status == "trial"
        assert evaluate(NOW, stored_status="suspended").contract_status == "suspended"

    def test_naive_start_is_treated_as_utc(self):
        info = evaluate(NOW.replace(tzinfo=None))

        assert info.contract_start_date == NOW
        assert info.days_remaining == 30


@pytest.mark.unit
class TestDisplayHelpers:

    @pytest.mark.parametrize(
        "status, color, label",
        [
            ("active", "green", "Ativo"),
            ("trial", "blue", "Trial"),
            ("suspended", "yellow", "Suspenso"),
            ("expired", "red", "Expirado"),
            ("whatever", "gray", "Desconhecido"),
        ],
    )
    def test_status_color_and_label(self, status, color, label):
        assert status_color(status) == color
        assert status_label(status) == label

    @pytest.mark.parametrize(
        "days, expired, text",
        [
            (0, False, "Expira hoje"),
            (1, False, "Expira amanhã"),
            (12, False, "12 dias restantes"),
            (1, True, "Expirado há 1 dia"),
            (5, True, "Expirado há 5 dias"),
        ],
    )
    def test_format_days_remaining(self, days, expired, text):
        assert format_days_remaining(days, expired) == text

    def test_expiring_soon_threshold(self):
        assert is_expiring_soon(evaluate(NOW - timedelta(days=23)), threshold_days=7) is True
        assert is_expiring_soon(evaluate(NOW - timedelta(days=22)), threshold_days=7) is False

    def test_expired_is_not_expiring_soon(self):
        assert is_expiring_soon(evaluate(NOW - timedelta(days=40)), threshold_days=7) is False
