"""Question status derivation."""
import pytest

from courseqa.domain.qa.status import derive_question_status


@pytest.mark.parametrize(
    "statuses, expected",
    [
        ([], "unanswered"),
        (["rejected"], "unanswered"),
        (["rejected", "rejected"], "unanswered"),
        (["pending"], "pending"),
        (["edited"], "pending"),
        (["rejected", "pending"], "pending"),
        (["approved"], "answered"),
        (["pending", "approved", "pending"], "answered"),
        (["rejected", "approved", "rejected"], "answered"),
    ],
)
def test_derive_question_status(statuses, expected):
    assert derive_question_status(statuses) == expected


def test_answered_wins_regardless_of_position():
    assert derive_question_status(iter(["pending"] * 5 + ["approved"])) == "answered"
