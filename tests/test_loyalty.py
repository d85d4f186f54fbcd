"""loyalty.pyのテスト"""

from club_companion.loyalty import award_round_completion_points
from club_companion.models import LoyaltyConfig, LoyaltyPointRule


def _config(completed: int = 10, under_par: int = 25, enabled: bool = True) -> LoyaltyConfig:
    return LoyaltyConfig(
        round_completed=LoyaltyPointRule(enabled=enabled, points=completed),
        round_under_par=LoyaltyPointRule(enabled=enabled, points=under_par),
    )


class TestAwardRoundCompletionPoints:
    """award_round_completion_points関数のテスト"""

    def test_completed_only(self):
        transactions = award_round_completion_points(
            _config(), "user-1", "round-1", gross_score=90, course_par=72
        )

        assert len(transactions) == 1
        assert transactions[0].transaction_type == "round_completed"
        assert transactions[0].points == 10
        assert transactions[0].reference_id == "round-1"

    def test_under_par_bonus(self):
        """パー未満の場合はボーナスが付与されること"""
        transactions = award_round_completion_points(
            _config(), "user-1", "round-1", gross_score=70, course_par=72
        )

        assert [t.transaction_type for t in transactions] == [
            "round_completed",
            "round_under_par",
        ]
        assert transactions[1].points == 25
        assert transactions[1].description == "Bonus for scoring 2 under par"

    def test_even_par_no_bonus(self):
        transactions = award_round_completion_points(
            _config(), "user-1", "round-1", gross_score=72, course_par=72
        )
        assert len(transactions) == 1

    def test_disabled(self):
        transactions = award_round_completion_points(
            _config(enabled=False), "user-1", "round-1", gross_score=70, course_par=72
        )
        assert transactions == []

    def test_zero_points_skipped(self):
        transactions = award_round_completion_points(
            _config(completed=0), "user-1", "round-1", gross_score=70, course_par=72
        )
        assert [t.transaction_type for t in transactions] == ["round_under_par"]

    def test_default_config_awards_nothing(self):
        transactions = award_round_completion_points(
            LoyaltyConfig(), "user-1", "round-1", gross_score=60, course_par=72
        )
        assert transactions == []
