"""ロイヤリティポイントモジュール

ラウンド完了時に付与するポイントを設定に従って決定する。
"""

import logging

from .models import LoyaltyConfig, LoyaltyTransaction

logger = logging.getLogger(__name__)


def award_round_completion_points(
    config: LoyaltyConfig,
    user_id: str,
    round_id: str,
    gross_score: int,
    course_par: int,
) -> list[LoyaltyTransaction]:
    """ラウンド完了時のポイント付与トランザクションを作成する

    Args:
        config: ポイント付与ルール
        user_id: ユーザーID
        round_id: ラウンドID(トランザクションの参照ID)
        gross_score: グロススコア
        course_par: コースのパー

    Returns:
        list[LoyaltyTransaction]: 付与するトランザクション(該当なしの場合は空)
    """
    transactions: list[LoyaltyTransaction] = []

    completed = config.round_completed
    if completed.enabled and completed.points > 0:
        transactions.append(
            LoyaltyTransaction(
                user_id=user_id,
                points=completed.points,
                transaction_type="round_completed",
                description="Points for completing 18 holes",
                reference_id=round_id,
            )
        )

    under_par = config.round_under_par
    if under_par.enabled and under_par.points > 0 and gross_score < course_par:
        transactions.append(
            LoyaltyTransaction(
                user_id=user_id,
                points=under_par.points,
                transaction_type="round_under_par",
                description=f"Bonus for scoring {course_par - gross_score} under par",
                reference_id=round_id,
            )
        )

    total = sum(t.points for t in transactions)
    logger.debug("ラウンド%sの付与ポイント: %d", round_id, total)
    return transactions
