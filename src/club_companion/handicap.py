"""WHS(World Handicap System)計算モジュール

以下の計算を提供する:

- スコアディファレンシャル
- ESC(Equitable Stroke Control)調整後スコア
- ベストディファレンシャルからのハンディキャップインデックス
- コースハンディキャップ
"""

import logging
import math
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal

from .course_data import default_course_data, get_tee_rating
from .models import CourseData, Gender, HoleInfo, HoleScore, RoundRecord, TeeName

logger = logging.getLogger(__name__)

# WHSのハンディキャップインデックス上限
MAX_HANDICAP_INDEX = 54.0

# スロープレーティングの基準値
STANDARD_SLOPE = 113

# ハンディキャップ算出に使う最大ラウンド数
MAX_ROUNDS_CONSIDERED = 20

# 最低必要ラウンド数
MIN_ROUNDS = 3

# WHSディファレンシャル選択表
# ラウンド数: (使用するディファレンシャル数, 調整値)
DIFFERENTIAL_SELECTION: dict[int, tuple[int, float]] = {
    3: (1, -2.0),
    4: (1, -1.0),
    5: (1, 0.0),
    6: (2, -1.0),
    7: (2, 0.0),
    8: (2, 0.0),
    9: (3, 0.0),
    10: (3, 0.0),
    11: (3, 0.0),
    12: (4, 0.0),
    13: (4, 0.0),
    14: (4, 0.0),
    15: (5, 0.0),
    16: (5, 0.0),
    17: (6, 0.0),
    18: (6, 0.0),
    19: (7, 0.0),
    20: (8, 0.0),
}


class InvalidRatingError(ValueError):
    """コースレーティング・スロープレーティングが不正な場合の例外"""

    pass


def round_half_up(value: float, digits: int = 1) -> float:
    """指定桁で四捨五入する(.5は正の無限大方向に丸める)

    Examples:
        >>> round_half_up(10.25)
        10.3
        >>> round_half_up(-1.25)
        -1.2
    """
    d = Decimal(str(value))
    rounding = ROUND_HALF_UP if d >= 0 else ROUND_HALF_DOWN
    return float(d.quantize(Decimal(1).scaleb(-digits), rounding=rounding))


# ============================================
# ESC
# ============================================


def max_score_simple(par: int) -> int:
    """コースハンディキャップ不明時の上限(ダブルボギー)"""
    return par + 2


def strokes_received(course_handicap: int, hole_handicap_index: int) -> int:
    """ホールで受けるハンディキャップストローク数

    18ホールにストロークを配分し、端数はホールの難易度順位の高い順に1打ずつ配る。
    """
    extra = 1 if hole_handicap_index <= math.fmod(course_handicap, 18) else 0
    return math.floor(course_handicap / 18) + extra


def max_score_net_double_bogey(
    par: int, course_handicap: int, hole_handicap_index: int
) -> int:
    """ネットダブルボギーによるホールの上限スコア

    Args:
        par: ホールのパー
        course_handicap: プレーヤーのコースハンディキャップ
        hole_handicap_index: ホールの難易度順位(1〜18)

    Returns:
        int: 上限スコア(パー + 2 + 受けるストローク数)
    """
    return par + 2 + strokes_received(course_handicap, hole_handicap_index)


def esc_adjusted_score(raw_score: int, max_allowed: int) -> int:
    """ESC調整後のホールスコア"""
    return min(raw_score, max_allowed)


def simple_adjusted_score(scores: list[HoleScore]) -> int:
    """ダブルボギー上限でのESC調整後トータル(未入力のホールは除外)"""
    return sum(
        esc_adjusted_score(h.score, max_score_simple(h.par))
        for h in scores
        if h.score is not None
    )


def net_double_bogey_adjusted_score(
    scores: list[HoleScore],
    course_handicap: int,
    hole_data: list[HoleInfo],
) -> int:
    """ネットダブルボギー上限でのESC調整後トータル

    Args:
        scores: ホール別スコア
        course_handicap: コースハンディキャップ
        hole_data: ホール情報(パー、難易度順位)

    Returns:
        int: 調整後トータル。ホール情報がないホールは実打数で加算する
    """
    holes = {h.hole_number: h for h in hole_data}
    total = 0
    for hole_score in scores:
        if hole_score.score is None:
            continue
        info = holes.get(hole_score.hole)
        if info is None:
            total += hole_score.score
            continue
        max_score = max_score_net_double_bogey(
            info.par, course_handicap, info.handicap_index
        )
        total += esc_adjusted_score(hole_score.score, max_score)
    return total


# ============================================
# ディファレンシャル / ハンディキャップ
# ============================================


def score_differential(
    adjusted_score: int, course_rating: float, slope_rating: float
) -> float:
    """スコアディファレンシャルを計算する

    Differential = (113 / スロープ) × (調整後スコア - コースレーティング)

    Raises:
        InvalidRatingError: スロープレーティングが0以下、またはレーティングが有限の数値でない場合
    """
    if not math.isfinite(slope_rating) or slope_rating <= 0:
        raise InvalidRatingError(f"スロープレーティングが不正です: {slope_rating}")
    if not math.isfinite(course_rating):
        raise InvalidRatingError(f"コースレーティングが不正です: {course_rating}")
    differential = (STANDARD_SLOPE / slope_rating) * (adjusted_score - course_rating)
    return round_half_up(differential, 1)


def course_handicap(
    handicap_index: float, slope_rating: float, course_rating: float, par: int
) -> int:
    """ハンディキャップインデックスからコースハンディキャップを計算する

    Course Handicap = Index × (スロープ / 113) + (コースレーティング - パー)
    """
    value = handicap_index * (slope_rating / STANDARD_SLOPE) + (course_rating - par)
    return int(round_half_up(value, 0))


def handicap_index(differentials: list[float]) -> float | None:
    """ディファレンシャルからハンディキャップインデックスを計算する(WHS方式)

    ラウンド数に応じて選択表からベストN個と調整値を決め、平均に調整値を加える。
    選択表の参照は最大20ラウンドまで。直近のラウンドへの絞り込みは呼び出し側で行う。

    Args:
        differentials: ディファレンシャルのリスト(新しい順)

    Returns:
        float | None: ハンディキャップインデックス(0.0〜54.0)。3ラウンド未満はNone
    """
    count = len(differentials)
    if count < MIN_ROUNDS:
        return None

    rounds_used = min(count, MAX_ROUNDS_CONSIDERED)
    how_many, adjustment = DIFFERENTIAL_SELECTION[rounds_used]

    best = sorted(differentials)[:how_many]
    average = sum(best) / how_many

    index = round_half_up(average + adjustment, 1)
    return max(0.0, min(MAX_HANDICAP_INDEX, index))


# ============================================
# ラウンド記録
# ============================================


def ratings_for_tee(
    tee_name: str, gender: Gender = "mens", course: CourseData | None = None
) -> tuple[float, int] | None:
    """ティーのコースレーティングとスロープを取得する

    Returns:
        tuple[float, int] | None: (コースレーティング, スロープ)。ティーが存在しない場合はNone
    """
    tee = get_tee_rating(course or default_course_data(), tee_name)
    if tee is None:
        return None
    if gender == "mens":
        return tee.mens_rating, tee.mens_slope
    return tee.womens_rating, tee.womens_slope


def prepare_round(
    user_id: str,
    scores: list[HoleScore],
    tee_played: TeeName,
    gender: Gender = "mens",
    duration_seconds: int | None = None,
    weather_conditions: str | None = None,
    course: CourseData | None = None,
) -> RoundRecord | None:
    """完了したラウンドの記録を作成する

    調整後スコアはダブルボギー上限のESCで計算する。

    Args:
        user_id: ユーザーID
        scores: ホール別スコア
        tee_played: 使用ティー
        gender: 使用するレーティング
        duration_seconds: 所要時間(秒)
        weather_conditions: 天候
        course: コースデータ(省略時は同梱データ)

    Returns:
        RoundRecord | None: ラウンド記録。ティーのレーティングが取得できない場合はNone
    """
    ratings = ratings_for_tee(tee_played, gender, course)
    if ratings is None:
        logger.warning("ティーのレーティングが取得できません: %s", tee_played)
        return None
    course_rating, slope_rating = ratings

    gross_score = sum(h.score or 0 for h in scores)
    adjusted_score = simple_adjusted_score(scores)
    differential = score_differential(adjusted_score, course_rating, slope_rating)

    adjusted_scores = [
        h.model_copy(
            update={"adjusted_score": esc_adjusted_score(h.score, max_score_simple(h.par))}
        )
        if h.score is not None
        else h
        for h in scores
    ]

    return RoundRecord(
        user_id=user_id,
        tee_played=tee_played,
        gross_score=gross_score,
        adjusted_score=adjusted_score,
        course_rating=course_rating,
        slope_rating=slope_rating,
        differential=differential,
        scores=adjusted_scores,
        duration_seconds=duration_seconds,
        weather_conditions=weather_conditions,
    )
