"""コースデータモジュール

ローカルのフォールバック用コースデータ(YAML)を読み込み、ホール・ティー情報を提供する。
リモートのゾーン設定が未設定の場合、ジオフェンス判定はこのデータを使用する。
"""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import CourseData, HoleInfo, LocalGeofence, TeeRating

logger = logging.getLogger(__name__)

DEFAULT_COURSE_FILE = Path(__file__).parent / "data" / "fox_creek.yaml"


class CourseDataError(Exception):
    """コースデータの読み込み失敗時の例外"""

    pass


def load_course_data(file_path: Path | None = None) -> CourseData:
    """コースデータをYAMLファイルから読み込む

    Args:
        file_path: YAMLファイルのパス(省略時は同梱のFox Creekデータ)

    Returns:
        CourseData: コースデータ

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        CourseDataError: ファイルの内容が不正な場合
    """
    if file_path is None:
        return default_course_data()
    return _load(file_path)


@lru_cache(maxsize=1)
def default_course_data() -> CourseData:
    """同梱のコースデータを取得する(初回のみ読み込み)"""
    return _load(DEFAULT_COURSE_FILE)


def _load(file_path: Path) -> CourseData:
    with file_path.open(encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CourseDataError(f"YAMLの解析に失敗しました: {file_path}") from e

    try:
        course = CourseData(**raw)
    except (TypeError, ValidationError) as e:
        raise CourseDataError(f"コースデータが不正です: {file_path}") from e

    unset = [h.hole_number for h in course.hole_data if h.green_coords is None]
    if unset:
        logger.debug("グリーン座標が未設定のホール: %s", unset)
    logger.debug("コースデータを読み込みました: %s (%s)", course.name, file_path)
    return course


def get_hole(course: CourseData, hole_number: int) -> HoleInfo | None:
    """ホール番号からホール情報を取得する"""
    return next((h for h in course.hole_data if h.hole_number == hole_number), None)


def get_tee_rating(course: CourseData, tee_name: str) -> TeeRating | None:
    """ティー名からレーティングを取得する"""
    return next((t for t in course.tee_ratings if t.name == tee_name), None)


def get_local_geofence(course: CourseData, name: str) -> LocalGeofence | None:
    """名前(大文字小文字を区別しない)からローカルのジオフェンスを取得する"""
    return next(
        (g for g in course.geofences if g.name.lower() == name.lower()),
        None,
    )


def front_nine(course: CourseData) -> list[HoleInfo]:
    return [h for h in course.hole_data if h.hole_number <= 9]


def back_nine(course: CourseData) -> list[HoleInfo]:
    return [h for h in course.hole_data if h.hole_number > 9]


def front_nine_par(course: CourseData) -> int:
    return sum(h.par for h in front_nine(course))


def back_nine_par(course: CourseData) -> int:
    return sum(h.par for h in back_nine(course))
