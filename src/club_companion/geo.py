"""位置計算モジュール

Haversine距離、ジオフェンスの内外判定、ヤード換算など位置に関するユーティリティを提供する。
すべて純粋関数で、外部状態を参照しない。
"""

import logging
import math
from dataclasses import dataclass

from .course_data import default_course_data, get_hole, get_local_geofence
from .models import Coordinate, CourseData, GeofenceZone, LocalGeofence

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_YARD = 0.9144


class InvalidCoordinateError(ValueError):
    """座標が有限の数値でない場合の例外"""

    pass


def haversine_distance_meters(a: Coordinate, b: Coordinate) -> float:
    """2点間の大圏距離をHaversine公式で計算する

    Args:
        a: 始点
        b: 終点

    Returns:
        float: 距離(メートル)

    Raises:
        InvalidCoordinateError: 座標にNaNや無限大が含まれる場合
    """
    # model_constructで検証を経ずに作られた座標も拒否する
    for value in (a.lat, a.lng, b.lat, b.lng):
        if not math.isfinite(value):
            raise InvalidCoordinateError(f"不正な座標です: {a!r}, {b!r}")

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def within_zone(point: Coordinate, zone: GeofenceZone) -> bool:
    """地点がゾーン内(境界を含む)にあるか判定する

    プレースホルダー座標のゾーンは呼び出し側で除外しておくこと。
    """
    return haversine_distance_meters(point, zone.center) <= zone.radius_meters


def is_zone_configured(coords: Coordinate | None) -> bool:
    """座標が設定済みか判定する

    未設定(None)または緯度経度がともに0のプレースホルダーの場合はFalse。
    """
    if coords is None:
        return False
    return not (coords.lat == 0 and coords.lng == 0)


def meters_to_yards(meters: float) -> int:
    """メートルをヤードに換算し、整数に丸める"""
    return math.floor(meters / METERS_PER_YARD + 0.5)


def yards_to_meters(yards: float) -> float:
    """ヤードをメートルに換算する"""
    return yards * METERS_PER_YARD


def distance_to_green_yards(
    point: Coordinate,
    hole_number: int,
    course: CourseData | None = None,
) -> int | None:
    """指定ホールのグリーンまでの距離(ヤード)を取得する

    Args:
        point: 現在地
        hole_number: ホール番号
        course: コースデータ(省略時は同梱データ)

    Returns:
        int | None: 距離(ヤード)。ホールが存在しないか座標が未設定の場合はNone
    """
    course = course or default_course_data()
    hole = get_hole(course, hole_number)
    if hole is None:
        return None
    if not is_zone_configured(hole.green_coords):
        logger.debug("ホール%dのグリーン座標が未設定です", hole_number)
        return None
    return meters_to_yards(haversine_distance_meters(point, hole.green_coords))


def distance_to_tee_yards(
    point: Coordinate,
    hole_number: int,
    course: CourseData | None = None,
) -> int | None:
    """指定ホールのティーまでの距離(ヤード)を取得する

    ホールが存在しないか座標が未設定の場合はNone。
    """
    course = course or default_course_data()
    hole = get_hole(course, hole_number)
    if hole is None:
        return None
    if not is_zone_configured(hole.tee_box_coords):
        logger.debug("ホール%dのティー座標が未設定です", hole_number)
        return None
    return meters_to_yards(haversine_distance_meters(point, hole.tee_box_coords))


def is_near_green(
    point: Coordinate,
    hole_number: int,
    threshold_yards: int,
    course: CourseData | None = None,
) -> bool:
    """グリーンまでの距離が閾値(ヤード)以内か判定する"""
    distance = distance_to_green_yards(point, hole_number, course)
    if distance is None:
        return False
    return distance <= threshold_yards


def within_local_geofence(point: Coordinate, geofence: LocalGeofence) -> bool:
    """ローカルのジオフェンス内にあるか判定する(座標未設定ならFalse)"""
    if not is_zone_configured(geofence.coords):
        logger.debug("ジオフェンス%sの座標が未設定です", geofence.name)
        return False
    return haversine_distance_meters(point, geofence.coords) <= geofence.radius_meters


def current_zone_name(
    point: Coordinate,
    zones: list[GeofenceZone],
    course: CourseData | None = None,
) -> str | None:
    """現在地が含まれるゾーン名を取得する

    リモートのゾーンを優先し、該当がなければローカルのジオフェンスを確認する。

    Returns:
        str | None: ゾーン名。どこにも含まれない場合はNone
    """
    for zone in zones:
        if within_zone(point, zone):
            return zone.zone_name

    course = course or default_course_data()
    for geofence in course.geofences:
        if within_local_geofence(point, geofence):
            return geofence.name

    return None


@dataclass(frozen=True)
class CourseDistances:
    """主要施設までの距離(ヤード、座標未設定の場合はNone)"""

    to_clubhouse: int | None
    to_range: int | None
    to_canteen: int | None


def course_distances(
    point: Coordinate, course: CourseData | None = None
) -> CourseDistances:
    """クラブハウス・練習場・売店までの距離を取得する"""
    course = course or default_course_data()

    def _distance(name: str) -> int | None:
        geofence = get_local_geofence(course, name)
        if geofence is None or not is_zone_configured(geofence.coords):
            return None
        return meters_to_yards(haversine_distance_meters(point, geofence.coords))

    return CourseDistances(
        to_clubhouse=_distance("Clubhouse"),
        to_range=_distance("Practice Range"),
        to_canteen=_distance("Canteen"),
    )
