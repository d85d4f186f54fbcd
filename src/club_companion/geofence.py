"""ジオフェンストリガー判定モジュール

現在地・ラウンド状態・管理者設定から、発火すべきトリガーを1つだけ決定する。

判定は優先順位順に行い、最初に該当したトリガーを返す:

1. マスタースイッチ(無効ならnone)
2. 1番ティーでのラウンド自動開始(チェックイン済みかつラウンド未開始)
3. クラブハウスでのチェックイン
4. 練習場でのティータイムアラート(5分前以内)
5. 8番グリーンでのターンのF&B案内(7〜8番ホールのプレー中)

「発火済み」フラグは呼び出し側の状態であり、この関数は管理しない。
同じ入力で呼べば同じトリガーを返す。
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from .course_data import default_course_data, get_hole, get_local_geofence
from .geo import (
    haversine_distance_meters,
    is_zone_configured,
    meters_to_yards,
    within_zone,
    yards_to_meters,
)
from .models import (
    AutoStartTrigger,
    CheckInTrigger,
    Coordinate,
    CourseData,
    FnbPromptTrigger,
    GeofenceCheckInput,
    GeofenceTrigger,
    GeofenceZone,
    NoTrigger,
    TeeAlertTrigger,
    TriggerAction,
    ZoneType,
)

logger = logging.getLogger(__name__)

# ターン(フロント9の終わり)のホール
TURN_HOLE = 8

# ティータイムアラートを出す残り時間(分)
TEE_TIME_ALERT_MINUTES = 5

# ローカルデータでのグリーン判定距離(ヤード)
LOCAL_GREEN_THRESHOLD_YARDS = 30

# ローカルのジオフェンス名とゾーン種別の対応
_LOCAL_GEOFENCES: dict[str, tuple[str, str, TriggerAction | None]] = {
    "clubhouse": ("Clubhouse", "local-clubhouse", "check_in"),
    "range": ("Practice Range", "local-range", "tee_alert"),
    "canteen": ("Canteen", "local-canteen", None),
}


@dataclass(frozen=True)
class ResolvedZone:
    """判定対象のゾーン

    Attributes:
        zone: ゾーン
        is_local: ローカルデータから合成したゾーンの場合True
    """

    zone: GeofenceZone
    is_local: bool = False

    def contains(self, point: Coordinate) -> bool:
        """地点がゾーン内にあるか判定する

        ローカルのグリーンはヤード換算した距離で判定する。
        """
        if self.is_local and self.zone.zone_type == "hole_green":
            distance = haversine_distance_meters(point, self.zone.center)
            return meters_to_yards(distance) <= LOCAL_GREEN_THRESHOLD_YARDS
        return within_zone(point, self.zone)


def resolve_zone(
    remote_zones: list[GeofenceZone],
    zone_type: ZoneType,
    hole_number: int | None = None,
    *,
    allow_fallback: bool = True,
    course: CourseData | None = None,
) -> ResolvedZone | None:
    """判定対象のゾーンを解決する

    リモートのゾーンが1件でも設定されていればその中から探す。
    リモートのゾーンが空の場合のみ、ローカルデータから座標設定済みのゾーンを合成する。

    Args:
        remote_zones: リモート設定のゾーン一覧
        zone_type: ゾーン種別
        hole_number: ホール番号(ホール関連のゾーンの場合)
        allow_fallback: ローカルデータへのフォールバックを許可する場合True
        course: コースデータ(省略時は同梱データ)

    Returns:
        ResolvedZone | None: 解決したゾーン。該当なしの場合はNone
    """
    if remote_zones:
        for zone in remote_zones:
            if zone.zone_type != zone_type:
                continue
            if hole_number is not None and zone.hole_number != hole_number:
                continue
            return ResolvedZone(zone)
        return None

    if not allow_fallback:
        return None

    zone = _local_zone(course or default_course_data(), zone_type, hole_number)
    if zone is None:
        return None
    return ResolvedZone(zone, is_local=True)


def _local_zone(
    course: CourseData, zone_type: ZoneType, hole_number: int | None
) -> GeofenceZone | None:
    """ローカルデータからゾーンを合成する(座標未設定ならNone)"""
    if zone_type in _LOCAL_GEOFENCES:
        name, zone_id, action = _LOCAL_GEOFENCES[zone_type]
        geofence = get_local_geofence(course, name)
        if geofence is None or not is_zone_configured(geofence.coords):
            return None
        return GeofenceZone(
            id=zone_id,
            zone_name=geofence.name,
            zone_type=zone_type,
            latitude=geofence.coords.lat,
            longitude=geofence.coords.lng,
            radius_meters=geofence.radius_meters,
            trigger_action=action,
        )

    # ティーのゾーンはリモート設定のみ
    if zone_type != "hole_green" or hole_number is None:
        return None
    hole = get_hole(course, hole_number)
    if hole is None or not is_zone_configured(hole.green_coords):
        return None

    return GeofenceZone(
        id=f"local-hole{hole_number}-green",
        zone_name=f"Hole {hole_number} Green",
        zone_type="hole_green",
        hole_number=hole_number,
        latitude=hole.green_coords.lat,
        longitude=hole.green_coords.lng,
        radius_meters=yards_to_meters(LOCAL_GREEN_THRESHOLD_YARDS),
        trigger_action="fnb_prompt",
    )


def minutes_until_tee_time(tee_time: datetime, now: datetime | None = None) -> int:
    """ティータイムまでの残り時間(分、切り捨て)を計算する

    Args:
        tee_time: ティータイム
        now: 現在時刻(省略時はシステム時刻。tee_timeのタイムゾーンに合わせる)

    Returns:
        int: 残り分数。過ぎている場合は負の値
    """
    if now is None:
        now = datetime.now(tee_time.tzinfo)
    return math.floor((tee_time - now).total_seconds() / 60)


def _alert_window_minutes(tee_time: datetime, now: datetime | None) -> int | None:
    """ティータイムがアラート対象の時間内なら残り分数を返す

    残り時間が5分(300秒)以内で、かつ切り捨てた残り分数が1以上の場合のみ対象とする。
    """
    if now is None:
        now = datetime.now(tee_time.tzinfo)
    remaining = (tee_time - now).total_seconds()
    minutes = minutes_until_tee_time(tee_time, now)
    if minutes > 0 and remaining <= TEE_TIME_ALERT_MINUTES * 60:
        return minutes
    return None


def evaluate(
    check: GeofenceCheckInput,
    now: datetime | None = None,
    course: CourseData | None = None,
) -> GeofenceTrigger:
    """現在地と状態から発火するトリガーを判定する

    Args:
        check: 判定の入力(現在地、ラウンド状態、ゾーン一覧、機能設定)
        now: 現在時刻(省略時はシステム時刻)
        course: フォールバック用のコースデータ(省略時は同梱データ)

    Returns:
        GeofenceTrigger: 発火したトリガー。該当なしの場合はNoTrigger
    """
    settings = check.settings
    context = check.context
    point = check.location
    zones = check.zones

    if not settings.enabled:
        logger.debug("ジオフェンス機能は管理者により無効化されています")
        return NoTrigger()

    # チェックイン済みなら1番ティーでの自動開始を最優先(ローカルデータへのフォールバックなし)
    if context.is_checked_in and not context.is_round_in_progress:
        tee = resolve_zone(zones, "hole_tee", 1, allow_fallback=False)
        if tee is not None and tee.contains(point):
            return AutoStartTrigger(zone=tee.zone)

    if settings.check_in_enabled and not context.is_checked_in:
        clubhouse = resolve_zone(zones, "clubhouse", course=course)
        if clubhouse is not None and clubhouse.contains(point):
            return CheckInTrigger(zone=clubhouse.zone)

    if settings.tee_time_alerts and context.tee_time is not None:
        minutes = _alert_window_minutes(context.tee_time, now)
        if minutes is not None:
            practice_range = resolve_zone(zones, "range", course=course)
            if practice_range is not None and practice_range.contains(point):
                return TeeAlertTrigger(
                    zone=practice_range.zone, minutes_until_tee_time=minutes
                )

    if (
        settings.turn_prompt_enabled
        and not context.has_shown_fnb_prompt
        and TURN_HOLE - 1 <= context.current_hole <= TURN_HOLE
    ):
        green = resolve_zone(zones, "hole_green", TURN_HOLE, course=course)
        if green is not None and green.contains(point):
            return FnbPromptTrigger(zone=green.zone, hole_number=TURN_HOLE)

    return NoTrigger()
