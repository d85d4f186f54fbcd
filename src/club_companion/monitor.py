"""ジオフェンス監視モジュール

位置更新ごとにトリガーを判定し、ラウンド状態を更新する。
トリガー判定(geofence.evaluate)は純粋関数のため、二重発火を防ぐ「発火済み」フラグはこのクラスが保持する。
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from .geofence import evaluate
from .models import (
    CourseData,
    FeatureSettings,
    GeofenceCheckInput,
    GeofenceTrigger,
    GeofenceZone,
    LocationSample,
    NoTrigger,
    RoundContext,
)
from .remote import RemoteConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackingProfile:
    """位置取得の間隔設定"""

    high_accuracy: bool
    distance_interval_m: int
    time_interval_s: int


# コース上(チェックイン済み)は高精度・短間隔、それ以外はバッテリー優先
ON_COURSE_PROFILE = TrackingProfile(high_accuracy=True, distance_interval_m=10, time_interval_s=5)
OFF_COURSE_PROFILE = TrackingProfile(
    high_accuracy=False, distance_interval_m=50, time_interval_s=15
)


class GeofenceMonitor:
    """位置更新を受けてトリガーを適用するクラス"""

    def __init__(
        self,
        settings: FeatureSettings | None = None,
        zones: list[GeofenceZone] | None = None,
        context: RoundContext | None = None,
        course: CourseData | None = None,
        notify: Callable[[GeofenceTrigger], None] | None = None,
    ):
        """初期化

        Args:
            settings: 機能設定(省略時はすべて有効)
            zones: リモート設定のゾーン一覧(省略時はローカルデータにフォールバック)
            context: 初期のラウンド状態
            course: フォールバック用のコースデータ
            notify: トリガー発火時に呼ばれるコールバック
        """
        self.settings = settings or FeatureSettings()
        self.zones = zones or []
        self.context = context or RoundContext()
        self.course = course
        self.notify = notify
        self.last_trigger: GeofenceTrigger = NoTrigger()
        self.last_location: LocationSample | None = None
        self._has_alerted = False

    @classmethod
    def from_remote_config(cls, config: RemoteConfig, **kwargs) -> "GeofenceMonitor":
        """リモート設定から生成する"""
        return cls(settings=config.settings, zones=config.zones, **kwargs)

    @property
    def is_enabled(self) -> bool:
        return self.settings.enabled

    @property
    def tracking_profile(self) -> TrackingProfile:
        if self.context.is_checked_in:
            return ON_COURSE_PROFILE
        return OFF_COURSE_PROFILE

    @property
    def has_alerted(self) -> bool:
        return self._has_alerted

    def update_remote_config(self, config: RemoteConfig) -> None:
        """リモート設定を更新する"""
        self.settings = config.settings
        self.zones = config.zones

    def set_tee_time(self, tee_time: datetime | None) -> None:
        """ティータイムを設定する(アラート済みフラグはリセット)"""
        self.context = self.context.model_copy(update={"tee_time": tee_time})
        self._has_alerted = False

    def set_current_hole(self, hole_number: int) -> None:
        """現在のホールを設定する(1〜18に丸める)"""
        hole_number = max(1, min(18, hole_number))
        self.context = self.context.model_copy(update={"current_hole": hole_number})

    def process_location(
        self, sample: LocationSample, now: datetime | None = None
    ) -> GeofenceTrigger:
        """位置サンプルからトリガーを判定し、状態に反映する

        Args:
            sample: 位置サンプル
            now: 現在時刻(省略時はシステム時刻)

        Returns:
            GeofenceTrigger: 判定結果(発火済みで抑制した場合も判定結果をそのまま返す)
        """
        self.last_location = sample
        trigger = evaluate(
            GeofenceCheckInput(
                location=sample.coordinate,
                context=self.context,
                zones=self.zones,
                settings=self.settings,
            ),
            now=now,
            course=self.course,
        )
        self.last_trigger = trigger

        if self._apply(trigger) and self.notify is not None:
            self.notify(trigger)
        return trigger

    def _apply(self, trigger: GeofenceTrigger) -> bool:
        """トリガーを状態に反映する

        Returns:
            bool: 新たに発火した場合True
        """
        context = self.context

        # check_in・auto_start・fnb_promptは発火済みなら判定時に除外されている
        if trigger.type == "check_in":
            self.context = context.model_copy(update={"is_checked_in": True})
            logger.info("クラブハウスで自動チェックインしました: %s", trigger.zone.zone_name)
            return True

        if trigger.type == "auto_start":
            self.context = context.model_copy(
                update={
                    "is_round_in_progress": True,
                    "current_hole": 1,
                    "has_shown_fnb_prompt": False,
                }
            )
            logger.info("1番ティーでラウンドを自動開始しました")
            return True

        if trigger.type == "tee_alert":
            if self._has_alerted:
                return False
            self._has_alerted = True
            logger.info(
                "ティータイムアラート: あと%d分です", trigger.minutes_until_tee_time
            )
            return True

        if trigger.type == "fnb_prompt":
            self.context = context.model_copy(update={"has_shown_fnb_prompt": True})
            logger.info("ターンのF&B案内を表示します(ホール%d)", trigger.hole_number)
            return True

        return False
