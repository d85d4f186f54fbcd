"""データモデルモジュール

ジオフェンス判定とハンディキャップ計算で使用する型定義とバリデーションを提供する。
リモート設定(app_settings / geofence_zones)のJSONフォーマットと互換性を維持。
"""

import math
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ZoneType = Literal["clubhouse", "range", "canteen", "hole_green", "hole_tee"]
TriggerAction = Literal["check_in", "tee_alert", "fnb_prompt", "auto_start"]
TeeName = Literal["Black", "Blue", "White", "Green", "Red"]
Gender = Literal["mens", "womens"]


def _ensure_finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("座標は有限の数値である必要があります")
    return value


class Coordinate(BaseModel):
    """緯度経度(10進数の度)"""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., description="緯度")
    lng: float = Field(..., description="経度")

    @field_validator("lat", "lng")
    @classmethod
    def check_finite(cls, value: float) -> float:
        return _ensure_finite(value)


def _unset_placeholder(value: object) -> object:
    """(0, 0)のプレースホルダー座標を未設定(None)に変換する"""
    if isinstance(value, dict) and value.get("lat") == 0 and value.get("lng") == 0:
        return None
    if isinstance(value, Coordinate) and value.lat == 0 and value.lng == 0:
        return None
    return value


class GeofenceZone(BaseModel):
    """円形のジオフェンスゾーン

    リモート設定から取得したゾーン、またはローカルデータから合成したゾーン。
    """

    id: str = Field(..., description="ゾーンID")
    zone_name: str = Field(..., description="ゾーン名")
    zone_type: ZoneType = Field(..., description="ゾーン種別")
    hole_number: int | None = Field(default=None, description="関連ホール番号")
    latitude: float = Field(..., description="中心の緯度")
    longitude: float = Field(..., description="中心の経度")
    radius_meters: float = Field(..., gt=0, description="半径(メートル)")
    trigger_action: TriggerAction | None = Field(
        default=None, description="トリガーアクション"
    )
    is_active: bool = Field(default=True, description="有効フラグ")

    @field_validator("latitude", "longitude")
    @classmethod
    def check_finite(cls, value: float) -> float:
        return _ensure_finite(value)

    @property
    def center(self) -> Coordinate:
        """ゾーン中心の座標"""
        return Coordinate(lat=self.latitude, lng=self.longitude)


class FeatureSettings(BaseModel):
    """管理者が切り替えるジオフェンス機能のトグル

    リモート設定が取得できない場合はすべて有効として扱う。
    """

    enabled: bool = Field(default=True, description="マスタースイッチ")
    check_in_enabled: bool = Field(default=True, description="チェックイン")
    tee_time_alerts: bool = Field(default=True, description="ティータイムアラート")
    turn_prompt_enabled: bool = Field(default=True, description="ターンのF&B案内")


class RoundContext(BaseModel):
    """ラウンド中の状態(呼び出し側が保持し、判定ごとに渡す)"""

    is_checked_in: bool = False
    is_round_in_progress: bool = False
    current_hole: int = 1
    has_shown_fnb_prompt: bool = False
    tee_time: datetime | None = None


class GeofenceCheckInput(BaseModel):
    """ジオフェンス判定の入力"""

    location: Coordinate
    context: RoundContext = Field(default_factory=RoundContext)
    zones: list[GeofenceZone] = Field(default_factory=list)
    settings: FeatureSettings = Field(default_factory=FeatureSettings)


class NoTrigger(BaseModel):
    type: Literal["none"] = "none"


class CheckInTrigger(BaseModel):
    type: Literal["check_in"] = "check_in"
    zone: GeofenceZone


class TeeAlertTrigger(BaseModel):
    type: Literal["tee_alert"] = "tee_alert"
    zone: GeofenceZone
    minutes_until_tee_time: int


class FnbPromptTrigger(BaseModel):
    type: Literal["fnb_prompt"] = "fnb_prompt"
    zone: GeofenceZone
    hole_number: int


class AutoStartTrigger(BaseModel):
    type: Literal["auto_start"] = "auto_start"
    zone: GeofenceZone


GeofenceTrigger = Annotated[
    NoTrigger | CheckInTrigger | TeeAlertTrigger | FnbPromptTrigger | AutoStartTrigger,
    Field(discriminator="type"),
]


class TeeBox(BaseModel):
    name: TeeName
    yards: int


class HoleInfo(BaseModel):
    """ホールの静的データ

    座標が(0, 0)の場合は未設定(None)として扱う。
    """

    hole_number: int = Field(..., ge=1, le=18, description="ホール番号")
    par: int = Field(..., description="パー")
    handicap_index: int = Field(..., ge=1, le=18, description="ホールの難易度順位")
    tee_boxes: list[TeeBox] = Field(default_factory=list)
    tee_box_coords: Coordinate | None = Field(default=None, description="ティー座標")
    green_coords: Coordinate | None = Field(default=None, description="グリーン座標")

    @field_validator("tee_box_coords", "green_coords", mode="before")
    @classmethod
    def normalize_coords(cls, value: object) -> object:
        return _unset_placeholder(value)


class LocalGeofence(BaseModel):
    """ローカルデータの名前付きジオフェンス"""

    name: str
    coords: Coordinate | None = None
    radius_meters: float = Field(..., gt=0)

    @field_validator("coords", mode="before")
    @classmethod
    def normalize_coords(cls, value: object) -> object:
        return _unset_placeholder(value)


class TeeRating(BaseModel):
    name: TeeName
    yards: int
    mens_rating: float
    mens_slope: int
    womens_rating: float
    womens_slope: int


class CourseData(BaseModel):
    """コースの静的データ(ローカルのフォールバックデータセット)"""

    name: str
    address: str = ""
    phone: str = ""
    par: int
    holes: int = 18
    designer: str = ""
    year_opened: int | None = None
    tee_ratings: list[TeeRating] = Field(default_factory=list)
    geofences: list[LocalGeofence] = Field(default_factory=list)
    hole_data: list[HoleInfo] = Field(default_factory=list)


class HoleScore(BaseModel):
    """1ホールのスコア"""

    hole: int = Field(..., description="ホール番号")
    par: int = Field(..., description="パー")
    score: int | None = Field(default=None, description="打数(未入力はNone)")
    adjusted_score: int | None = Field(
        default=None, description="ESC調整後の打数"
    )


class RoundRecord(BaseModel):
    """完了したラウンドの記録

    ラウンド完了時に一度だけ作成され、以後は変更しない。
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="ユーザーID")
    tee_played: TeeName = Field(..., description="使用ティー")
    gross_score: int = Field(..., description="グロススコア")
    adjusted_score: int = Field(..., description="ESC調整後スコア")
    course_rating: float = Field(..., description="コースレーティング")
    slope_rating: int = Field(..., description="スロープレーティング")
    differential: float | None = Field(default=None, description="ディファレンシャル")
    scores: list[HoleScore] = Field(default_factory=list, description="ホール別スコア")
    duration_seconds: int | None = Field(default=None, description="所要時間(秒)")
    weather_conditions: str | None = Field(default=None, description="天候")
    played_at: datetime = Field(default_factory=datetime.now, description="プレー日時")

    def to_dict(self) -> dict:
        """辞書形式に変換(JSON出力用)

        Returns:
            dict: ラウンド記録の辞書表現
        """
        return self.model_dump(mode="json")


class LoyaltyPointRule(BaseModel):
    enabled: bool = False
    points: int = 0
    description: str = ""


class LoyaltyConfig(BaseModel):
    """ラウンド完了時のポイント付与ルール"""

    round_completed: LoyaltyPointRule = Field(default_factory=LoyaltyPointRule)
    round_under_par: LoyaltyPointRule = Field(default_factory=LoyaltyPointRule)


LoyaltyTransactionType = Literal["round_completed", "round_under_par"]


class LoyaltyTransaction(BaseModel):
    user_id: str
    points: int
    transaction_type: LoyaltyTransactionType
    description: str | None = None
    reference_id: str | None = None


class LocationSample(BaseModel):
    """位置センサーからのサンプル"""

    latitude: float
    longitude: float
    accuracy: float | None = Field(default=None, description="精度(メートル)")
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.latitude, lng=self.longitude)
