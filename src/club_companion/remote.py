"""リモート設定モジュール

管理画面で設定されたゾーン一覧と機能トグルのスナップショットを読み込む。
スナップショットが存在しない場合はエラーにせず、空のゾーン一覧(ローカルデータへのフォールバック)と
デフォルトの機能設定を返す。
"""

import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from .models import FeatureSettings, GeofenceZone

logger = logging.getLogger(__name__)


class RemoteConfigError(Exception):
    """リモート設定のスナップショットが不正な場合の例外"""

    pass


class RemoteConfig(BaseModel):
    """リモート設定のスナップショット

    フォーマット::

        {
          "geofence_tracking": {"enabled": true, ...},
          "geofence_zones": [{"id": "...", "zone_type": "clubhouse", ...}]
        }
    """

    geofence_tracking: FeatureSettings = Field(default_factory=FeatureSettings)
    geofence_zones: list[GeofenceZone] = Field(default_factory=list)

    @property
    def settings(self) -> FeatureSettings:
        return self.geofence_tracking

    @property
    def zones(self) -> list[GeofenceZone]:
        """有効なゾーンのみ(ゾーン名順)"""
        active = [z for z in self.geofence_zones if z.is_active]
        return sorted(active, key=lambda z: z.zone_name)


def load_remote_config(file_path: Path | None) -> RemoteConfig:
    """リモート設定のスナップショットを読み込む

    拡張子が.yaml/.ymlの場合はYAML、それ以外はJSONとして読み込む。

    Args:
        file_path: スナップショットのパス(Noneまたは存在しない場合はデフォルト)

    Returns:
        RemoteConfig: リモート設定

    Raises:
        RemoteConfigError: ファイルの内容が不正な場合
    """
    if file_path is None or not file_path.exists():
        logger.info("リモート設定がないため、ローカルのコースデータを使用します")
        return RemoteConfig()

    with file_path.open("r", encoding="utf-8") as f:
        try:
            if file_path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RemoteConfigError(f"リモート設定の解析に失敗しました: {file_path}") from e

    try:
        config = RemoteConfig.model_validate(data)
    except ValidationError as e:
        raise RemoteConfigError(f"リモート設定が不正です: {file_path}") from e

    logger.info(
        "リモート設定を読み込みました: %s (ゾーン%d件)", file_path, len(config.zones)
    )
    return config
