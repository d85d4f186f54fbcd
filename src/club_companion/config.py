"""設定管理モジュール

環境変数から設定を読み込み、アプリケーション全体で使用する設定を提供する。
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定

    環境変数または.envファイルから設定を読み込む。
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="デバッグモード(true: デバッグ情報出力)",
    )

    # コースデータ(省略時は同梱のデータセットを使用)
    course_data_file: Path | None = Field(
        default=None,
        description="コースデータ(YAML)のパス",
    )

    # リモート設定のスナップショット(省略時はローカルデータにフォールバック)
    remote_config_file: Path | None = Field(
        default=None,
        description="ゾーン・機能設定のスナップショット(JSON/YAML)のパス",
    )

    # ラウンド履歴
    history_file: Path = Field(
        default=Path("data/round_history.json"),
        description="ラウンド履歴ファイルのパス",
    )
    history_limit: int = Field(
        default=20,
        ge=1,
        description="ハンディキャップ計算に使用する直近ラウンド数",
    )

    # レーティング
    gender: Literal["mens", "womens"] = Field(
        default="mens",
        description="使用するレーティング(mens / womens)",
    )


def get_settings() -> Settings:
    """設定インスタンスを取得する

    Returns:
        Settings: アプリケーション設定
    """
    return Settings()
