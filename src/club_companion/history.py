"""ラウンド履歴モジュール

完了したラウンドの記録をJSON形式でファイルに保存・読み込みする。
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .handicap import MAX_ROUNDS_CONSIDERED
from .models import RoundRecord

logger = logging.getLogger(__name__)


class HistoryError(Exception):
    """ラウンド履歴ファイルの内容が不正な場合の例外"""

    pass


def save_round_history(rounds: list[RoundRecord], file_path: Path) -> Path:
    """ラウンド履歴をJSONファイルに保存する

    Args:
        rounds: ラウンド記録のリスト
        file_path: 保存先のパス(ディレクトリが存在しない場合は作成)

    Returns:
        Path: 保存したファイルのパス
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    rounds_dict = [r.to_dict() for r in rounds]

    with file_path.open("w", encoding="utf-8") as f:
        json.dump(rounds_dict, f, ensure_ascii=False, indent=2)

    logger.info("ラウンド履歴を保存しました: %s (%d件)", file_path, len(rounds))
    return file_path


def load_round_history(file_path: Path) -> list[RoundRecord]:
    """JSONファイルからラウンド履歴を読み込む

    Args:
        file_path: JSONファイルのパス

    Returns:
        list[RoundRecord]: ラウンド記録のリスト

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        HistoryError: ファイルの内容が不正な場合
    """
    with file_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise HistoryError(f"ラウンド履歴の解析に失敗しました: {file_path}") from e

    try:
        rounds = [RoundRecord(**item) for item in data]
    except (TypeError, ValidationError) as e:
        raise HistoryError(f"ラウンド履歴が不正です: {file_path}") from e

    logger.info("ラウンド履歴を読み込みました: %s (%d件)", file_path, len(rounds))
    return rounds


def append_round(record: RoundRecord, file_path: Path) -> list[RoundRecord]:
    """ラウンド記録を履歴に追加して保存する

    Returns:
        list[RoundRecord]: 追加後の履歴
    """
    rounds = load_round_history(file_path) if file_path.exists() else []
    rounds.append(record)
    save_round_history(rounds, file_path)
    return rounds


def recent_differentials(
    rounds: list[RoundRecord], limit: int = MAX_ROUNDS_CONSIDERED
) -> list[float]:
    """直近のラウンドのディファレンシャルを新しい順に取得する

    ディファレンシャルのないラウンドは除外する。

    Args:
        rounds: ラウンド記録のリスト(順不同)
        limit: 取得する最大件数

    Returns:
        list[float]: ディファレンシャル(新しい順)
    """
    ordered = sorted(rounds, key=lambda r: r.played_at, reverse=True)
    return [r.differential for r in ordered if r.differential is not None][:limit]
