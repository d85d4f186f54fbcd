"""CLIエントリーポイントモジュール

コマンドラインからジオフェンス判定とハンディキャップ計算を実行するためのインターフェース。
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from . import __version__
from .config import Settings, get_settings
from .course_data import CourseDataError, load_course_data
from .geo import InvalidCoordinateError, course_distances
from .geofence import evaluate
from .handicap import InvalidRatingError, handicap_index, score_differential
from .history import HistoryError, load_round_history, recent_differentials
from .models import Coordinate, GeofenceCheckInput, RoundContext
from .remote import RemoteConfigError, load_remote_config


def setup_logging(debug: bool = False) -> None:
    """ロギングを設定する

    Args:
        debug: デバッグモードの場合True
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """コマンドライン引数をパースする

    Args:
        argv: 引数リスト(省略時はsys.argv)

    Returns:
        argparse.Namespace: パース済み引数
    """
    parser = argparse.ArgumentParser(
        prog="club-companion",
        description="ジオフェンス判定とWHSハンディキャップ計算を行うツール",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="デバッグモードを有効にする",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    geofence = subparsers.add_parser("geofence", help="現在地のトリガーを判定する")
    geofence.add_argument("lat", type=float, help="緯度")
    geofence.add_argument("lng", type=float, help="経度")
    geofence.add_argument("--checked-in", action="store_true", help="チェックイン済み")
    geofence.add_argument(
        "--round-in-progress", action="store_true", help="ラウンド進行中"
    )
    geofence.add_argument("--hole", type=int, default=1, help="現在のホール番号")
    geofence.add_argument(
        "--fnb-shown", action="store_true", help="F&B案内を表示済み"
    )
    geofence.add_argument(
        "--tee-time",
        type=datetime.fromisoformat,
        default=None,
        help="ティータイム(ISO 8601形式、例: 2025-06-01T08:30)",
    )

    handicap = subparsers.add_parser(
        "handicap", help="ハンディキャップインデックスを計算する"
    )
    handicap.add_argument(
        "differentials",
        type=float,
        nargs="*",
        help="ディファレンシャル(新しい順)。省略時はラウンド履歴から計算",
    )
    handicap.add_argument(
        "--history",
        type=Path,
        default=None,
        help="ラウンド履歴ファイル(デフォルト: 環境変数HISTORY_FILE)",
    )

    differential = subparsers.add_parser(
        "differential", help="スコアディファレンシャルを計算する"
    )
    differential.add_argument("score", type=int, help="ESC調整後スコア")
    differential.add_argument(
        "--rating", type=float, required=True, help="コースレーティング"
    )
    differential.add_argument(
        "--slope", type=float, required=True, help="スロープレーティング"
    )

    distances = subparsers.add_parser("distances", help="主要施設までの距離を表示する")
    distances.add_argument("lat", type=float, help="緯度")
    distances.add_argument("lng", type=float, help="経度")

    return parser.parse_args(argv)


def _run_geofence(args: argparse.Namespace, settings: Settings) -> int:
    course = load_course_data(settings.course_data_file)
    remote = load_remote_config(settings.remote_config_file)

    check = GeofenceCheckInput(
        location=Coordinate(lat=args.lat, lng=args.lng),
        context=RoundContext(
            is_checked_in=args.checked_in,
            is_round_in_progress=args.round_in_progress,
            current_hole=args.hole,
            has_shown_fnb_prompt=args.fnb_shown,
            tee_time=args.tee_time,
        ),
        zones=remote.zones,
        settings=remote.settings,
    )
    trigger = evaluate(check, course=course)
    print(trigger.model_dump_json(indent=2))
    return 0


def _run_handicap(args: argparse.Namespace, settings: Settings) -> int:
    logger = logging.getLogger(__name__)

    if args.differentials:
        differentials = args.differentials
    else:
        history_file = args.history or settings.history_file
        rounds = load_round_history(history_file)
        differentials = recent_differentials(rounds, settings.history_limit)

    index = handicap_index(differentials)
    if index is None:
        logger.warning(
            "ハンディキャップの算出には3ラウンド以上必要です(現在%dラウンド)",
            len(differentials),
        )
        print(json.dumps({"handicap_index": None, "rounds": len(differentials)}))
        return 0

    print(json.dumps({"handicap_index": index, "rounds": len(differentials)}))
    return 0


def _run_differential(args: argparse.Namespace, _settings: Settings) -> int:
    value = score_differential(args.score, args.rating, args.slope)
    print(json.dumps({"differential": value}))
    return 0


def _run_distances(args: argparse.Namespace, settings: Settings) -> int:
    course = load_course_data(settings.course_data_file)
    result = course_distances(Coordinate(lat=args.lat, lng=args.lng), course)
    print(
        json.dumps(
            {
                "clubhouse": result.to_clubhouse,
                "practice_range": result.to_range,
                "canteen": result.to_canteen,
            }
        )
    )
    return 0


COMMANDS = {
    "geofence": _run_geofence,
    "handicap": _run_handicap,
    "differential": _run_differential,
    "distances": _run_distances,
}


def main(argv: list[str] | None = None) -> int:
    """メインエントリーポイント

    Returns:
        int: 終了コード(0: 成功, 1: 失敗)
    """
    args = parse_args(argv)

    # 設定を読み込み
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"設定の読み込みに失敗しました: {e}", file=sys.stderr)
        print("環境変数または.envファイルを確認してください。", file=sys.stderr)
        return 1

    # ロギング設定
    setup_logging(args.debug or settings.debug)
    logger = logging.getLogger(__name__)

    logger.debug("club-companion v%s: %s", __version__, args.command)

    try:
        return COMMANDS[args.command](args, settings)
    except FileNotFoundError as e:
        logger.error("ファイルが見つかりません: %s", e.filename)
        return 1
    except (CourseDataError, RemoteConfigError, HistoryError) as e:
        logger.error("データの読み込みに失敗しました: %s", e)
        return 1
    except (InvalidRatingError, InvalidCoordinateError, ValidationError) as e:
        logger.error("入力値が不正です: %s", e)
        return 1
    except Exception as e:
        logger.exception("予期しないエラーが発生しました: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
