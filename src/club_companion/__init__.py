"""Fox Creek Golf Club コンパニオンアプリのコアロジック

ジオフェンストリガー判定とWHSハンディキャップ計算を提供する。
"""

__version__ = "0.1.0"
