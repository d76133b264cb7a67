"""
ランタイム補助パッケージ。

目的:
    - ログ設定など、起動時に一度だけ行う実行環境の初期化を集約する。
"""

from __future__ import annotations
