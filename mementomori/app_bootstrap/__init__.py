"""
アプリ起動配線パッケージ。

目的:
    - 設定 -> ログ -> ストア -> アダプタ -> サービス の組み立てを CLI から分離する。
    - 生成したオブジェクトはグローバルに置かず、AppRuntime として呼び出し側へ返す。
"""

from __future__ import annotations

from mementomori.app_bootstrap.config_bootstrap import AppRuntime, bootstrap_app_runtime

__all__ = [
    "AppRuntime",
    "bootstrap_app_runtime",
]
