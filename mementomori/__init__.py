"""
mementomori パッケージ。

仮寿命日までの残り日数を示し、朝/夜の振り返りを日ごとに記録する。

方針:
    - package import 時に重い初期化や再エクスポートを行わない。
    - 主要な責務は下位 module から明示的に参照する。
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "app_bootstrap",
    "backup",
    "clock",
    "config",
    "date_utils",
    "forms",
    "infra",
    "journal",
    "runtime",
    "schemas",
    "storage",
]
