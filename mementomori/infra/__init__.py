"""
インフラ補助パッケージ。

目的:
    - 保存先ディレクトリなど、実行環境依存のパス解決を集約する。
"""

from __future__ import annotations
