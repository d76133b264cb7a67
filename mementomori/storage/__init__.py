"""
ストレージ関連パッケージ。

目的:
    - キーバリューストア、ストレージアダプタ、アダプタ選択を1箇所へ集約する。
    - 呼び出し側は StorageAdapter だけに依存し、実装を差し替えられるようにする。
"""

from __future__ import annotations
