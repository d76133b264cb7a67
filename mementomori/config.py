"""
設定読み込み

TOML設定ファイルと環境変数から、起動時に固定される設定を読み込む。
読み込んだ Config は app_bootstrap で各部品へ明示的に渡す（グローバルには置かない）。
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import tomli

from mementomori.infra import paths

# ストレージ切り替えの環境変数（"true" のときだけリモートを選ぶ）
USE_REMOTE_STORAGE_ENV = "MEMENTOMORI_USE_REMOTE"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_ALLOWED_KEYS = {
    "log_level",
    "log_file_enabled",
    "log_file_path",
    "log_file_max_bytes",
    "db_path",
    "use_remote_storage",
}


@dataclass
class Config:
    """
    起動設定（起動時のみ使用、変更不可）。
    """
    log_level: str            # ログレベル（DEBUG, INFO, WARNING, ERROR）
    log_file_enabled: bool    # ファイルログ有効/無効
    log_file_path: str        # ファイルログの保存先パス
    log_file_max_bytes: int   # ファイルログのローテーションサイズ（bytes）
    db_path: str              # キーバリューストア（SQLite）のパス
    use_remote_storage: bool  # リモートストレージを使うか（未実装。false = ローカル）


def _parse_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"{key} must be a boolean")


def use_remote_storage_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[bool]:
    """
    環境変数からストレージ切り替えを読む。

    Returns:
        未設定なら None（TOMLの値を使う）。設定されていれば "true" のときだけ True。
    """
    env = os.environ if environ is None else environ
    raw = env.get(USE_REMOTE_STORAGE_ENV)
    if raw is None:
        return None
    return str(raw).strip().lower() == "true"


def load_config(
    path: str | pathlib.Path | None = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    TOML設定ファイルを読み込む。

    - path 省略時は app root の config/setting.toml を使い、無ければ既定値で起動する。
    - path を明示した場合は、存在しなければエラーにする。
    - 許可されていないキーが含まれる場合はエラーを発生させる。
    """
    # --- 設定ファイルの場所を決める ---
    if path is None:
        config_path = paths.get_default_config_file_path()
        required = False
    else:
        config_path = paths.resolve_path_under_app_root(path)
        required = True

    data: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            data = tomli.load(f)
    elif required:
        raise FileNotFoundError(f"config file not found: {config_path}")

    # 許可されたキーのみを受け付ける
    unknown_keys = sorted(set(data.keys()) - _ALLOWED_KEYS)
    if unknown_keys:
        keys = ", ".join(repr(k) for k in unknown_keys)
        raise ValueError(f"unknown config key(s): {keys} (allowed: {sorted(_ALLOWED_KEYS)})")

    # --- ログ設定 ---
    log_level = str(data.get("log_level", "INFO")).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
    log_file_max_bytes = int(data.get("log_file_max_bytes", 200_000))
    if log_file_max_bytes <= 0:
        raise ValueError("log_file_max_bytes must be a positive integer")
    raw_log_file_path = str(data.get("log_file_path", str(paths.get_app_root_dir() / "logs" / "mementomori.log")))

    # --- ストア ---
    raw_db_path = str(data.get("db_path", str(paths.get_default_db_path())))

    # --- ストレージ切り替え（環境変数が TOML より優先） ---
    use_remote = _parse_bool(data.get("use_remote_storage", False), "use_remote_storage")
    env_use_remote = use_remote_storage_from_env(environ)
    if env_use_remote is not None:
        use_remote = env_use_remote

    return Config(
        log_level=log_level,
        log_file_enabled=_parse_bool(data.get("log_file_enabled", False), "log_file_enabled"),
        log_file_path=str(paths.resolve_path_under_app_root(raw_log_file_path)),
        log_file_max_bytes=log_file_max_bytes,
        db_path=str(paths.resolve_path_under_app_root(raw_db_path)),
        use_remote_storage=use_remote,
    )
