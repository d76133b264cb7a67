"""
保存先パスの解決

アプリのルートディレクトリ（app root）配下に config / data / logs を置く。

方針:
    - app root は環境変数 MEMENTOMORI_HOME を優先し、無ければ ~/.mementomori とする。
    - get_*_dir はディレクトリを作成してから返す（初回起動時の事故防止）。
"""

from __future__ import annotations

import os
from pathlib import Path

APP_HOME_ENV = "MEMENTOMORI_HOME"
APP_DIR_NAME = ".mementomori"


def get_app_root_dir() -> Path:
    """app root を返す（作成はしない）。"""

    override = str(os.environ.get(APP_HOME_ENV) or "").strip()
    if override:
        return Path(override).expanduser().resolve()
    return (Path.home() / APP_DIR_NAME).resolve()


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """設定ファイルの置き場所。"""

    return _ensure_dir(get_app_root_dir() / "config")


def get_data_dir() -> Path:
    """データ（キーバリューストア）の置き場所。"""

    return _ensure_dir(get_app_root_dir() / "data")


def get_logs_dir() -> Path:
    """ログファイルの置き場所。"""

    return _ensure_dir(get_app_root_dir() / "logs")


def get_default_config_file_path() -> Path:
    """既定の設定ファイルパス（config/setting.toml）。"""

    return get_app_root_dir() / "config" / "setting.toml"


def get_default_db_path() -> Path:
    """既定のストアファイルパス（data/mementomori.db）。"""

    return get_app_root_dir() / "data" / "mementomori.db"


def resolve_path_under_app_root(path: str | Path) -> Path:
    """相対パスなら app root 基準で解決する（絶対パスはそのまま）。"""

    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_app_root_dir() / p).resolve()
