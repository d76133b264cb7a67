"""配布向けのエントリポイント。

設計意図:
- console script / PyInstaller から参照できる「単一の起動点」を用意する
- ここでは *保存先ディレクトリ* を確実に作成し、起動に必要な前提を揃える
"""

from __future__ import annotations

import sys


def main() -> None:
    """CLI を起動する。"""

    # --- 先にディレクトリを確実に作る（初回起動時の事故防止） ---
    from mementomori.infra import paths

    paths.get_config_dir()
    paths.get_data_dir()
    paths.get_logs_dir()

    from mementomori.cli import main as cli_main

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
