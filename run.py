"""mementomori 起動スクリプト。

開発時の手動起動を想定する。
配布（console script）では [mementomori/entrypoint.py] を使う。
"""

from __future__ import annotations


def main() -> None:
    """CLI を起動する（引数は sys.argv をそのまま渡す）。"""

    from mementomori.entrypoint import main as entry_main

    entry_main()


if __name__ == "__main__":
    main()
