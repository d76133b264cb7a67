"""
mementomori.cli

仮寿命日までの残り日数の表示と、朝/夜の記録、バックアップを扱うCLI。

方針:
    - 画面の代わりにサブコマンドを用意する（status / settings / morning / evening / show / log / export / import / clear）。
    - 部品の組み立ては app_bootstrap に任せ、ここでは入出力だけを扱う。
    - 検証エラーはフィールドごとに標準エラーへ出し、終了コード 1 を返す。
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from mementomori.app_bootstrap import AppRuntime, bootstrap_app_runtime
from mementomori.backup import BackupFileError, export_to_file, load_backup_file
from mementomori.date_utils import format_for_display, is_valid_date_string
from mementomori.forms import validate_evening_form, validate_morning_form, validate_settings_form
from mementomori.journal import JournalService
from mementomori.schemas import DayRecord, ValidationError, dump_model

# 一覧表示での本文の最大文字数
_PREVIEW_CHARS = 100


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    CLI 引数をパースする。
    """
    p = argparse.ArgumentParser(prog="mementomori", description="Memento Mori Timer")
    p.add_argument("--config", default=None, help="Path to setting.toml.")
    sub = p.add_subparsers(dest="command", required=True)

    # --- 残り日数 ---
    p_status = sub.add_parser("status", help="Show remaining days and today's entries.")
    p_status.add_argument("--json", action="store_true", help="Output JSON.")

    # --- 設定 ---
    p_settings = sub.add_parser("settings", help="Show or change settings.")
    settings_sub = p_settings.add_subparsers(dest="settings_command", required=True)
    settings_sub.add_parser("show", help="Show current settings.")
    p_set = settings_sub.add_parser("set", help="Set the target date.")
    p_set.add_argument("--target-date", required=True, help="YYYY-MM-DD (today or later).")
    p_set.add_argument("--passcode", default=None, help="Omit to keep the current passcode; \"\" clears it.")

    # --- 朝/夜の記録 ---
    p_morning = sub.add_parser("morning", help="Save the morning entry.")
    p_morning.add_argument("--usage", default="", help="この1日を、何に使うか？")
    p_morning.add_argument("--regret", default="", help="後悔しないか？")
    p_morning.add_argument("--free-text", default="")
    p_morning.add_argument("--date", default=None, help="YYYY-MM-DD (default: today in JST).")

    p_evening = sub.add_parser("evening", help="Save the evening entry.")
    p_evening.add_argument("--most-vital", default="", help="最も命を有効に使ったこと")
    p_evening.add_argument("--waste", default="", help="無駄にしたこと")
    p_evening.add_argument("--tomorrow", default="", help="明日への改善点")
    p_evening.add_argument("--free-text", default="")
    p_evening.add_argument("--date", default=None, help="YYYY-MM-DD (default: today in JST).")

    # --- 閲覧 ---
    p_show = sub.add_parser("show", help="Show the entries of one day.")
    p_show.add_argument("date", nargs="?", default=None, help="YYYY-MM-DD (default: today in JST).")
    p_show.add_argument("--json", action="store_true", help="Output JSON.")

    p_log = sub.add_parser("log", help="List entries, newest first.")
    p_log.add_argument("--search", default="", help="Case-insensitive text search over answers.")
    p_log.add_argument("--filter", default="all", choices=["all", "complete", "incomplete"])

    # --- バックアップ ---
    p_export = sub.add_parser("export", help="Write a JSON backup.")
    p_export.add_argument("path", nargs="?", default=".", help="File or directory (default: current directory).")

    p_import = sub.add_parser("import", help="Restore from a JSON backup (overwrites).")
    p_import.add_argument("path")
    p_import.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")

    p_clear = sub.add_parser("clear", help="Delete all data (irreversible).")
    p_clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation.")
    return p.parse_args(argv)


def _confirm(message: str, input_fn: Callable[[str], str]) -> bool:
    answer = input_fn(f"{message} [y/N]: ")
    return answer.strip().lower() in ("y", "yes")


def _print_validation_error(exc: ValidationError) -> None:
    print("入力内容に誤りがあります:", file=sys.stderr)
    for err in exc.errors:
        print(f"  {err.loc or '(root)'}: {err.message}", file=sys.stderr)


def _preview(text_in: str) -> str:
    s = " ".join(str(text_in or "").split())
    return s if len(s) <= _PREVIEW_CHARS else s[:_PREVIEW_CHARS] + "…"


def _print_day(record: DayRecord) -> None:
    print(format_for_display(record.date) if is_valid_date_string(record.date) else record.date)
    if record.morning is not None:
        a = record.morning.answers
        print("  [朝]")
        print(f"    何に使うか: {a.usage}")
        print(f"    後悔しないか: {a.regret}")
        if a.free_text:
            print(f"    自由記述: {a.free_text}")
    else:
        print("  [朝] 未記入")
    if record.evening is not None:
        b = record.evening.answers
        print("  [夜]")
        print(f"    最も命を有効に使ったこと: {b.most_vital}")
        print(f"    無駄にしたこと: {b.waste}")
        print(f"    明日への改善点: {b.tomorrow}")
        if b.free_text:
            print(f"    自由記述: {b.free_text}")
    else:
        print("  [夜] 未記入")


async def _cmd_status(service: JournalService, args: argparse.Namespace) -> int:
    cd = await service.countdown()
    if bool(args.json):
        payload = {
            "today": cd.today,
            "targetDate": cd.target_date,
            "remainingDays": cd.remaining_days,
            "expired": cd.expired,
            "morning": cd.has_morning,
            "evening": cd.has_evening,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    if cd.target_date is None:
        print("まず仮寿命日を設定してください: mementomori settings set --target-date YYYY-MM-DD")
        return 0
    print(f"今日: {format_for_display(cd.today)}")
    if cd.remaining_days is None:
        print(f"仮寿命日の形式が不正です: {cd.target_date}")
    elif cd.expired:
        print(f"仮寿命日（{format_for_display(cd.target_date)}）を迎えました")
    else:
        print(f"仮寿命日（{format_for_display(cd.target_date)}）まで あと {cd.remaining_days:,} 日")
    print(f"朝の記録: {'記入済み' if cd.has_morning else '未記入'} / 夜の記録: {'記入済み' if cd.has_evening else '未記入'}")
    return 0


async def _cmd_settings(service: JournalService, args: argparse.Namespace) -> int:
    if args.settings_command == "show":
        settings = await service.get_settings()
        if not settings.target_date:
            print("仮寿命日: 未設定")
        else:
            print(f"仮寿命日: {settings.target_date}")
        print(f"パスコード: {'設定あり' if settings.passcode else 'なし'}")
        return 0

    # --- --passcode 省略時は現在のパスコードを引き継ぐ（"" で解除） ---
    passcode = args.passcode
    if passcode is None:
        passcode = (await service.get_settings()).passcode
    form = validate_settings_form(
        {"targetDate": args.target_date, "passcode": passcode},
        clock=service.clock,
    )
    await service.save_settings(form.to_settings())
    print("設定を保存しました")
    return 0


def _check_date_option(value: Optional[str]) -> None:
    if value is not None and not is_valid_date_string(value):
        raise ValueError(f"有効な日付を入力してください（YYYY-MM-DD）: {value}")


async def _cmd_morning(service: JournalService, args: argparse.Namespace) -> int:
    _check_date_option(args.date)
    form = validate_morning_form({"usage": args.usage, "regret": args.regret, "freeText": args.free_text})
    record = await service.save_morning(form.to_answers(), date=args.date)
    print(f"朝の記録を保存しました: {record.date}")
    return 0


async def _cmd_evening(service: JournalService, args: argparse.Namespace) -> int:
    _check_date_option(args.date)
    form = validate_evening_form(
        {
            "mostVital": args.most_vital,
            "waste": args.waste,
            "tomorrow": args.tomorrow,
            "freeText": args.free_text,
        }
    )
    record = await service.save_evening(form.to_answers(), date=args.date)
    print(f"夜の記録を保存しました: {record.date}")
    return 0


async def _cmd_show(service: JournalService, args: argparse.Namespace) -> int:
    record = await service.get_day_record(args.date or service.today())
    if bool(args.json):
        print(json.dumps(dump_model(record), ensure_ascii=False, indent=2))
    else:
        _print_day(record)
    return 0


async def _cmd_log(service: JournalService, args: argparse.Namespace) -> int:
    records = await service.search_day_records(str(args.search or ""), args.filter)
    counts = await service.count_by_status()
    print(f"全て: {counts['all']} / 記入済み: {counts['complete']} / 未記入あり: {counts['incomplete']}")
    if not records:
        print("記録がありません")
        return 0
    for record in records:
        mark = "済" if record.is_complete else "未"
        line = f"[{mark}] {record.date}"
        if record.morning is not None:
            line += f"  朝: {_preview(record.morning.answers.usage)}"
        if record.evening is not None:
            line += f"  夜: {_preview(record.evening.answers.most_vital)}"
        print(line)
    return 0


async def _cmd_export(service: JournalService, args: argparse.Namespace) -> int:
    path = await export_to_file(service, Path(args.path))
    print(f"エクスポートしました: {path}")
    return 0


async def _cmd_import(service: JournalService, args: argparse.Namespace, input_fn: Callable[[str], str]) -> int:
    # --- 先にファイルを検証し、取り込めないものは確認せずにエラーにする ---
    data = load_backup_file(Path(args.path))
    if not bool(args.yes) and not _confirm("既存のデータは上書きされます。インポートを実行しますか？", input_fn):
        print("中止しました")
        return 0
    await service.import_data(data)
    print(f"データをインポートしました（記録 {len(data.records)} 件）")
    return 0


async def _cmd_clear(service: JournalService, args: argparse.Namespace, input_fn: Callable[[str], str]) -> int:
    if not bool(args.yes):
        # --- 元に戻せないので2回確認する ---
        if not _confirm("全てのデータが削除されます。本当に実行しますか？", input_fn):
            print("中止しました")
            return 0
        if not _confirm("この操作は元に戻せません。本当に削除しますか？", input_fn):
            print("中止しました")
            return 0
    await service.clear_all_data()
    print("データを削除しました")
    return 0


async def _dispatch(runtime: AppRuntime, args: argparse.Namespace, input_fn: Callable[[str], str]) -> int:
    service = runtime.service
    handlers: dict[str, Any] = {
        "status": _cmd_status,
        "settings": _cmd_settings,
        "morning": _cmd_morning,
        "evening": _cmd_evening,
        "show": _cmd_show,
        "log": _cmd_log,
        "export": _cmd_export,
    }
    if args.command in handlers:
        return await handlers[args.command](service, args)
    if args.command == "import":
        return await _cmd_import(service, args, input_fn)
    if args.command == "clear":
        return await _cmd_clear(service, args, input_fn)
    raise ValueError(f"unknown command: {args.command}")


def main(
    argv: Optional[List[str]] = None,
    *,
    runtime: Optional[AppRuntime] = None,
    input_fn: Callable[[str], str] = input,
) -> int:
    """
    CLI エントリポイント。

    Args:
        argv: 引数（省略時は sys.argv）。
        runtime: 組み立て済みの部品（テスト用）。省略時は設定から組み立てて、終了時に閉じる。
        input_fn: 確認プロンプトの入力関数。
    """
    args = _parse_args(argv)

    owns_runtime = runtime is None
    try:
        if runtime is None:
            runtime = bootstrap_app_runtime(args.config)
    except (OSError, ValueError, NotImplementedError, SQLAlchemyError) as exc:
        print(f"[mementomori] 起動に失敗しました: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_dispatch(runtime, args, input_fn))
    except ValidationError as exc:
        _print_validation_error(exc)
        return 1
    except BackupFileError as exc:
        print(f"[mementomori] {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"[mementomori] {exc}", file=sys.stderr)
        return 1
    except SQLAlchemyError as exc:
        print(f"[mementomori] データストアの操作に失敗しました: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"[mementomori] ファイル操作に失敗しました: {exc}", file=sys.stderr)
        return 1
    finally:
        if owns_runtime:
            runtime.close()


if __name__ == "__main__":
    raise SystemExit(main())
