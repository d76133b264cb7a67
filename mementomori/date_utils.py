"""
日付ユーティリティ

日付はすべて Asia/Tokyo（UTC+09:00、夏時間なし）の暦日として扱う。
「今日」は実行環境のローカルタイムゾーンではなく、常に JST で決める。

注意:
- 日数の差は暦日（datetime.date）同士で計算する（時刻成分を持ち込まない）。
- 「今日」は ClockService から取る。引数 clock を省略すると実時間を使う。
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from mementomori.clock import ClockService

# 固定タイムゾーン（Asia/Tokyo は夏時間が無いので固定オフセットで表せる）
JST = timezone(timedelta(hours=9), "JST")

_DATE_STRING_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# 表示用の曜日（date.weekday(): 月曜=0）
_WEEKDAYS_JA = ("月", "火", "水", "木", "金", "土", "日")


def _now_jst(clock: Optional[ClockService]) -> datetime:
    c = clock if clock is not None else ClockService()
    return datetime.fromtimestamp(c.now_domain_utc_ts(), tz=JST)


def today(clock: Optional[ClockService] = None) -> str:
    """JST での今日の日付を YYYY-MM-DD で返す。"""

    return _now_jst(clock).date().isoformat()


def current_timestamp(clock: Optional[ClockService] = None) -> str:
    """
    現在時刻を ISO 8601（JST、秒精度）で返す。

    例:
    - "2024-12-31T21:05:00+09:00"

    記録の createdAt / updatedAt に使う。
    """

    return _now_jst(clock).isoformat(timespec="seconds")


def is_leap_year(year: int) -> bool:
    """うるう年かどうか（4で割り切れて100で割り切れない、または400で割り切れる）。"""

    return (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0)


def is_valid_date(year: int, month: int, day: int) -> bool:
    """年月日が暦として存在するかを返す。"""

    if month < 1 or month > 12:
        return False
    days_in_month = (31, 29 if is_leap_year(year) else 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
    return 1 <= day <= days_in_month[month - 1]


def is_valid_date_string(text_in: str) -> bool:
    """
    YYYY-MM-DD 形式で、かつ暦として存在する日付かを返す。

    例:
    - "2024-02-29" -> True（うるう年）
    - "2023-02-29" -> False
    - "2024-2-1" -> False（ゼロ埋め必須）
    """

    if not isinstance(text_in, str) or not _DATE_STRING_RE.match(text_in):
        return False
    year, month, day = (int(part) for part in text_in.split("-"))
    # --- year=0000 は date で表せないので弾く ---
    if year < 1:
        return False
    return is_valid_date(year, month, day)


def parse_civil_date(text_in: str) -> date:
    """
    YYYY-MM-DD を暦日（date）へ変換する。

    Raises:
        ValueError: 形式不正、または存在しない日付。
    """

    if not is_valid_date_string(text_in):
        raise ValueError(f"invalid date string: {text_in!r} (expected YYYY-MM-DD)")
    year, month, day = (int(part) for part in text_in.split("-"))
    return date(year, month, day)


def remaining_days(target_date: str, clock: Optional[ClockService] = None) -> int:
    """
    仮寿命日までの残り日数（暦日の差）を返す。

    当日は 0、過ぎていれば負数になる（0以下 = 期限切れ）。
    """

    return (parse_civil_date(target_date) - parse_civil_date(today(clock))).days


def elapsed_days(start_date: str, clock: Optional[ClockService] = None) -> int:
    """開始日からの経過日数を返す（未来の開始日は0）。"""

    return max(0, (parse_civil_date(today(clock)) - parse_civil_date(start_date)).days)


def progress(start_date: str, target_date: str, clock: Optional[ClockService] = None) -> float:
    """
    開始日から仮寿命日までの進捗率（0〜100）を返す。

    経過 / (経過 + 残り) * 100。分母が0以下なら0を返す。
    """

    # --- 同じ「今日」で計算する（日付を跨いだ瞬間の食い違いを防ぐ） ---
    fixed = ClockService(pinned_utc_ts=(clock or ClockService()).now_domain_utc_ts())
    elapsed = elapsed_days(start_date, fixed)
    total = elapsed + remaining_days(target_date, fixed)
    if total <= 0:
        return 0.0
    return min(100.0, max(0.0, elapsed / total * 100.0))


def format_for_display(text_in: str) -> str:
    """
    日付を表示用の文字列にする。

    例:
    - "2024-01-05" -> "2024年1月5日（金）"
    """

    d = parse_civil_date(text_in)
    return f"{d.year}年{d.month}月{d.day}日（{_WEEKDAYS_JA[d.weekday()]}）"
