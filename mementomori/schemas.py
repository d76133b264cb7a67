"""
日次記録・設定・エクスポートデータの Pydantic モデル

保存（キーバリューストア）とバックアップ（JSON ファイル）の両方で使う形を定義する。
外部から入ってくる値（インポートファイル、壊れているかもしれない保存値）は
必ずここの validate_* を通してから扱う。

方針:
    - 属性名は snake_case、入出力の JSON キーは camelCase（alias）にする。
    - 保存/エクスポートは alias + None 省略でダンプし、既存バックアップと同じ形を保つ。
    - 未知のキーは無視する（古い/新しいバックアップを読めるように）。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

# 必須回答欄が空のときのメッセージ
REQUIRED_ANSWER_MESSAGE = "記入が必要です"

# 仮寿命日が空のときのメッセージ
REQUIRED_TARGET_DATE_MESSAGE = "仮寿命日を設定してください"


def _require_text(value: str, message: str) -> str:
    """空文字を弾く（空白だけの文字列は入力ありとして扱う）。"""
    if len(value) < 1:
        raise ValueError(message)
    return value


class _SchemaModel(BaseModel):
    """スキーマ共通設定。"""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        # --- 構築済みインスタンスも保存前に必ず検証し直す ---
        revalidate_instances="always",
    )


# --- 設定 ---


class Settings(_SchemaModel):
    """
    アプリ設定（1インストールにつき1件）。

    未設定時の既定値（target_date が空）はこのモデルでは不正値になる。
    既定値が必要な呼び出し側は JournalService.get_settings を使う。
    """

    target_date: str = Field(alias="targetDate")  # 仮寿命日（YYYY-MM-DD）
    passcode: Optional[str] = None

    @field_validator("target_date")
    @classmethod
    def _validate_target_date(cls, v: str) -> str:
        return _require_text(v, REQUIRED_TARGET_DATE_MESSAGE)


# --- 朝の記録 ---


class MorningAnswers(_SchemaModel):
    """朝の問いへの回答。"""

    usage: str  # この1日を、何に使うか？
    regret: str  # 後悔しないか？
    free_text: Optional[str] = Field(default=None, alias="freeText")

    @field_validator("usage", "regret")
    @classmethod
    def _validate_required(cls, v: str) -> str:
        return _require_text(v, REQUIRED_ANSWER_MESSAGE)


class MorningRecord(_SchemaModel):
    """朝の記録。"""

    date: str  # YYYY-MM-DD
    answers: MorningAnswers
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


# --- 夜の記録 ---


class EveningAnswers(_SchemaModel):
    """夜の問いへの回答。"""

    most_vital: str = Field(alias="mostVital")  # 最も命を有効に使ったこと
    waste: str  # 無駄にしたこと
    tomorrow: str  # 明日への改善点
    free_text: Optional[str] = Field(default=None, alias="freeText")

    @field_validator("most_vital", "waste", "tomorrow")
    @classmethod
    def _validate_required(cls, v: str) -> str:
        return _require_text(v, REQUIRED_ANSWER_MESSAGE)


class EveningRecord(_SchemaModel):
    """夜の記録。"""

    date: str  # YYYY-MM-DD
    answers: EveningAnswers
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


# --- 1日の記録 / 全データ ---


class DayRecord(_SchemaModel):
    """1日の記録（朝と夜をまとめたもの）。date で一意。"""

    date: str  # YYYY-MM-DD
    morning: Optional[MorningRecord] = None
    evening: Optional[EveningRecord] = None

    @property
    def is_complete(self) -> bool:
        """朝と夜の両方が記入済みか。"""
        return self.morning is not None and self.evening is not None


class AppData(_SchemaModel):
    """エクスポート/インポートの単位。"""

    settings: Settings
    records: List[DayRecord]
    version: str


# --- 検証エラー ---


@dataclass(frozen=True)
class FieldError:
    """不正なフィールド1件。loc はドット区切り（例: answers.usage, records.0.date）。"""

    loc: str
    message: str


class ValidationError(ValueError):
    """
    スキーマ検証エラー。

    どのフィールドが不正かを errors に列挙して保持する。
    書き込み系の操作はこの例外を送出した時点で何も保存していない。
    """

    def __init__(self, model: str, errors: List[FieldError]) -> None:
        self.model = model
        self.errors = list(errors)
        detail = "; ".join(f"{e.loc or '(root)'}: {e.message}" for e in self.errors)
        super().__init__(f"{model} validation failed: {detail}")

    @classmethod
    def from_pydantic(cls, model: str, exc: pydantic.ValidationError) -> "ValidationError":
        """pydantic の ValidationError から変換する。"""
        errors: List[FieldError] = []
        for item in exc.errors():
            loc = ".".join(str(part) for part in item.get("loc", ()))
            msg = str(item.get("msg", ""))
            # --- field_validator の ValueError は "Value error, " が前置される ---
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            errors.append(FieldError(loc=loc, message=msg))
        return cls(model, errors)


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _validate(model_cls: Type[_ModelT], obj: Any) -> _ModelT:
    try:
        return model_cls.model_validate(obj)
    except pydantic.ValidationError as exc:
        raise ValidationError.from_pydantic(model_cls.__name__, exc) from exc


def validate_settings(obj: Any) -> Settings:
    """任意の値を Settings として検証する。"""
    return _validate(Settings, obj)


def validate_morning_record(obj: Any) -> MorningRecord:
    """任意の値を MorningRecord として検証する。"""
    return _validate(MorningRecord, obj)


def validate_evening_record(obj: Any) -> EveningRecord:
    """任意の値を EveningRecord として検証する。"""
    return _validate(EveningRecord, obj)


def validate_day_record(obj: Any) -> DayRecord:
    """任意の値を DayRecord として検証する。"""
    return _validate(DayRecord, obj)


def validate_app_data(obj: Any) -> AppData:
    """
    任意の値を AppData として検証する（全体で成功/失敗のどちらか）。

    records 内に1件でも不正な記録があれば全体を不正とする。
    """
    return _validate(AppData, obj)


def parse_day_records_lenient(items: Iterable[Any]) -> List[DayRecord]:
    """
    記録の配列を1件ずつ検証し、不正なものを捨てて日付昇順で返す。

    NOTE:
        - 保存値の読み出し用。古い/壊れた1件のためにアプリ全体を使えなくしない。
    """
    out: List[DayRecord] = []
    for item in items:
        try:
            out.append(DayRecord.model_validate(item))
        except pydantic.ValidationError:
            continue
    out.sort(key=lambda r: r.date)
    return out


def dump_model(model: BaseModel) -> dict[str, Any]:
    """保存/エクスポート用に JSON 化できる dict へダンプする（camelCase、None 省略）。"""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_records(records: Iterable[DayRecord]) -> list[dict[str, Any]]:
    """記録の配列をダンプする。"""
    return [dump_model(r) for r in records]
