"""
入力フォームの検証

ユーザー入力（CLI など）をストレージ用モデルへ渡す前の検証。
ここでは文字数と日付の妥当性だけを見る。必須回答の空チェックは schemas 側で行う
（空のまま送られた回答は保存時に ValidationError になる）。
"""

from __future__ import annotations

from typing import Any, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from mementomori.clock import ClockService
from mementomori.date_utils import is_valid_date_string, today
from mementomori.schemas import Settings, ValidationError

# 1欄あたりの最大文字数
MAX_ANSWER_CHARS = 2000

_TOO_LONG_MESSAGE = f"{MAX_ANSWER_CHARS}文字以内で入力してください"


def _check_length(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > MAX_ANSWER_CHARS:
        raise ValueError(_TOO_LONG_MESSAGE)
    return v


class _FormModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MorningForm(_FormModel):
    """朝の記録フォーム。"""

    usage: str = ""
    regret: str = ""
    free_text: Optional[str] = Field(default="", alias="freeText")

    @field_validator("usage", "regret", "free_text")
    @classmethod
    def _validate_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_length(v)

    def to_answers(self) -> dict[str, Any]:
        """MorningAnswers 相当の dict（camelCase）を返す。"""
        return {"usage": self.usage, "regret": self.regret, "freeText": self.free_text or ""}


class EveningForm(_FormModel):
    """夜の記録フォーム。"""

    most_vital: str = Field(default="", alias="mostVital")
    waste: str = ""
    tomorrow: str = ""
    free_text: Optional[str] = Field(default="", alias="freeText")

    @field_validator("most_vital", "waste", "tomorrow", "free_text")
    @classmethod
    def _validate_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_length(v)

    def to_answers(self) -> dict[str, Any]:
        """EveningAnswers 相当の dict（camelCase）を返す。"""
        return {
            "mostVital": self.most_vital,
            "waste": self.waste,
            "tomorrow": self.tomorrow,
            "freeText": self.free_text or "",
        }


class SettingsForm(_FormModel):
    """
    設定フォーム。

    仮寿命日は「存在する日付」かつ「今日以降」であること。
    今日の判定には検証コンテキストの clock を使う（validate_settings_form 経由で渡す）。
    """

    target_date: str = Field(alias="targetDate")
    passcode: Optional[str] = None

    @field_validator("target_date")
    @classmethod
    def _validate_target_date(cls, v: str, info: ValidationInfo) -> str:
        if len(v) < 1:
            raise ValueError("仮寿命日を入力してください")
        if not is_valid_date_string(v):
            raise ValueError("有効な日付を入力してください（YYYY-MM-DD）")
        clock = (info.context or {}).get("clock")
        if v < today(clock):
            raise ValueError("仮寿命日は今日以降の日付である必要があります")
        return v

    def to_settings(self) -> Settings:
        """保存用の Settings を返す（空のパスコードは未設定にする）。"""
        return Settings(target_date=self.target_date, passcode=self.passcode or None)


def _validate_form(model_cls: type[_FormModel], data: Any, clock: Optional[ClockService] = None) -> Any:
    try:
        return model_cls.model_validate(data, context={"clock": clock})
    except pydantic.ValidationError as exc:
        raise ValidationError.from_pydantic(model_cls.__name__, exc) from exc


def validate_morning_form(data: Any) -> MorningForm:
    return _validate_form(MorningForm, data)


def validate_evening_form(data: Any) -> EveningForm:
    return _validate_form(EveningForm, data)


def validate_settings_form(data: Any, clock: Optional[ClockService] = None) -> SettingsForm:
    """設定フォームを検証する（今日以降の判定に clock を使う）。"""
    return _validate_form(SettingsForm, data, clock)
