from __future__ import annotations

import unittest

from mementomori.forms import (
    MAX_ANSWER_CHARS,
    validate_evening_form,
    validate_morning_form,
    validate_settings_form,
)
from mementomori.schemas import ValidationError
from tests._fixtures import clock_at


class FormTests(unittest.TestCase):
    def test_answer_length_limit(self) -> None:
        ok = validate_morning_form({"usage": "x" * MAX_ANSWER_CHARS, "regret": "y"})
        self.assertEqual(ok.to_answers()["freeText"], "")

        with self.assertRaises(ValidationError) as ctx:
            validate_evening_form({"mostVital": "a", "waste": "b", "tomorrow": "c", "freeText": "z" * 2001})
        self.assertEqual(ctx.exception.errors[0].message, "2000文字以内で入力してください")

    def test_empty_answers_pass_the_form(self) -> None:
        # 必須チェックは保存時のスキーマ検証で行う
        form = validate_evening_form({})
        self.assertEqual(form.to_answers(), {"mostVital": "", "waste": "", "tomorrow": "", "freeText": ""})

    def test_settings_form(self) -> None:
        clock = clock_at(2024, 12, 31)

        form = validate_settings_form({"targetDate": "2024-12-31", "passcode": ""}, clock=clock)
        settings = form.to_settings()
        self.assertEqual(settings.target_date, "2024-12-31")
        self.assertIsNone(settings.passcode)

        cases = {
            "": "仮寿命日を入力してください",
            "2025-02-30": "有効な日付を入力してください（YYYY-MM-DD）",
            "2024-12-30": "仮寿命日は今日以降の日付である必要があります",
        }
        for value, message in cases.items():
            with self.subTest(value=value):
                with self.assertRaises(ValidationError) as ctx:
                    validate_settings_form({"targetDate": value}, clock=clock)
                self.assertEqual(ctx.exception.errors[0].message, message)


if __name__ == "__main__":
    unittest.main()
