"""
BaseIntakeAdapter: 所有 OPD 表单来源 Adapter 的抽象基类。

每个新表单来源只需：
1. 继承 BaseIntakeAdapter
2. 实现 transform()
3. 在 factory.py 的 _build_registry 注册一行

builder 和 view 无需任何改动。
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from ..exceptions import ValidationError
from ..opd.types import MedicineEntry, OpdFormInput, TestEntry
from ..opd.validation import validate_opd_form


# ── 共用取值工具（Adapter 可直接复用） ─────────────────────────────────────

def text(raw: dict, key: str) -> str:
    """取字符串字段：None → ""，数字转字符串，去首尾空白。"""
    value = raw.get(key)
    if value is None:
        return ""
    return str(value).strip()


def flag(raw: dict, key: str) -> bool:
    value = raw.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def items(raw: dict, key: str) -> list[dict]:
    """动态列表字段：只保留 dict 条目，顺序不变。"""
    value = raw.get(key) or []
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class BaseIntakeAdapter(ABC):
    """
    三步流水线：parse → transform → validate

    子类必须实现 transform()；
    parse() 默认按 JSON 解析，validate() 调用 validate_opd_form。
    """

    # 子类声明自己对应的 source 标识符（与 factory 注册键一致）
    source: str = ""

    def __init__(self, raw_body: Any, content_type: str = ""):
        self._raw_body = raw_body
        self._content_type = content_type
        self._parsed: dict = {}

    # ── 提供默认实现，子类可 override ──────────────────────────────────────

    def parse(self) -> dict:
        """
        原始数据（bytes / str / 已解析的 dict）→ dict，赋值给 self._parsed。
        """
        raw = self._raw_body
        if isinstance(raw, (bytes, str)):
            try:
                raw = json.loads(raw)
            except ValueError:
                raise ValidationError(message="Request body is not valid JSON.", code="INVALID_JSON")

        if not isinstance(raw, dict):
            raise ValidationError(message="Request body must be a JSON object.", code="INVALID_JSON")

        self._parsed = raw
        return raw

    # ── 必须实现 ───────────────────────────────────────────────────────────

    @abstractmethod
    def transform(self) -> OpdFormInput:
        """将 self._parsed 转换为 OpdFormInput。"""

    # ── 子类共用的字段映射 ─────────────────────────────────────────────────

    def _medicines(self) -> tuple:
        return tuple(
            MedicineEntry(
                name=text(m, "name"),
                dosage_value=text(m, "dosageValue"),
                dosage_unit=text(m, "dosageUnit") or "mg",
                frequency_value=text(m, "frequencyValue"),
                frequency_unit=text(m, "frequencyUnit") or "daily",
                duration_value=text(m, "durationValue"),
                duration_unit=text(m, "durationUnit") or "Days",
                instructions=text(m, "instructions"),
            )
            for m in items(self._parsed, "medicines")
        )

    def _tests(self) -> tuple:
        return tuple(TestEntry(value=text(t, "value")) for t in items(self._parsed, "testsAdvised"))

    def validate(self, form: OpdFormInput) -> None:
        """字段级错误一次性全部返回，抛出 ValidationError。"""
        errors = validate_opd_form(form)
        if errors:
            raise ValidationError(
                message="Request validation failed.",
                code="VALIDATION_ERROR",
                detail={"errors": errors},
            )

    # ── 对外统一入口 ───────────────────────────────────────────────────────

    def process(self) -> OpdFormInput:
        """parse → transform → validate，返回校验通过的 OpdFormInput。"""
        self.parse()
        form = self.transform()
        self.validate(form)
        return form
