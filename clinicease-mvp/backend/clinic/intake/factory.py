"""
OPD 表单来源 → Adapter。

URL 里的 <source> 决定用哪套字段规则解析请求体：
  general → 普通门诊（没有牙位图和影像）
  dental  → 牙科门诊
"""

from typing import Any

from ..exceptions import ValidationError
from .base import BaseIntakeAdapter


# ── 注册表 ──────────────────────────────────────────────────────────────────
# key: source 字符串（来自 URL：/api/opd/<source>/summary/）
# value: Adapter 类（未实例化）
def _build_registry() -> dict[str, type[BaseIntakeAdapter]]:
    # adapters 依赖 opd 包，用到时再 import
    from .adapters import DentalOpdAdapter, GeneralOpdAdapter

    return {
        "general": GeneralOpdAdapter,
        "dental":  DentalOpdAdapter,
    }


def get_adapter(source: str, raw_body: Any, content_type: str = "") -> BaseIntakeAdapter:
    """
    根据 source 返回已实例化的 Adapter。

    Args:
        source:       表单来源标识，"general" 或 "dental"
        raw_body:     请求体（bytes / str / 已解析的 dict）
        content_type: HTTP Content-Type，Adapter 内部可按需使用

    Raises:
        ValidationError: 未知的 source
    """
    registry = _build_registry()
    adapter_cls = registry.get(source)

    if adapter_cls is None:
        raise ValidationError(
            message=f"Unknown OPD form source: {source!r}.",
            code="UNKNOWN_SOURCE",
            detail={"known_sources": list(registry.keys())},
        )

    return adapter_cls(raw_body=raw_body, content_type=content_type)
