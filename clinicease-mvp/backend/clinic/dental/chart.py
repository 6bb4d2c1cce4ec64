"""
Tooth Chart 数据模型。

固定的牙位 id 空间：
  恒牙 (Permanent)  UR / UL / LR / LL  × 位置 1-8      → 32 颗
  乳牙 (Primary)    PUR / PUL / PLR / PLL × 位置 I-V   → 20 颗

ToothId = 象限前缀 + 位置标签，例如 "UR8"、"LL3"、"PULIII"。

牙位备注集合是一个稀疏 dict {tooth_id: note}：
- 每颗牙最多一条备注（再次设置 → 覆盖）
- 设置空字符串 → 删除该条
- set_note 永远返回新 dict，不修改入参（调用方靠引用是否变化判断有无改动）
"""

ADULT_POSITIONS = ("1", "2", "3", "4", "5", "6", "7", "8")
PRIMARY_POSITIONS = ("I", "II", "III", "IV", "V")

ADULT_QUADRANTS = ("UR", "UL", "LR", "LL")
PRIMARY_QUADRANTS = ("PUR", "PUL", "PLR", "PLL")

POSITIONS_BY_QUADRANT = {
    **{q: ADULT_POSITIONS for q in ADULT_QUADRANTS},
    **{q: PRIMARY_POSITIONS for q in PRIMARY_QUADRANTS},
}

TOOTH_CONDITIONS = (
    "Decayed",
    "Grossly Decayed",
    "Restored",
    "mobile",
    "root stumps",
    "RCT treated",
    "missing",
    "fractured",
    "impacted",
)


def id_for(quadrant: str, position: str) -> str:
    """象限 + 位置 → ToothId。不做校验，传表外的值属于调用方 bug。"""
    return f"{quadrant}{position}"


def _row(right: str, left: str, positions: tuple[str, ...]) -> tuple[str, ...]:
    # 右侧象限从远中到近中（8→1），左侧象限从近中到远中（1→8）
    return tuple(id_for(right, p) for p in reversed(positions)) + tuple(
        id_for(left, p) for p in positions
    )


# ── 展示 / 汇总顺序 ──────────────────────────────────────────────────────────
# 恒牙在前，乳牙在后；上排在前，下排在后；每排先右象限后左象限。
CHART_ROWS = (
    ("permanent", "upper", _row("UR", "UL", ADULT_POSITIONS)),
    ("permanent", "lower", _row("LR", "LL", ADULT_POSITIONS)),
    ("primary", "upper", _row("PUR", "PUL", PRIMARY_POSITIONS)),
    ("primary", "lower", _row("PLR", "PLL", PRIMARY_POSITIONS)),
)

CANONICAL_ORDER = tuple(tooth for _, _, row in CHART_ROWS for tooth in row)
ALL_TOOTH_IDS = frozenset(CANONICAL_ORDER)

_RANK = {tooth: i for i, tooth in enumerate(CANONICAL_ORDER)}


def is_valid_tooth_id(tooth_id: str) -> bool:
    return tooth_id in ALL_TOOTH_IDS


def canonical_sort_key(tooth_id: str) -> int:
    # 表外 id 排到最后，保持稳定
    return _RANK.get(tooth_id, len(CANONICAL_ORDER))


def get_note(notes: dict[str, str], tooth_id: str) -> str:
    return notes.get(tooth_id, "")


def set_note(notes: dict[str, str], tooth_id: str, note: str) -> dict[str, str]:
    """
    返回设置后的新集合。

    note 为空 → 删除 tooth_id 对应条目（不存在也没关系）
    否则     → 新增或覆盖
    """
    updated = dict(notes)
    if note:
        updated[tooth_id] = note
    else:
        updated.pop(tooth_id, None)
    return updated


def ordered_notes(notes: dict[str, str]) -> list[tuple[str, str]]:
    """按 CANONICAL_ORDER 输出 (tooth_id, note)，跳过空备注。"""
    return sorted(
        ((tooth, note) for tooth, note in notes.items() if note),
        key=lambda item: canonical_sort_key(item[0]),
    )


def chart_rows(notes: dict[str, str]) -> list[dict]:
    """
    牙位图控件的数据契约：每排一组 {tooth, note}。
    前端只负责渲染，不关心排序规则。
    """
    return [
        {
            "dentition": dentition,
            "arch": arch,
            "teeth": [{"tooth": tooth, "note": get_note(notes, tooth)} for tooth in row],
        }
        for dentition, arch, row in CHART_ROWS
    ]
