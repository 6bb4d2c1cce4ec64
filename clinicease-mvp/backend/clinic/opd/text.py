"""
文本规范化规则。builder / intake / printing 共用，只在这里定义一次。

空字符串原样返回（仍为空），由调用方决定是否当作「缺失」。
"""


def title_case(s: str) -> str:
    """每个空白分隔的单词：首字母大写，其余小写。 "  john DOE  " → "John Doe"。"""
    return " ".join(word[:1].upper() + word[1:].lower() for word in s.split())


def capitalize_first(s: str) -> str:
    """只大写第一个字符，其余不动。"""
    return s[:1].upper() + s[1:]


def upper(s: str) -> str:
    return s.upper()


def normalize_gender(gender: str) -> str:
    lower = (gender or "").strip().lower()
    if lower in ("male", "female", "other"):
        return lower.capitalize()
    return title_case(gender or "")


def or_none(s: str):
    """空字符串 → None，供汇总字段使用。"""
    return s if s else None
