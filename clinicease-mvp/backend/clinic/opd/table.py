"""
管道符分隔的 markdown 表格，处方表的唯一交换格式。

  | Medicine | Dosage | Frequency | Duration | Instructions |
  |---|---|---|---|---|
  | PARACETAMOL | 500 mg | 2 time(s) daily | 5 Days | After food |

写：render_table() : builder 用
读：parse_table()  : 打印端 / AI 返回结果校验用
"""

from dataclasses import dataclass

PRESCRIPTION_HEADER = ("Medicine", "Dosage", "Frequency", "Duration", "Instructions")
AI_PRESCRIPTION_HEADER = ("Medicine", "Dosage", "Timing", "Duration (Days)")


@dataclass
class ParsedTable:
    header: list[str]
    rows: list[list[str]]


def _cell(value: str) -> str:
    # 单元格里不能出现行 / 列分隔符，否则读端拆不回来
    return " ".join(value.replace("|", "/").split())


def _row(cells) -> str:
    return "| " + " | ".join(_cell(c) for c in cells) + " |"


def render_table(header, rows) -> str:
    lines = [_row(header), "|" + "---|" * len(header)]
    lines.extend(_row(cells) for cells in rows)
    return "\n".join(lines)


def split_row(line: str) -> list[str]:
    """按 | 拆格，只丢掉行首 / 行尾边框产生的空单元格，中间的空格子保留。"""
    cells = [cell.strip() for cell in line.strip().split("|")]
    if cells and not cells[0]:
        cells = cells[1:]
    if cells and not cells[-1]:
        cells = cells[:-1]
    return cells


def parse_table(content: str):
    """
    按换行拆行、按 | 拆格，第二行（分隔行）丢弃。

    Returns:
        ParsedTable；少于两行或表头为空时返回 None（调用方按纯文本展示）。
    """
    lines = [line for line in (content or "").strip().split("\n") if line.strip()]
    split = [split_row(line) for line in lines]

    if len(split) < 2 or not any(split[0]):
        return None

    return ParsedTable(header=split[0], rows=split[2:])
