"""
可读短 id：前缀 + 毫秒时间戳末 6 位。

  CZ-123456   OPD 表单会话里的新患者
  P-123456    新建患者
  APP-123456  新建预约
"""

import time

OPD_SESSION_PREFIX = "CZ"
PATIENT_PREFIX = "P"
APPOINTMENT_PREFIX = "APP"


def short_id(prefix: str, now_ms=None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}-{str(now_ms)[-6:]}"


def unique_short_id(prefix: str, exists) -> str:
    """
    生成一个 exists(id) 为 False 的短 id。
    同一毫秒内撞号时往后顺延。
    """
    now_ms = int(time.time() * 1000)
    candidate = short_id(prefix, now_ms)
    while exists(candidate):
        now_ms += 1
        candidate = short_id(prefix, now_ms)
    return candidate
