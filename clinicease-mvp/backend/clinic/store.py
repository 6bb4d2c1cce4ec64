"""
Key-value 持久化（诊所名称、处方单抬头、员工列表）。

约定：
  - 初始化时 load 一次（ClinicProfile.__init__）
  - 值变化时才 save（ClinicProfile.update）
core（dental / opd）不依赖这里。

后端由 settings.KV_STORE_BACKEND 决定：
  redis : RedisKeyValueStore（生产，复用 REDIS_URL）
  memory: MemoryKeyValueStore（开发 / 测试）
"""

import json
import logging
from abc import ABC, abstractmethod

from django.conf import settings

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class BaseKeyValueStore(ABC):

    @abstractmethod
    def load(self, key: str, default=None):
        """取值；不存在时返回 default。"""

    @abstractmethod
    def save(self, key: str, value) -> None:
        """写值（JSON 可序列化）。"""


class MemoryKeyValueStore(BaseKeyValueStore):

    def __init__(self):
        self._data: dict = {}

    def load(self, key, default=None):
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def save(self, key, value):
        self._data[key] = json.dumps(value)


class RedisKeyValueStore(BaseKeyValueStore):

    PREFIX = "clinicease:"

    def __init__(self, redis_url: str):
        import redis

        self._client = redis.from_url(redis_url)

    def load(self, key, default=None):
        raw = self._client.get(self.PREFIX + key)
        if raw is None:
            return default
        return json.loads(raw)

    def save(self, key, value):
        self._client.set(self.PREFIX + key, json.dumps(value))


_memory_store = None


def get_store() -> BaseKeyValueStore:
    global _memory_store

    backend = getattr(settings, "KV_STORE_BACKEND", "memory")
    if backend == "redis":
        return RedisKeyValueStore(settings.REDIS_URL)
    if backend == "memory":
        # 进程内共享一份，模拟浏览器 localStorage
        if _memory_store is None:
            _memory_store = MemoryKeyValueStore()
        return _memory_store
    raise ValueError(f"Unknown KV_STORE_BACKEND: {backend!r}")


# ── ClinicProfile ─────────────────────────────────────────────────────────

PROFILE_DEFAULTS = {
    "clinic_name": "ClinicEase Clinic",
    "doctor_name": "",
    "qualification": "",
    "registration_id": "",
    "address": "",
    "phone": "",
    "staff": [],
}


class ClinicProfile:
    """诊所设置。每个字段对应 store 里的一个 key。"""

    def __init__(self, store: BaseKeyValueStore):
        self._store = store
        defaults = dict(PROFILE_DEFAULTS, clinic_name=settings.CLINIC_NAME)
        self._values = {key: store.load(key, default) for key, default in defaults.items()}

    def as_dict(self) -> dict:
        return dict(self._values)

    def __getitem__(self, key):
        return self._values[key]

    def update(self, changes: dict) -> list[str]:
        """
        只接受已知字段；返回实际变化并已保存的 key 列表。

        Raises:
            ValidationError: 未知字段或类型不对
        """
        if not isinstance(changes, dict):
            raise ValidationError(message="Request body must be a JSON object.", code="INVALID_JSON")

        errors = []
        for key, value in changes.items():
            if key not in PROFILE_DEFAULTS:
                errors.append({"field": key, "message": "Unknown setting."})
            elif key == "staff":
                if not isinstance(value, list) or not all(
                    isinstance(s, dict) and s.get("email") for s in value
                ):
                    errors.append({"field": key, "message": "Staff must be a list of {id, email}."})
            elif not isinstance(value, str):
                errors.append({"field": key, "message": "Must be a string."})
        if not errors and "clinic_name" in changes and not changes["clinic_name"].strip():
            errors.append({"field": "clinic_name", "message": "Clinic name cannot be empty."})
        if errors:
            raise ValidationError(
                message="Request validation failed.",
                detail={"errors": errors},
            )

        changed = []
        for key, value in changes.items():
            if self._values[key] != value:
                self._values[key] = value
                self._store.save(key, value)
                changed.append(key)

        if changed:
            logger.info("Clinic profile updated: %s", ", ".join(changed))
        return changed
