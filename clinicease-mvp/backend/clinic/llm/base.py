"""
BaseLLMService: 所有 LLM 实现的抽象基类。

每个新 LLM 只需：
1. 继承 BaseLLMService
2. 实现 complete()
3. 在 factory.py 的 _build_registry 注册一行

tasks.py 完全不知道背后用哪家 LLM。
"""

from abc import ABC, abstractmethod

from django.conf import settings

from ..exceptions import ExternalServiceError
from .types import LLMResponse


class BaseLLMService(ABC):

    # settings 里对应的 key 名，子类覆盖
    api_key_setting: str = ""
    model_setting: str = ""
    DEFAULT_MODEL: str = ""

    def _api_key(self) -> str:
        api_key = getattr(settings, self.api_key_setting, "")
        if not api_key:
            raise ExternalServiceError(
                message=f"{self.api_key_setting} is not set",
                code="LLM_NOT_CONFIGURED",
            )
        return api_key

    def _model(self) -> str:
        return getattr(settings, self.model_setting, "") or self.DEFAULT_MODEL

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """
        调用 LLM，返回标准 LLMResponse。

        Args:
            system_prompt: 系统级角色设定（"You are an assistant for doctors in India..."）
            user_prompt:   医生口述内容 + 输出格式要求

        Returns:
            LLMResponse(content=生成文本, model=模型名)

        Raises:
            Exception: API 调用失败时抛出，由 tasks.py 标记 draft 为 failed（不重试）
        """
