"""
按供应商名字挑 LLMService。

处方结构化只认 BaseLLMService.complete()，不关心背后是哪家：
  anthropic → ClaudeService
  openai    → OpenAIService
"""

from django.conf import settings

from ..exceptions import ExternalServiceError
from .base import BaseLLMService


def _providers() -> dict[str, type[BaseLLMService]]:
    # SDK 在 complete() 里才 import，这里只引用类
    from .services import ClaudeService, OpenAIService

    return {"anthropic": ClaudeService, "openai": OpenAIService}


def get_llm_service(provider: str = "") -> BaseLLMService:
    """
    provider 为空时读 settings.LLM_PROVIDER。

    Raises:
        ExternalServiceError: 供应商未知（LLM_NOT_CONFIGURED），
            task 把它当作一次普通的生成失败处理
    """
    name = provider or getattr(settings, "LLM_PROVIDER", "anthropic")
    providers = _providers()

    service_cls = providers.get(name)
    if service_cls is None:
        raise ExternalServiceError(
            message=f"Unknown LLM provider: {name!r}",
            code="LLM_NOT_CONFIGURED",
            detail={"known_providers": sorted(providers)},
        )
    return service_cls()
