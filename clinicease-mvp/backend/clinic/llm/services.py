"""
具体 LLM 实现。

新增 LLM 供应商：在此文件添加一个类，然后在 factory.py 注册即可。

已注册供应商：
  anthropic: ClaudeService   (claude-sonnet-4-20250514)
  openai   : OpenAIService   (gpt-4o)
"""

from django.conf import settings

from .base import BaseLLMService
from .types import LLMResponse


# ── ClaudeService ──────────────────────────────────────────────────────────
#
# 使用 Anthropic SDK。
# settings：ANTHROPIC_API_KEY，ANTHROPIC_MODEL（可选覆盖）

class ClaudeService(BaseLLMService):

    api_key_setting = "ANTHROPIC_API_KEY"
    model_setting = "ANTHROPIC_MODEL"
    DEFAULT_MODEL = "claude-sonnet-4-20250514"

    def complete(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        import anthropic

        model = self._model()
        client = anthropic.Anthropic(api_key=self._api_key())

        response = client.messages.create(
            model=model,
            max_tokens=settings.LLM_MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )

        return LLMResponse(
            content=response.content[0].text,
            model=model,
        )


# ── OpenAIService ──────────────────────────────────────────────────────────
#
# 使用 OpenAI SDK。
# settings：OPENAI_API_KEY，OPENAI_MODEL（可选覆盖）

class OpenAIService(BaseLLMService):

    api_key_setting = "OPENAI_API_KEY"
    model_setting = "OPENAI_MODEL"
    DEFAULT_MODEL = "gpt-4o"

    def complete(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        import openai

        model = self._model()
        client = openai.OpenAI(api_key=self._api_key())

        response = client.chat.completions.create(
            model=model,
            max_tokens=settings.LLM_MAX_TOKENS,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user",   "content": user_prompt},
            ],
        )

        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=model,
        )
