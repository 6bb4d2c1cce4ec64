"""
Unit tests for clinic.llm: provider 工厂 + SDK 调用（SDK 全部 mock）。
"""
from unittest.mock import MagicMock, patch

import pytest

from clinic.exceptions import ExternalServiceError
from clinic.llm import get_llm_service
from clinic.llm.services import ClaudeService, OpenAIService


class TestGetLLMService:

    def test_anthropic(self, settings):
        settings.LLM_PROVIDER = 'anthropic'
        assert isinstance(get_llm_service(), ClaudeService)

    def test_openai(self, settings):
        settings.LLM_PROVIDER = 'openai'
        assert isinstance(get_llm_service(), OpenAIService)

    def test_explicit_provider_wins(self, settings):
        settings.LLM_PROVIDER = 'anthropic'
        assert isinstance(get_llm_service('openai'), OpenAIService)

    def test_unknown(self, settings):
        settings.LLM_PROVIDER = 'llama'
        with pytest.raises(ExternalServiceError) as exc_info:
            get_llm_service()

        assert exc_info.value.code == 'LLM_NOT_CONFIGURED'
        assert exc_info.value.detail == {'known_providers': ['anthropic', 'openai']}


class TestClaudeService:

    def test_missing_key(self, settings):
        settings.ANTHROPIC_API_KEY = ''
        with pytest.raises(ExternalServiceError) as exc_info:
            ClaudeService().complete('system', 'user')
        assert exc_info.value.code == 'LLM_NOT_CONFIGURED'

    @patch('anthropic.Anthropic')
    def test_complete(self, mock_client_cls, settings):
        settings.ANTHROPIC_API_KEY = 'sk-test'
        settings.ANTHROPIC_MODEL = ''
        client = mock_client_cls.return_value
        client.messages.create.return_value = MagicMock(content=[MagicMock(text='| Medicine |')])

        response = ClaudeService().complete('system', 'user')

        assert response.content == '| Medicine |'
        assert response.model == ClaudeService.DEFAULT_MODEL
        _, kwargs = client.messages.create.call_args
        assert kwargs['system'] == 'system'
        assert kwargs['messages'] == [{'role': 'user', 'content': 'user'}]


class TestOpenAIService:

    @patch('openai.OpenAI')
    def test_complete_with_model_override(self, mock_client_cls, settings):
        settings.OPENAI_API_KEY = 'sk-test'
        settings.OPENAI_MODEL = 'gpt-4o-mini'
        client = mock_client_cls.return_value
        choice = MagicMock()
        choice.message.content = '| Medicine |'
        client.chat.completions.create.return_value = MagicMock(choices=[choice])

        response = OpenAIService().complete('system', 'user')

        assert response.content == '| Medicine |'
        assert response.model == 'gpt-4o-mini'
        _, kwargs = client.chat.completions.create.call_args
        assert kwargs['model'] == 'gpt-4o-mini'
        assert kwargs['messages'][0] == {'role': 'system', 'content': 'system'}
