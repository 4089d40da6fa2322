"""
Tests for GeminiPredictionClient

The google.generativeai module is replaced with a Mock so no request leaves
the process.
"""

from unittest.mock import Mock, PropertyMock

import pytest

import gemini_client
from gemini_client import AIServiceError, GeminiPredictionClient
from settings import PredictorSettings


@pytest.fixture
def fake_genai(monkeypatch):
    """Mock google.generativeai with a model returning a fixed answer"""
    genai = Mock()
    model = Mock()
    model.generate_content = Mock(return_value=Mock(text='{"outcome": "Conviction"}'))
    genai.GenerativeModel = Mock(return_value=model)
    monkeypatch.setattr(gemini_client, 'genai', genai)
    return genai


@pytest.fixture
def client(fake_genai):
    return GeminiPredictionClient(api_key='test-key')


class TestClientSetup:
    """Test client construction"""

    def test_configures_sdk(self, fake_genai, client):
        fake_genai.configure.assert_called_once_with(api_key='test-key')
        fake_genai.GenerativeModel.assert_called_once_with('gemini-2.0-flash')

    def test_generation_config(self, client):
        assert client.generation_config == {
            'temperature': 0.2,
            'top_k': 40,
            'top_p': 0.8,
            'max_output_tokens': 1000,
        }

    def test_from_settings(self, fake_genai, monkeypatch):
        monkeypatch.setenv('GEMINI_API_KEY', 'env-key')
        monkeypatch.setenv('PREDICTOR_GEMINI_MODEL', 'gemini-1.5-pro')
        monkeypatch.setenv('PREDICTOR_TEMPERATURE', '0.5')
        monkeypatch.setenv('PREDICTOR_MAX_OUTPUT_TOKENS', '2048')

        client = GeminiPredictionClient.from_settings(PredictorSettings(load_env_file=False))

        fake_genai.configure.assert_called_once_with(api_key='env-key')
        assert client.describe() == {
            'model': 'gemini-1.5-pro',
            'generation_config': {
                'temperature': 0.5,
                'top_k': 40,
                'top_p': 0.8,
                'max_output_tokens': 2048,
            },
        }


class TestPrompts:
    """Test prompt construction"""

    def test_prediction_prompt_includes_case(self, client, theft_case):
        prompt = client.build_prediction_prompt(theft_case)

        assert 'Case Type: Criminal - Theft' in prompt
        assert 'Court: District Court' in prompt
        assert 'Number of Witnesses: 4' in prompt
        assert 'Evidence / FIR Section: Moderate' in prompt
        assert 'IPC 378' in prompt
        assert 'CCTV footage' in prompt
        assert '"factors"' in prompt

    def test_prediction_prompt_defaults(self, client):
        from case_models import CaseInput

        prompt = client.build_prediction_prompt(CaseInput('Civil - Contract Dispute', 1, 'Weak'))

        assert 'Court: Not specified' in prompt
        assert 'Case Facts: Not provided' in prompt
        assert 'usually charged for this case type: Not specified' in prompt

    def test_similar_cases_prompt(self, client):
        prompt = client.build_similar_cases_prompt('Acquittal')

        assert 'following outcome: Acquittal' in prompt
        assert '"outcome": "Acquittal"' in prompt
        assert '"keyFacts"' in prompt


class TestGenerate:
    """Test model calls"""

    def test_generate_prediction(self, fake_genai, client, theft_case):
        text = client.generate_prediction(theft_case)
        model = fake_genai.GenerativeModel.return_value

        assert text == '{"outcome": "Conviction"}'
        prompt = model.generate_content.call_args[0][0]
        assert 'Criminal - Theft' in prompt
        assert model.generate_content.call_args[1]['generation_config'] == client.generation_config

    def test_generate_similar_cases(self, fake_genai, client):
        client.generate_similar_cases('Conviction')
        prompt = fake_genai.GenerativeModel.return_value.generate_content.call_args[0][0]

        assert 'following outcome: Conviction' in prompt

    def test_empty_response(self, fake_genai, client, theft_case):
        fake_genai.GenerativeModel.return_value.generate_content.return_value = Mock(text='   ')

        with pytest.raises(AIServiceError):
            client.generate_prediction(theft_case)

    def test_blocked_response(self, fake_genai, client, theft_case):
        """SDK raises ValueError from .text when the candidate was blocked"""
        response = Mock()
        type(response).text = PropertyMock(side_effect=ValueError('response was blocked'))
        fake_genai.GenerativeModel.return_value.generate_content.return_value = response

        with pytest.raises(AIServiceError, match='blocked'):
            client.generate_prediction(theft_case)

    def test_transport_errors_propagate(self, fake_genai, client):
        fake_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError('quota exceeded')

        with pytest.raises(RuntimeError):
            client.generate_similar_cases('Conviction')
