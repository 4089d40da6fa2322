"""
Pytest configuration and shared fixtures for the outcome predictor tests
"""

import json
import os
import sys
from unittest.mock import Mock

import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT_DIR not in sys.path:
    sys.path.append(ROOT_DIR)

from case_models import CaseInput  # noqa: E402
from explanation_composer import ExplanationComposer  # noqa: E402
from prediction_engine import PredictionEngine  # noqa: E402


SAMPLE_FACTS = """
On the night of 12th January 2024 the accused was seen leaving the complainant's shop
with two mobile phones. CCTV footage shows the accused near the counter, and the phones
were recovered from his residence the next morning.
"""

SAMPLE_AI_PREDICTION = {
    'outcome': 'Conviction',
    'confidence': 0.82,
    'explanation': 'CCTV footage and the recovery of the stolen phones strongly support the prosecution.',
    'factors': [
        {'factor': 'Recovery of Property', 'importance': 0.6, 'reference': 'Phones recovered from residence'},
        {'factor': 'CCTV Footage', 'importance': 0.9, 'reference': 'Accused seen near the counter'},
    ]
}

SAMPLE_SIMILAR_CASES = [
    {
        'id': 'dl-hc-2019-114',
        'title': 'State v. Ramesh Kumar',
        'court': 'Delhi High Court',
        'date': '2019-04-12',
        'outcome': 'Conviction',
        'crimeType': 'Theft',
        'relevance': 91,
        'keyFacts': ['CCTV footage', 'Recovery of stolen goods', 'Two eyewitnesses']
    },
    {
        'id': 'sc-2016-88',
        'title': 'Sunil v. State of Maharashtra',
        'court': 'Supreme Court',
        'date': '2016-09-30',
        'outcome': 'Conviction',
        'crimeType': 'Theft',
        'relevance': 78.6,
        'keyFacts': ['Confession retracted']
    }
]


@pytest.fixture
def engine():
    """Deterministic prediction engine"""
    return PredictionEngine()


@pytest.fixture
def composer():
    """Explanation composer"""
    return ExplanationComposer()


@pytest.fixture
def sample_facts():
    """Provide sample case facts"""
    return SAMPLE_FACTS


@pytest.fixture
def theft_case(sample_facts):
    """Criminal theft case with moderate evidence"""
    return CaseInput(
        case_type='Criminal - Theft',
        witness_count=4,
        evidence_signal='Moderate',
        case_facts=sample_facts,
        court='District Court'
    )


@pytest.fixture
def sample_ai_prediction():
    """Prediction record as the AI service returns it"""
    return json.loads(json.dumps(SAMPLE_AI_PREDICTION))


@pytest.fixture
def ai_prediction_text():
    """Gemini-style answer wrapping the prediction JSON in prose and a code fence"""
    return "Here is my assessment:\n```json\n" + json.dumps(SAMPLE_AI_PREDICTION, indent=2) + "\n```\n"


@pytest.fixture
def similar_cases_text():
    """Gemini-style answer with a bare JSON array of cases"""
    return json.dumps(SAMPLE_SIMILAR_CASES)


@pytest.fixture
def mock_gemini_client(ai_prediction_text, similar_cases_text):
    """Mock Gemini client for testing"""
    mock_client = Mock()
    mock_client.generate_prediction = Mock(return_value=ai_prediction_text)
    mock_client.generate_similar_cases = Mock(return_value=similar_cases_text)
    mock_client.describe = Mock(return_value={'model': 'mock'})
    return mock_client


@pytest.fixture
def failing_gemini_client():
    """Mock Gemini client whose every call raises"""
    mock_client = Mock()
    mock_client.generate_prediction = Mock(side_effect=RuntimeError("quota exceeded"))
    mock_client.generate_similar_cases = Mock(side_effect=RuntimeError("quota exceeded"))
    return mock_client
