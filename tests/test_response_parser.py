"""Unit tests for response_parser.py (AI answer extraction + validation)"""

import json

import pytest

from case_models import CaseInput, Outcome
from response_parser import (
    ParsedCases,
    ParsedPrediction,
    ParseFailure,
    parse_prediction,
    parse_similar_cases,
)


@pytest.fixture
def prediction_text(sample_ai_prediction):
    """Build prediction JSON with some fields replaced"""
    def build(**overrides):
        data = dict(sample_ai_prediction)
        data.update(overrides)
        return json.dumps(data)
    return build


class TestParsePrediction:
    """Test prediction parsing"""

    def test_fenced_json(self, ai_prediction_text, theft_case):
        parsed = parse_prediction(ai_prediction_text, theft_case)

        assert isinstance(parsed, ParsedPrediction)
        assert parsed.result.outcome == Outcome.CONVICTION
        assert parsed.result.confidence == pytest.approx(0.82)

    def test_factors_sorted(self, ai_prediction_text):
        parsed = parse_prediction(ai_prediction_text)

        assert [f.name for f in parsed.result.factors] == ['CCTV Footage', 'Recovery of Property']

    def test_json_embedded_in_prose(self, prediction_text):
        text = "Prediction follows. " + prediction_text() + " Hope this helps."
        assert isinstance(parse_prediction(text), ParsedPrediction)

    def test_outcome_case_insensitive(self, prediction_text):
        parsed = parse_prediction(prediction_text(outcome='acquittal'))
        assert parsed.result.outcome == Outcome.ACQUITTAL

    def test_confidence_clamped(self, prediction_text):
        assert parse_prediction(prediction_text(confidence=0.99)).result.confidence == pytest.approx(0.9)
        assert parse_prediction(prediction_text(confidence=0.05)).result.confidence == pytest.approx(0.3)

    def test_missing_reference_kept_as_none(self, prediction_text):
        parsed = parse_prediction(prediction_text(factors=[{'factor': 'Motive', 'importance': 0.4}]))
        assert parsed.result.factors[0].reference is None

    def test_settlement_rejected_for_criminal_case(self, prediction_text, theft_case):
        parsed = parse_prediction(prediction_text(outcome='Settlement'), theft_case)

        assert isinstance(parsed, ParseFailure)
        assert 'criminal' in parsed.reason

    def test_settlement_allowed_for_civil_case(self, prediction_text):
        case = CaseInput('Civil - Contract Dispute', 2, 'Moderate')
        parsed = parse_prediction(prediction_text(outcome='Settlement'), case)

        assert isinstance(parsed, ParsedPrediction)

    @pytest.mark.parametrize('text', [
        None,
        '',
        'The accused will probably be convicted.',
        '["Conviction"]',
        '{"outcome": "Conviction", "confidence": 0.7',
    ])
    def test_unusable_text(self, text):
        assert isinstance(parse_prediction(text), ParseFailure)

    @pytest.mark.parametrize('overrides', [
        {'outcome': 'Dismissed'},
        {'confidence': 'high'},
        {'confidence': 1.5},
        {'confidence': True},
        {'explanation': '  '},
        {'factors': []},
        {'factors': [{'factor': 'Motive', 'importance': 3}]},
        {'factors': [{'factor': '', 'importance': 0.3}]},
    ])
    def test_invalid_fields(self, prediction_text, overrides):
        parsed = parse_prediction(prediction_text(**overrides))

        assert isinstance(parsed, ParseFailure)
        assert parsed.raw

    def test_non_finite_confidence(self):
        """JSON Infinity and NaN are not confidences"""
        for value in ('Infinity', 'NaN'):
            text = (
                '{"outcome": "Conviction", "confidence": ' + value + ', "explanation": "x", '
                '"factors": [{"factor": "Motive", "importance": 0.4}]}'
            )
            assert isinstance(parse_prediction(text), ParseFailure)

    def test_validation_reason_names_field(self, prediction_text):
        parsed = parse_prediction(prediction_text(confidence=1.5))
        assert 'confidence' in parsed.reason


class TestParseSimilarCases:
    """Test similar case parsing"""

    def test_array(self, similar_cases_text):
        parsed = parse_similar_cases(similar_cases_text)

        assert isinstance(parsed, ParsedCases)
        assert len(parsed.cases) == 2
        assert parsed.cases[1]['relevance'] == 79

    def test_wrapped_object(self, similar_cases_text):
        text = '```json\n{"cases": ' + similar_cases_text + '}\n```'
        assert len(parse_similar_cases(text).cases) == 2

    def test_keyed_object(self):
        text = json.dumps({
            'first': {'title': 'State v. A', 'court': 'High Court', 'outcome': 'Acquittal'},
            'second': {'title': 'State v. B', 'court': 'Supreme Court', 'outcome': 'Acquittal', 'relevance': 140},
        })
        cases = parse_similar_cases(text).cases

        assert cases[0]['id'] == 'case-1'
        assert cases[0]['keyFacts'] == []
        assert cases[1]['relevance'] == 100

    def test_malformed_case_fails_whole_parse(self):
        text = json.dumps([
            {'title': 'State v. A', 'court': 'High Court', 'outcome': 'Acquittal'},
            {'title': 'State v. B', 'outcome': 'Acquittal'},
        ])
        parsed = parse_similar_cases(text)

        assert isinstance(parsed, ParseFailure)
        assert 'court' in parsed.reason

    @pytest.mark.parametrize('text', [
        '',
        'No precedents found.',
        '{"status": "ok"}',
        '[{"title": "State v. A", "court": "High Court", "outcome": "Acquittal", "relevance": "high"}]',
        '[{"title": "State v. A", "court": "High Court", "outcome": "Acquittal", "keyFacts": "CCTV"}]',
    ])
    def test_unusable_text(self, text):
        assert isinstance(parse_similar_cases(text), ParseFailure)

    @pytest.mark.parametrize('value', ['Infinity', '-Infinity', 'NaN'])
    def test_non_finite_relevance(self, value):
        """Relevance must be a finite number"""
        text = '[{"title": "A v B", "court": "HC", "outcome": "Conviction", "relevance": ' + value + '}]'
        parsed = parse_similar_cases(text)

        assert isinstance(parsed, ParseFailure)
        assert 'relevance' in parsed.reason

    def test_numeric_id_kept(self):
        text = '[{"id": 17, "title": "A v B", "court": "HC", "outcome": "Conviction"}]'
        assert parse_similar_cases(text).cases[0]['id'] == '17'
