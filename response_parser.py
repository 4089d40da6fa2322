"""
Parsing of AI service responses

Model output arrives as free text that usually contains JSON, in several
shapes. Each parse yields either a validated value (ParsedPrediction,
ParsedCases) or a ParseFailure with the reason; callers branch on the type
and never receive a half-validated structure.
"""

import json
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from case_models import CaseInput, Outcome, PredictionResult
from schemas import AIPredictionRecord, SimilarCaseRecord, describe_validation_error


MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.9

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class ParsedPrediction:
    result: PredictionResult


@dataclass(frozen=True)
class ParsedCases:
    cases: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class ParseFailure:
    reason: str
    raw: str = ''


PredictionParse = Union[ParsedPrediction, ParseFailure]
CasesParse = Union[ParsedCases, ParseFailure]


class _NoJSON(Exception):
    pass


def extract_json(text: str) -> Any:
    """
    Pull the first JSON value out of model output

    Fenced ```json blocks are preferred; otherwise the first object or array
    in the text is decoded and anything after it is ignored.

    Raises:
        _NoJSON: if no JSON value can be decoded
    """
    candidate = text.strip()
    fenced = _FENCED_BLOCK.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    starts = [i for i in (candidate.find('{'), candidate.find('[')) if i != -1]
    if not starts:
        raise _NoJSON("no JSON value found")

    try:
        value, _ = json.JSONDecoder().raw_decode(candidate[min(starts):])
    except json.JSONDecodeError as e:
        raise _NoJSON(f"invalid JSON: {e.msg}") from e
    return value


def parse_prediction(text: Optional[str], case: Optional[CaseInput] = None) -> PredictionParse:
    """
    Validate an AI prediction answer

    Args:
        text: Raw model output
        case: The case the answer is for; enables the criminal-case checks

    Returns:
        ParsedPrediction or ParseFailure
    """
    raw = text or ''
    if not raw.strip():
        return ParseFailure('empty response', raw)

    try:
        data = extract_json(raw)
    except _NoJSON as e:
        return ParseFailure(str(e), raw)

    if not isinstance(data, dict):
        return ParseFailure(f"expected a JSON object, got {type(data).__name__}", raw)

    try:
        record = AIPredictionRecord.model_validate(data)
    except ValidationError as e:
        return ParseFailure(describe_validation_error(e), raw)

    if case is not None and case.criminal and record.outcome == Outcome.SETTLEMENT:
        return ParseFailure('settlement predicted for a criminal case', raw)

    result = PredictionResult.from_record(record)
    result = replace(
        result,
        confidence=round(max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, result.confidence)), 3),
        statistical_context=result.statistical_context or None,
        factors=tuple(sorted(result.factors, key=lambda f: f.importance, reverse=True))
    )
    return ParsedPrediction(result)


def _normalize_case(record: SimilarCaseRecord, index: int) -> Dict[str, Any]:
    return {
        'id': str(record.id) if record.id not in (None, '') else f"case-{index + 1}",
        'title': record.title,
        'court': record.court,
        'date': record.date or '',
        'outcome': record.outcome,
        'crimeType': record.crimeType or '',
        'relevance': int(max(0, min(100, round(record.relevance)))),
        'keyFacts': list(record.keyFacts or []),
    }


def parse_similar_cases(text: Optional[str]) -> CasesParse:
    """
    Validate an AI similar-cases answer

    Accepted shapes: a JSON array of cases, {"cases": [...]}, or an object
    whose values are all case objects. Any malformed case fails the parse.

    Returns:
        ParsedCases or ParseFailure
    """
    raw = text or ''
    if not raw.strip():
        return ParseFailure('empty response', raw)

    try:
        data = extract_json(raw)
    except _NoJSON as e:
        return ParseFailure(str(e), raw)

    if isinstance(data, list):
        records = data
    elif isinstance(data, dict) and isinstance(data.get('cases'), list):
        records = data['cases']
    elif isinstance(data, dict) and data and all(isinstance(v, dict) for v in data.values()):
        records = list(data.values())
    else:
        return ParseFailure('unrecognised similar-cases shape', raw)

    cases = []
    for index, item in enumerate(records):
        try:
            record = SimilarCaseRecord.model_validate(item)
        except ValidationError as e:
            return ParseFailure(f"case {index + 1}: {describe_validation_error(e)}", raw)
        cases.append(_normalize_case(record, index))

    return ParsedCases(cases)
