"""
Pydantic schemas for JSON records crossing the predictor boundary

ResultRecord is the transport shape of a PredictionResult. AIPredictionRecord
tightens it for answers coming back from the AI service, and SimilarCaseRecord
describes one precedent in a similar-cases answer.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator


OUTCOME_LABELS = ('Conviction', 'Acquittal', 'Settlement')

OutcomeLabel = Literal['Conviction', 'Acquittal', 'Settlement']


class FactorRecord(BaseModel):
    """One factor: name, importance in [0, 1], optional reference"""

    factor: str = Field(min_length=1)
    importance: float = Field(ge=0, le=1, strict=True, allow_inf_nan=False)
    reference: Optional[str] = None


class ResultRecord(BaseModel):
    """Transport record of a prediction result"""

    outcome: OutcomeLabel
    confidence: float = Field(strict=True, allow_inf_nan=False)
    explanation: str
    factors: List[FactorRecord]
    statisticalContext: Optional[str] = None


class AIPredictionRecord(ResultRecord):
    """Prediction answer from the AI service"""

    confidence: float = Field(ge=0, le=1, strict=True, allow_inf_nan=False)
    explanation: str = Field(min_length=1)
    factors: List[FactorRecord] = Field(min_length=1)

    @field_validator('outcome', mode='before')
    @classmethod
    def canonical_outcome(cls, value):
        # Models answer "conviction", "ACQUITTAL", ...
        if isinstance(value, str):
            for label in OUTCOME_LABELS:
                if label.lower() == value.strip().lower():
                    return label
        return value

    @field_validator('explanation', mode='before')
    @classmethod
    def strip_explanation(cls, value):
        return value.strip() if isinstance(value, str) else value


class SimilarCaseRecord(BaseModel):
    """One precedent from a similar-cases answer"""

    id: Optional[Union[str, int]] = None
    title: str = Field(min_length=1)
    court: str = Field(min_length=1)
    date: Optional[str] = None
    outcome: str = Field(min_length=1)
    crimeType: Optional[str] = None
    relevance: float = Field(default=0, strict=True, allow_inf_nan=False)
    keyFacts: Optional[List[str]] = None

    @field_validator('title', 'court', 'outcome', mode='before')
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a ValidationError into one line: 'field: message; ...'"""
    parts = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item['loc']) or 'record'
        parts.append(f"{location}: {item['msg']}")
    return '; '.join(parts)
