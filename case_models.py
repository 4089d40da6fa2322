"""
Case input and prediction result value objects

Both objects are created fresh for every prediction and never mutated.
PredictionResult round-trips through the dict wire format used by the
surrounding application:

    {"outcome", "confidence", "explanation", "statisticalContext"?,
     "factors": [{"factor", "importance", "reference"?}]}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from errors import InvalidInput, ResultFormatError
from evidence_signal import classify_signal
from schemas import ResultRecord, describe_validation_error


class Outcome:
    """Closed set of predicted dispositions"""
    CONVICTION = "Conviction"
    ACQUITTAL = "Acquittal"
    SETTLEMENT = "Settlement"

    ALL = (CONVICTION, ACQUITTAL, SETTLEMENT)


def is_criminal(case_type: Optional[str]) -> bool:
    return bool(case_type) and 'Criminal' in case_type


@dataclass(frozen=True)
class CaseInput:
    """
    Structured facts about one case

    Validation happens on construction; an invalid case never exists.
    """
    case_type: str
    witness_count: int
    evidence_signal: str
    case_facts: Optional[str] = None
    court: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.case_type, str) or not self.case_type.strip():
            raise InvalidInput("case_type is required")
        if not isinstance(self.evidence_signal, str) or not self.evidence_signal.strip():
            raise InvalidInput("evidence_signal is required")
        # bool is an int subclass; True witnesses is not a count
        if isinstance(self.witness_count, bool) or not isinstance(self.witness_count, int):
            raise InvalidInput(f"witness_count must be an integer, got {self.witness_count!r}")
        if self.witness_count < 0:
            raise InvalidInput(f"witness_count must be >= 0, got {self.witness_count}")

        classify_signal(self.evidence_signal)

    @property
    def criminal(self) -> bool:
        return is_criminal(self.case_type)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'caseType': self.case_type,
            'witnessCount': self.witness_count,
            'evidenceSignal': self.evidence_signal,
        }
        if self.case_facts is not None:
            data['caseFacts'] = self.case_facts
        if self.court is not None:
            data['court'] = self.court
        return data


@dataclass(frozen=True)
class Factor:
    """A named contributor to a prediction"""
    name: str
    importance: float
    reference: Optional[str] = None

    def __post_init__(self):
        if not 0.0 <= self.importance <= 1.0:
            raise ValueError(f"Factor importance must be in [0, 1], got {self.importance}")

    def to_dict(self) -> Dict[str, Any]:
        data = {'factor': self.name, 'importance': self.importance}
        if self.reference is not None:
            data['reference'] = self.reference
        return data


@dataclass(frozen=True)
class PredictionResult:
    """Predicted outcome with confidence, explanation and ranked factors"""
    outcome: str
    confidence: float
    explanation: str
    factors: Tuple[Factor, ...] = field(default_factory=tuple)
    statistical_context: Optional[str] = None

    def __post_init__(self):
        if self.outcome not in Outcome.ALL:
            raise ValueError(f"Unknown outcome: {self.outcome!r}")
        # Lists are accepted for convenience and frozen into a tuple
        if not isinstance(self.factors, tuple):
            object.__setattr__(self, 'factors', tuple(self.factors))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the transport record"""
        data = {
            'outcome': self.outcome,
            'confidence': self.confidence,
            'explanation': self.explanation,
            'factors': [f.to_dict() for f in self.factors],
        }
        if self.statistical_context is not None:
            data['statisticalContext'] = self.statistical_context
        return data

    @classmethod
    def from_record(cls, record: ResultRecord) -> 'PredictionResult':
        """Build a result from an already validated record"""
        return cls(
            outcome=record.outcome,
            confidence=float(record.confidence),
            explanation=record.explanation,
            factors=tuple(Factor(f.factor, float(f.importance), f.reference) for f in record.factors),
            statistical_context=record.statisticalContext,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PredictionResult':
        """
        Rebuild a result from its transport record

        Raises:
            ResultFormatError: if a field is missing or has the wrong type
        """
        try:
            record = ResultRecord.model_validate(data)
        except ValidationError as e:
            raise ResultFormatError(describe_validation_error(e)) from e
        return cls.from_record(record)
