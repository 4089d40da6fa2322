"""
Orchestrator: Prediction Workflow Coordination

Coordinates one prediction request:
Validation → AI Prediction (Gemini) → Engine Fallback → Statistical Context

The AI answer is preferred when it parses into a valid result; any failure on
that path falls back to the deterministic PredictionEngine, so well-formed
input always yields a PredictionResult.
"""

import logging
from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from case_models import CaseInput, PredictionResult
from errors import InvalidInput
from explanation_composer import ExplanationComposer
from gemini_client import GeminiPredictionClient
from prediction_engine import PredictionEngine
from response_parser import ParseFailure, parse_prediction, parse_similar_cases
from settings import PredictorSettings, configure_logging

logger = logging.getLogger(__name__)


class WorkflowStatus(Enum):
    """Workflow execution status"""
    PENDING = "pending"
    VALIDATION = "validation"
    AI_PREDICTION = "ai_prediction"
    FALLBACK = "fallback"
    STATISTICS = "statistics"
    COMPLETED = "completed"
    FAILED = "failed"


class PredictionSource(Enum):
    """Which path produced the result"""
    GEMINI = "gemini"
    ENGINE = "engine"


class PredictionState:
    """
    State of a single prediction request

    Holds inputs, the result and an execution log for auditing.
    """

    def __init__(self, request_id: Optional[str] = None):
        """
        Args:
            request_id: Unique request identifier (auto-generated if not provided)
        """
        self.request_id = request_id or self._generate_request_id()
        self.status = WorkflowStatus.PENDING
        self.created_at = datetime.now().isoformat()
        self.updated_at = self.created_at

        self.case: Optional[CaseInput] = None
        self.result: Optional[PredictionResult] = None
        self.source: Optional[PredictionSource] = None

        self.errors = []
        self.warnings = []
        self.execution_log = []

    def _generate_request_id(self) -> str:
        from uuid import uuid4
        return f"prediction_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{str(uuid4())[:8]}"

    def log_step(self, step_name: str, status: str, details: Optional[str] = None):
        """
        Log a workflow step

        Args:
            step_name: Name of the workflow step
            status: Status (success/error/warning/skipped)
            details: Optional details or error message
        """
        self.execution_log.append({
            'step': step_name,
            'status': status,
            'details': details,
            'timestamp': datetime.now().isoformat()
        })
        self.updated_at = datetime.now().isoformat()

    def add_error(self, error_message: str, step: Optional[str] = None):
        self.errors.append({
            'message': error_message,
            'step': step,
            'timestamp': datetime.now().isoformat()
        })
        self.log_step(step or 'unknown', 'error', error_message)

    def add_warning(self, warning_message: str, step: Optional[str] = None):
        self.warnings.append({
            'message': warning_message,
            'step': step,
            'timestamp': datetime.now().isoformat()
        })
        self.log_step(step or 'unknown', 'warning', warning_message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary"""
        return {
            'request_id': self.request_id,
            'status': self.status.value,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'input': self.case.to_dict() if self.case else None,
            'result': self.result.to_dict() if self.result else None,
            'source': self.source.value if self.source else None,
            'errors': self.errors,
            'warnings': self.warnings,
            'execution_log': self.execution_log
        }


class PredictionOrchestrator:
    """
    Prediction Orchestrator: AI-first prediction with deterministic fallback
    """

    def __init__(
        self,
        gemini_client: Optional[GeminiPredictionClient] = None,
        engine: Optional[PredictionEngine] = None,
        composer: Optional[ExplanationComposer] = None
    ):
        """
        Args:
            gemini_client: Optional Gemini client; without one every request
                is served by the engine
            engine: Prediction engine (created if omitted)
            composer: Explanation composer shared with the engine
        """
        self.gemini_client = gemini_client
        self.composer = composer or ExplanationComposer()
        self.engine = engine or PredictionEngine(composer=self.composer)

    def execute(
        self,
        case_type: str,
        witness_count: int,
        evidence_signal: str,
        case_facts: Optional[str] = None,
        court: Optional[str] = None,
        include_statistics: bool = True,
        request_id: Optional[str] = None
    ) -> PredictionState:
        """
        Run the prediction workflow

        Args:
            case_type: Freeform case type
            witness_count: Number of witnesses
            evidence_signal: Strength label or statute section label
            case_facts: Optional free text
            court: Optional court name
            include_statistics: Attach the statistical context paragraph
            request_id: Optional request identifier

        Returns:
            PredictionState with the result

        Raises:
            InvalidInput: if the case cannot be scored as given
        """
        state = PredictionState(request_id=request_id)
        logger.info("Starting prediction (Request: %s)", state.request_id)

        # Step 1: Validation
        state.status = WorkflowStatus.VALIDATION
        try:
            state.case = CaseInput(case_type, witness_count, evidence_signal, case_facts, court)
            state.log_step('validation', 'success', f"Case type: {case_type}")
        except InvalidInput as e:
            state.status = WorkflowStatus.FAILED
            state.add_error(f"Invalid input: {e}", step='validation')
            logger.warning("Rejected prediction request %s: %s", state.request_id, e)
            raise

        # Step 2: AI prediction
        state.status = WorkflowStatus.AI_PREDICTION
        state = self._execute_ai_prediction(state)

        # Step 3: Engine fallback
        if state.result is None:
            state.status = WorkflowStatus.FALLBACK
            state = self._execute_fallback(state)

        # Step 4: Statistical context
        if include_statistics:
            state.status = WorkflowStatus.STATISTICS
            state = self._execute_statistics(state)

        state.status = WorkflowStatus.COMPLETED
        state.log_step('workflow', 'success', f"Outcome: {state.result.outcome} ({state.result.confidence:.0%})")
        logger.info(
            "Prediction completed (Request: %s): %s at %.0f%% via %s",
            state.request_id,
            state.result.outcome,
            state.result.confidence * 100,
            state.source.value
        )

        return state

    def predict(
        self,
        case_type: str,
        witness_count: int,
        evidence_signal: str,
        case_facts: Optional[str] = None,
        court: Optional[str] = None,
        include_statistics: bool = True
    ) -> PredictionResult:
        """Run the workflow and return only the result"""
        state = self.execute(
            case_type,
            witness_count,
            evidence_signal,
            case_facts=case_facts,
            court=court,
            include_statistics=include_statistics
        )
        return state.result

    def _execute_ai_prediction(self, state: PredictionState) -> PredictionState:
        if self.gemini_client is None:
            state.log_step('ai_prediction', 'skipped', 'No AI client configured')
            return state

        logger.info("Step 2: Requesting AI prediction...")

        try:
            raw = self.gemini_client.generate_prediction(state.case)
        except Exception as e:
            state.add_warning(f"AI prediction failed: {e}", step='ai_prediction')
            logger.warning("AI prediction failed, using engine fallback: %s", e)
            return state

        parsed = parse_prediction(raw, state.case)
        if isinstance(parsed, ParseFailure):
            state.add_warning(f"Unusable AI response: {parsed.reason}", step='ai_prediction')
            logger.warning("Unusable AI response, using engine fallback: %s", parsed.reason)
            return state

        state.result = parsed.result
        state.source = PredictionSource.GEMINI
        state.log_step('ai_prediction', 'success', f"{len(parsed.result.factors)} factors")
        return state

    def _execute_fallback(self, state: PredictionState) -> PredictionState:
        logger.info("Step 3: Scoring with the deterministic engine...")

        state.result = self.engine.predict_case(state.case)
        state.source = PredictionSource.ENGINE
        state.log_step('fallback', 'success', f"{len(state.result.factors)} factors")
        return state

    def _execute_statistics(self, state: PredictionState) -> PredictionState:
        if state.result.statistical_context:
            state.log_step('statistics', 'skipped', 'Result already carries statistical context')
            return state

        case = state.case
        context = self.composer.statistical_context(
            case.case_type,
            case.witness_count,
            case.evidence_signal,
            court=case.court
        )
        state.result = replace(state.result, statistical_context=context)
        state.log_step('statistics', 'success', None)
        return state

    def find_similar_cases(self, outcome: str) -> List[Dict[str, Any]]:
        """
        Ask the AI service for precedents matching an outcome

        Returns:
            Normalised case records; empty when the AI path is unavailable
            or its answer is unusable
        """
        if self.gemini_client is None:
            logger.info("Similar cases unavailable: no AI client configured")
            return []

        try:
            raw = self.gemini_client.generate_similar_cases(outcome)
        except Exception as e:
            logger.warning("Similar cases request failed: %s", e)
            return []

        parsed = parse_similar_cases(raw)
        if isinstance(parsed, ParseFailure):
            logger.warning("Unusable similar cases response: %s", parsed.reason)
            return []

        return parsed.cases

    def get_summary(self, state: PredictionState) -> Dict[str, Any]:
        """
        Get workflow execution summary

        Args:
            state: PredictionState

        Returns:
            Summary dictionary
        """
        summary = {
            'request_id': state.request_id,
            'status': state.status.value,
            'execution_time': state.updated_at,
            'steps_completed': len([log for log in state.execution_log if log['status'] == 'success']),
            'errors_count': len(state.errors),
            'warnings_count': len(state.warnings),
            'source': state.source.value if state.source else None,
        }

        if state.result:
            summary['outcome'] = state.result.outcome
            summary['confidence'] = state.result.confidence
            summary['factor_count'] = len(state.result.factors)
            summary['top_factor'] = state.result.factors[0].name if state.result.factors else None
        else:
            summary['outcome'] = None
            summary['confidence'] = None
            summary['factor_count'] = 0
            summary['top_factor'] = None

        return summary


def create_orchestrator(settings: Optional[PredictorSettings] = None) -> PredictionOrchestrator:
    """
    Build an orchestrator from settings

    The Gemini client is attached only when AI is enabled and a key is set.
    """
    settings = settings or PredictorSettings()
    configure_logging(settings.log_level)

    gemini_client = None
    if settings.ai_available:
        gemini_client = GeminiPredictionClient.from_settings(settings)
        logger.info("Gemini prediction enabled: %s", gemini_client.describe())
    else:
        logger.info("Gemini prediction disabled; using the deterministic engine only")

    return PredictionOrchestrator(gemini_client=gemini_client)
