import google.generativeai as genai
from typing import Any, Dict
import logging

from case_models import CaseInput
from knowledge import relevant_sections

logger = logging.getLogger(__name__)


class AIServiceError(Exception):
    """Raised when the Gemini service returns nothing usable"""


class GeminiPredictionClient:
    def __init__(
        self,
        api_key: str,
        model_name: str = 'gemini-2.0-flash',
        temperature: float = 0.2,
        max_output_tokens: int = 1000
    ):
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name)
        self.generation_config = {
            'temperature': temperature,
            'top_k': 40,
            'top_p': 0.8,
            'max_output_tokens': max_output_tokens,
        }

        self.system_prompts = {
            'prediction': """You are an AI legal assistant analyzing criminal cases to predict outcomes.
            Base your assessment on the case details provided and on how Indian courts typically dispose of similar matters.""",

            'similar_cases': """You are an AI legal research assistant specializing in finding similar criminal case precedents from Indian courts."""
        }

    @classmethod
    def from_settings(cls, settings) -> 'GeminiPredictionClient':
        """Create a client from PredictorSettings"""
        return cls(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            temperature=settings.temperature,
            max_output_tokens=settings.max_output_tokens
        )

    def build_prediction_prompt(self, case: CaseInput) -> str:
        """Build the prediction prompt with the strict JSON response schema"""
        sections = relevant_sections(case.case_type)
        sections_text = ', '.join(sections) if sections else 'Not specified'

        return f"""{self.system_prompts['prediction']}

CASE DETAILS:
Case Type: {case.case_type}
Court: {case.court or 'Not specified'}
Number of Witnesses: {case.witness_count}
Evidence / FIR Section: {case.evidence_signal}
Sections usually charged for this case type: {sections_text}
Case Facts: {case.case_facts or 'Not provided'}

RESPONSE REQUIREMENTS:
1. Criminal cases end in "Conviction" or "Acquittal"; never answer "Settlement" for them.
2. Confidence is a number between 0 and 1.
3. Every factor cites the specific case detail it relies on.

Provide the response in a strict JSON format with these fields:
{{
  "outcome": "Conviction" or "Acquittal",
  "confidence": number between 0 and 1,
  "explanation": "detailed explanation string",
  "factors": [
    {{
      "factor": "factor name string",
      "importance": number between 0 and 1,
      "reference": "specific reference to case details"
    }}
  ]
}}"""

    def build_similar_cases_prompt(self, outcome: str) -> str:
        """Build the similar-cases prompt for a predicted outcome"""
        return f"""{self.system_prompts['similar_cases']}

Generate 5 highly relevant case precedents for a criminal case with the following outcome: {outcome}

Provide the response in a strict JSON format with these exact fields:
[{{
  "id": "unique-case-identifier",
  "title": "Descriptive case title",
  "court": "Specific court name (e.g., Delhi High Court, Supreme Court)",
  "date": "YYYY-MM-DD format",
  "outcome": "{outcome}",
  "crimeType": "Specific type of crime",
  "relevance": number between 70 and 100,
  "keyFacts": ["concise key fact 1", "concise key fact 2", "concise key fact 3"]
}}]"""

    def generate_prediction(self, case: CaseInput) -> str:
        """
        Ask Gemini for a prediction

        Returns:
            Raw model text (expected to contain JSON)

        Raises:
            AIServiceError: if the model returns no text
        """
        return self._generate(self.build_prediction_prompt(case), purpose='prediction')

    def generate_similar_cases(self, outcome: str) -> str:
        """Ask Gemini for precedents matching an outcome; returns raw model text"""
        return self._generate(self.build_similar_cases_prompt(outcome), purpose='similar cases')

    def _generate(self, prompt: str, purpose: str) -> str:
        logger.debug("Requesting %s from %s", purpose, self.model_name)
        response = self.model.generate_content(prompt, generation_config=self.generation_config)

        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate was blocked or has no parts
            raise AIServiceError(f"Gemini returned no text for {purpose}: {e}") from e

        if not text or not text.strip():
            raise AIServiceError(f"Empty response from Gemini for {purpose}")

        logger.debug("Received %d characters of %s", len(text), purpose)
        return text

    def describe(self) -> Dict[str, Any]:
        """Client configuration, safe to log"""
        return {
            'model': self.model_name,
            'generation_config': dict(self.generation_config),
        }
