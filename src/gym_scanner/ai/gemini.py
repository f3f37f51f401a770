"""Google Gemini implementation of the Coach interface."""

import logging
import random
from typing import Any

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from ..core.config import (
    CHAT_UNAVAILABLE,
    DEFAULT_MODEL_NAME,
    EXPLANATION_UNAVAILABLE,
    FALLBACK_QUOTES,
)
from ..core.errors import ExtractionFailure
from ..core.models import ExtractedRoutine
from ..core.results import AiText, Degraded, Ok
from ..io.documents import UploadedDocument
from ..io.serializers import ValidationError, parse_extracted_routines
from .base import ChatMessage
from .prompts import CHAT_SYSTEM_PROMPT, EXPLAIN_PROMPT, EXTRACTION_PROMPT, QUOTE_PROMPT

logger = logging.getLogger(__name__)


class GeminiCoach:
    """
    Coach backed by a single Gemini GenerativeModel.

    The model is built once and reused for every call.  Pass ``model`` to
    substitute any object with ``generate_content`` and ``start_chat``.
    """

    def __init__(
        self,
        api_key: str | None,
        model_name: str = DEFAULT_MODEL_NAME,
        extraction_temperature: float = 0.2,
        chat_temperature: float = 0.7,
        model: Any = None,
        rng: random.Random | None = None,
    ) -> None:
        if model is None:
            if not api_key:
                logger.warning("No Gemini API key configured; AI features will be unavailable")
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self.model = model
        self.model_name = model_name
        self._extraction_config = GenerationConfig(temperature=extraction_temperature)
        self._chat_config = GenerationConfig(temperature=chat_temperature)
        self._rng = rng or random.Random()

    def extract(self, document: UploadedDocument) -> list[ExtractedRoutine]:
        """
        Read the routines out of a workout sheet.

        Raises:
            ExtractionFailure: On service errors or an unreadable answer
        """
        try:
            response = self.model.generate_content(
                [{"mime_type": document.mime_type, "data": document.data}, EXTRACTION_PROMPT],
                generation_config=self._extraction_config,
            )
            text = response.text
        except Exception as e:
            logger.error("Gemini extraction request for %s failed: %s", document.filename, e)
            raise ExtractionFailure("Error while analysing the workout sheet.") from e

        try:
            routines = parse_extracted_routines(text)
        except ValidationError as e:
            logger.error("Unusable extraction answer for %s: %s", document.filename, e)
            raise ExtractionFailure("Error while analysing the workout sheet.") from e

        logger.info("Extracted %d routine(s) from %s", len(routines), document.filename)
        return routines

    def explain(self, name: str, muscle_group: str) -> AiText:
        prompt = EXPLAIN_PROMPT.format(name=name, muscle_group=muscle_group)
        try:
            response = self.model.generate_content(prompt, generation_config=self._chat_config)
            return Ok(response.text.strip())
        except Exception as e:
            logger.warning("Gemini explanation for '%s' failed: %s", name, e)
            return Degraded(EXPLANATION_UNAVAILABLE, reason=str(e))

    def chat(self, message: str, history: list[ChatMessage]) -> AiText:
        gemini_history = [
            {"role": "user", "parts": [CHAT_SYSTEM_PROMPT]},
            {"role": "model", "parts": ["Understood."]},
        ]
        gemini_history += [
            {"role": "user" if m.role == "user" else "model", "parts": [m.text]} for m in history
        ]
        try:
            session = self.model.start_chat(history=gemini_history)
            response = session.send_message(message, generation_config=self._chat_config)
            return Ok(response.text.strip())
        except Exception as e:
            logger.warning("Gemini chat failed: %s", e)
            return Degraded(CHAT_UNAVAILABLE, reason=str(e))

    def quote(self) -> AiText:
        try:
            response = self.model.generate_content(QUOTE_PROMPT, generation_config=self._chat_config)
            text = response.text.strip()
        except Exception as e:
            logger.warning("Gemini quote failed: %s", e)
            return Degraded(self._rng.choice(FALLBACK_QUOTES), reason=str(e))
        if not text:
            return Degraded(self._rng.choice(FALLBACK_QUOTES), reason="empty answer")
        return Ok(text)
