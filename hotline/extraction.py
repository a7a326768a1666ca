import asyncio
import json
import logging
from typing import Iterable, Tuple

from pydantic import ValidationError

from . import prompts
from .errors import ExtractionFailed
from .models import ConversationState, ExtractionPayload, ExtractionResult, QuestionData

logger = logging.getLogger(__name__)

# prior turns forwarded to the oracle as context
HISTORY_WINDOW = 10


class ExtractionAdapter:
    """Turns a caller utterance into a structured delta via the oracle.

    Any failure (oracle unreachable, timeout, undecodable or off-schema
    output) is reported as a single ExtractionFailed.
    """

    def __init__(self, oracle, timeout: float = 20.0):
        self.oracle = oracle
        self.timeout = timeout

    def build_messages(self, utterance: str, state: ConversationState, question_data: QuestionData,
                       history: Iterable[Tuple[str, str]] = ()) -> list[dict]:
        system = prompts.EXTRACTION_PROMPT_TEMPLATE.format(
            state=ConversationState(state).value,
            question_data=json.dumps(question_data.model_dump(mode='json')),
            utterance=utterance,
        )
        messages = [{'role': 'system', 'content': system}]
        for role, text in list(history)[-HISTORY_WINDOW:]:
            messages.append({'role': role, 'content': text})
        messages.append({'role': 'user', 'content': utterance})
        return messages

    async def extract(self, utterance: str, state: ConversationState, question_data: QuestionData,
                      history: Iterable[Tuple[str, str]] = ()) -> ExtractionResult:
        messages = self.build_messages(utterance, state, question_data, history)
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self.oracle.complete, messages, 'conversation_response', prompts.EXTRACTION_SCHEMA),
                timeout=self.timeout,
            )
            payload = ExtractionPayload.model_validate(raw)
        except asyncio.TimeoutError as e:
            logger.warning('extraction timed out after %.1fs', self.timeout)
            raise ExtractionFailed('extraction oracle timed out') from e
        except ValidationError as e:
            logger.warning('extraction output failed validation: %s', e)
            raise ExtractionFailed('extraction output failed validation') from e
        except Exception as e:
            logger.exception('extraction oracle call failed')
            raise ExtractionFailed(str(e)) from e
        return ExtractionResult.from_payload(payload)
