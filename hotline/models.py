"""
Pydantic models shared by the hotline core.

The oracle payload models mirror the JSON schemas in `prompts.py` and are
used to reject anything the model returns outside that shape.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConversationState(str, Enum):
    COLLECTING_QUESTION = 'collecting_question'
    COLLECTING_ANSWERS = 'collecting_answers'
    READY_FOR_JUDGMENT = 'ready_for_judgment'


class Action(str, Enum):
    COLLECT_MORE = 'collect_more'
    ANALYZE_AND_RESPOND = 'analyze_and_respond'


UNKNOWN_RELATIONSHIP = 'unknown'


class Answer(BaseModel):
    person: str
    relationship: str = UNKNOWN_RELATIONSHIP
    position: str

    def is_wife(self) -> bool:
        return 'wife' in self.relationship.lower()


class QuestionData(BaseModel):
    question: str = ''
    answers: list[Answer] = Field(default_factory=list)


class Participant(BaseModel):
    name: str
    score: int


class OutputEnvelope(BaseModel):
    type: Literal['message', 'judgment']
    content: str
    winner: Optional[str] = None
    participants: list[Participant] = Field(default_factory=list)

    def to_wire(self) -> dict:
        return self.model_dump(mode='json', exclude_none=True)


# ---------------------------------------------------------------------------
# Oracle payloads
# ---------------------------------------------------------------------------

class _Strict(BaseModel):
    model_config = ConfigDict(extra='forbid')


class ExtractedAnswer(_Strict):
    person_name: str = Field(min_length=1)
    person_position: str
    # blank or missing relationships are read as "unknown"
    person_relationship: Optional[str] = None

    @field_validator('person_name')
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('person_name must not be blank')
        return value

    def to_answer(self) -> Answer:
        relationship = (self.person_relationship or '').strip() or UNKNOWN_RELATIONSHIP
        return Answer(person=self.person_name, relationship=relationship, position=self.person_position)


class ExtractedData(_Strict):
    question: str
    answers: list[ExtractedAnswer]


class ExtractionPayload(_Strict):
    action: Action
    extracted_data: ExtractedData
    next_prompt: str
    conversation_state: ConversationState


class ExtractionResult(BaseModel):
    """Structured delta for one utterance."""

    action: Action
    question: Optional[str] = None
    answers: list[Answer] = Field(default_factory=list)
    next_prompt: str
    next_state: ConversationState

    @classmethod
    def from_payload(cls, payload: ExtractionPayload) -> 'ExtractionResult':
        question = payload.extracted_data.question.strip() or None
        return cls(
            action=payload.action,
            question=question,
            answers=[a.to_answer() for a in payload.extracted_data.answers],
            next_prompt=payload.next_prompt,
            next_state=payload.conversation_state,
        )


class JudgmentPayload(_Strict):
    winner: str = Field(min_length=1)
    explanation: str = Field(min_length=1)
