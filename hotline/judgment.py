"""
Verdicts for a completed round.

Two paths:

  WIFE OVERRIDE
    If any answer is tagged with a "wife" relationship, that person wins
    outright with a randomly chosen absurd justification. The oracle is not
    consulted.

  ADJUDICATION
    Otherwise the question and the numbered positions go to the judgment
    oracle, which must answer with {winner, explanation}. The winner is a
    participant name, "tie" or "none".

Every person in the round is put on the scoreboard (score 0) before either
path runs, so a failed adjudication still leaves them registered.
"""

import asyncio
import logging
import random
from typing import Optional

from pydantic import ValidationError

from . import prompts
from .errors import JudgmentFailed
from .models import Answer, JudgmentPayload, OutputEnvelope, QuestionData
from .scoreboard import Scoreboard
from .utils import truncate_topic

logger = logging.getLogger(__name__)

TIE = 'tie'
NONE = 'none'


def find_wife(answers: list[Answer]) -> Optional[Answer]:
    for answer in answers:
        if answer.is_wife():
            return answer
    return None


class JudgmentEngine:
    def __init__(self, oracle, timeout: float = 20.0, rng: random.Random | None = None):
        self.oracle = oracle
        self.timeout = timeout
        self.rng = rng or random.Random()

    async def judge(self, question_data: QuestionData, scoreboard: Scoreboard) -> OutputEnvelope:
        if len(question_data.answers) < 2:
            raise ValueError('a judgment needs at least two answers')

        for answer in question_data.answers:
            scoreboard.register(answer.person)

        wife = find_wife(question_data.answers)
        if wife is not None:
            return self._wife_verdict(question_data, wife, scoreboard)

        try:
            winner, explanation = await self.adjudicate(question_data)
        except JudgmentFailed:
            logger.exception('judgment failed')
            return OutputEnvelope(
                type='message',
                content=prompts.JUDGMENT_FALLBACK_MESSAGE,
                participants=scoreboard.snapshot(),
            )

        if winner not in (TIE, NONE):
            scoreboard.award(winner)
        return OutputEnvelope(
            type='judgment',
            content=compose_verdict(question_data.question, winner, explanation),
            winner=winner,
            participants=scoreboard.snapshot(),
        )

    def _wife_verdict(self, question_data: QuestionData, wife: Answer, scoreboard: Scoreboard) -> OutputEnvelope:
        scoreboard.award(wife.person)
        reason = self.rng.choice(prompts.ABSURD_REASONS)
        text = prompts.WIFE_VERDICT_TEMPLATE.format(topic=truncate_topic(question_data.question), reason=reason)
        logger.info('wife override: %s wins', wife.person)
        return OutputEnvelope(type='judgment', content=text, winner=wife.person, participants=scoreboard.snapshot())

    async def adjudicate(self, question_data: QuestionData) -> tuple[str, str]:
        """Ask the oracle who is right. Returns (winner, explanation)."""
        prompt = prompts.JUDGMENT_PROMPT_TEMPLATE.format(
            question=question_data.question,
            positions=prompts.format_positions(question_data.answers),
        )
        messages = [{'role': 'user', 'content': prompt}]
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self.oracle.complete, messages, 'judgment_response', prompts.JUDGMENT_SCHEMA),
                timeout=self.timeout,
            )
            payload = JudgmentPayload.model_validate(raw)
        except asyncio.TimeoutError as e:
            raise JudgmentFailed('judgment oracle timed out') from e
        except ValidationError as e:
            raise JudgmentFailed('judgment output failed validation') from e
        except Exception as e:
            raise JudgmentFailed(str(e)) from e

        winner = resolve_winner(payload.winner, question_data.answers)
        if winner is None:
            raise JudgmentFailed(f'judgment named an unknown winner: {payload.winner!r}')
        return winner, payload.explanation.strip()


def resolve_winner(name: str, answers: list[Answer]) -> Optional[str]:
    """Map the oracle's winner onto a participant's recorded name, tie or none.

    An exact participant name wins over the tokens, so someone called "Tie"
    can still be awarded the point.
    """
    name = name.strip()
    for answer in answers:
        if answer.person == name:
            return answer.person
    key = name.lower()
    if key in (TIE, NONE):
        return key
    for answer in answers:
        if answer.person.lower() == key:
            return answer.person
    return None


def compose_verdict(question: str, winner: str, explanation: str) -> str:
    text = prompts.VERDICT_OPENING_TEMPLATE.format(topic=truncate_topic(question))
    if winner == TIE:
        text += "it's a tie! "
    elif winner == NONE:
        text += 'nobody is right this time! '
    else:
        text += f'{winner} is right! '
    return f'{text}{explanation} {prompts.SIGN_OFF}'
