import logging

from . import prompts
from .errors import ExtractionFailed, SessionNotFound
from .models import ConversationState, OutputEnvelope, Participant
from .session_store import Session, SessionStore

logger = logging.getLogger(__name__)


class ConversationManager:
    """Drives one turn of a Who's Right conversation.

    The extractor classifies each utterance; this class merges what it found
    into the session and, once a round has two or more answers, hands the
    round to the judge. Turns on the same session run one at a time.
    """

    def __init__(self, store: SessionStore, extractor, judge):
        self.store = store
        self.extractor = extractor
        self.judge = judge

    def setup(self, session_id: str) -> Session:
        return self.store.create(session_id)

    def teardown(self, session_id: str) -> None:
        self.store.delete(session_id)

    def participants(self, session_id: str) -> list[Participant]:
        return self.store.get(session_id).scores.snapshot()

    async def process_turn(self, utterance: str, session_id: str) -> OutputEnvelope:
        sess = self.store.get(session_id)
        async with sess.lock:
            envelope = await self._run_turn(sess, utterance)
            sess.history.append(('assistant', envelope.content))
        return envelope

    async def _run_turn(self, sess: Session, utterance: str) -> OutputEnvelope:
        prior = list(sess.history)
        sess.history.append(('user', utterance))

        try:
            result = await self.extractor.extract(utterance, sess.state, sess.question_data, prior)
        except ExtractionFailed:
            logger.warning('extraction failed for session %s', sess.id)
            return self._message(sess, prompts.APOLOGY_MESSAGE)

        if not self.store.owns(sess):
            logger.info('session %s closed during extraction; discarding result', sess.id)
            raise SessionNotFound(sess.id)

        if result.question:
            sess.question = result.question
        sess.answers.extend(result.answers)
        sess.state = result.next_state
        if len(sess.answers) >= 2:
            sess.state = ConversationState.READY_FOR_JUDGMENT
        logger.debug('session %s: state=%s answers=%d', sess.id, sess.state.value, len(sess.answers))

        if sess.state is not ConversationState.READY_FOR_JUDGMENT or len(sess.answers) < 2:
            return self._message(sess, result.next_prompt)

        verdict = await self.judge.judge(sess.question_data, sess.scores)
        if not self.store.owns(sess):
            logger.info('session %s closed during judgment; discarding verdict', sess.id)
            raise SessionNotFound(sess.id)
        if verdict.type == 'judgment':
            logger.info('session %s: verdict, winner=%s', sess.id, verdict.winner)
            sess.start_new_round()
        return verdict

    @staticmethod
    def _message(sess: Session, text: str) -> OutputEnvelope:
        return OutputEnvelope(type='message', content=text, participants=sess.scores.snapshot())
