import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from .errors import DuplicateSession, SessionNotFound
from .models import Answer, ConversationState, QuestionData
from .scoreboard import Scoreboard

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, session_id: str):
        self.id = session_id
        # (role, text) pairs, oldest first
        self.history: List[Tuple[str, str]] = []
        self.state = ConversationState.COLLECTING_QUESTION
        self.question = ''
        self.answers: List[Answer] = []
        self.scores = Scoreboard()
        self.last_round: Optional[QuestionData] = None
        self.lock = asyncio.Lock()

    @property
    def question_data(self) -> QuestionData:
        return QuestionData(question=self.question, answers=list(self.answers))

    def start_new_round(self) -> None:
        self.last_round = self.question_data
        self.question = ''
        self.answers = []
        self.state = ConversationState.COLLECTING_QUESTION


class SessionStore:
    """In-memory sessions keyed by the id the transport hands us."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def create(self, session_id: str) -> Session:
        if session_id in self._sessions:
            raise DuplicateSession(session_id)
        sess = Session(session_id)
        self._sessions[session_id] = sess
        logger.debug('created session %s', session_id)
        return sess

    def get(self, session_id: str) -> Session:
        sess = self._sessions.get(session_id)
        if sess is None:
            raise SessionNotFound(session_id)
        return sess

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.debug('deleted session %s', session_id)

    def owns(self, sess: Session) -> bool:
        """True while `sess` is still the live session for its id."""
        return self._sessions.get(sess.id) is sess

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
