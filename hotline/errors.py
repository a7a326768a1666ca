class HotlineError(Exception):
    """Base class for errors raised by the hotline core."""


class SessionNotFound(HotlineError, KeyError):
    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self):
        return f'session not found: {self.session_id}'


class DuplicateSession(HotlineError):
    def __init__(self, session_id: str):
        super().__init__(f'session already exists: {session_id}')
        self.session_id = session_id


class OracleError(HotlineError):
    """The language model could not be reached or returned no usable content."""


class ExtractionFailed(HotlineError):
    pass


class JudgmentFailed(HotlineError):
    pass
