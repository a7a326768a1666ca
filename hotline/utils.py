TOPIC_LIMIT = 50


def truncate_topic(question: str, limit: int = TOPIC_LIMIT) -> str:
    """Shorten a question for the spoken verdict.

    Questions longer than `limit` characters are cut to their first `limit`
    characters followed by an ellipsis.
    """
    if not question:
        return ''
    if len(question) > limit:
        return question[:limit] + '...'
    return question
