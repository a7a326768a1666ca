import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--real-api",
        action="store_true",
        default=False,
        help="Run tests that call the real OpenAI API (must set OPENAI_API_KEY).",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "real_api: calls the live OpenAI API")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--real-api"):
        return
    skip = pytest.mark.skip(reason="needs --real-api")
    for item in items:
        if "real_api" in item.keywords:
            item.add_marker(skip)


class StubOracle:
    """Deterministic oracle: replays queued responses and records each call.

    A queued Exception is raised; a callable is invoked with the messages.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def complete(self, messages, schema_name, schema):
        self.calls.append({'messages': messages, 'schema_name': schema_name, 'schema': schema})
        if not self.responses:
            raise AssertionError('oracle called more times than expected')
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        if callable(resp):
            return resp(messages)
        return resp


def extraction(question='', answers=(), state='collecting_answers', action='collect_more',
               next_prompt='Who else has an opinion? Say "done" when finished.'):
    return {
        'action': action,
        'extracted_data': {
            'question': question,
            'answers': [
                {'person_name': name, 'person_position': position, 'person_relationship': rel}
                for name, position, rel in answers
            ],
        },
        'next_prompt': next_prompt,
        'conversation_state': state,
    }


@pytest.fixture
def stub_oracle():
    return StubOracle


@pytest.fixture
def make_extraction():
    return extraction
