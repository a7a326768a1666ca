import asyncio
import time

import pytest

from hotline.errors import ExtractionFailed, OracleError
from hotline.extraction import ExtractionAdapter
from hotline.models import Action, ConversationState, QuestionData


def _extract(adapter, utterance='hello', state=ConversationState.COLLECTING_QUESTION, data=None, history=()):
    return asyncio.run(adapter.extract(utterance, state, data or QuestionData(), history))


def test_extracts_question_and_answers(stub_oracle, make_extraction):
    oracle = stub_oracle(make_extraction(
        question="Who's faster, a cheetah or an eagle?",
        answers=[('Jack', 'cheetah', 'unknown'), ('Lori', 'eagle', 'wife')],
        state='ready_for_judgment',
        action='analyze_and_respond',
    ))
    result = _extract(ExtractionAdapter(oracle), "Jack says cheetah, my wife Lori says eagle")

    assert result.action is Action.ANALYZE_AND_RESPOND
    assert result.next_state is ConversationState.READY_FOR_JUDGMENT
    assert result.question == "Who's faster, a cheetah or an eagle?"
    assert [(a.person, a.position, a.relationship) for a in result.answers] == [
        ('Jack', 'cheetah', 'unknown'),
        ('Lori', 'eagle', 'wife'),
    ]
    assert oracle.calls[0]['schema_name'] == 'conversation_response'


def test_blank_question_and_relationship_are_normalised(stub_oracle, make_extraction):
    payload = make_extraction(question='  ', answers=[('Jack', 'cheetah', '')])
    result = _extract(ExtractionAdapter(stub_oracle(payload)))
    assert result.question is None
    assert result.answers[0].relationship == 'unknown'


def test_missing_relationship_defaults_to_unknown(stub_oracle, make_extraction):
    payload = make_extraction(answers=[('Jack', 'cheetah', 'x')])
    del payload['extracted_data']['answers'][0]['person_relationship']
    result = _extract(ExtractionAdapter(stub_oracle(payload)))
    assert result.answers[0].relationship == 'unknown'


def test_prompt_carries_state_data_and_utterance(stub_oracle, make_extraction):
    oracle = stub_oracle(make_extraction())
    data = QuestionData(question='cats or dogs?')
    _extract(ExtractionAdapter(oracle), 'Jack says cats', ConversationState.COLLECTING_ANSWERS, data,
             history=[('user', 'cats or dogs?'), ('assistant', 'Who says what?')])

    messages = oracle.calls[0]['messages']
    system = messages[0]['content']
    assert messages[0]['role'] == 'system'
    assert 'collecting_answers' in system
    assert 'cats or dogs?' in system
    assert '"Jack says cats"' in system
    assert [m['role'] for m in messages[1:]] == ['user', 'assistant', 'user']
    assert messages[-1]['content'] == 'Jack says cats'


@pytest.mark.parametrize('bad', [
    {},
    {'action': 'collect_more'},
    'not an object',
])
def test_malformed_output_fails(stub_oracle, bad):
    with pytest.raises(ExtractionFailed):
        _extract(ExtractionAdapter(stub_oracle(bad)))


def test_unknown_state_fails(stub_oracle, make_extraction):
    with pytest.raises(ExtractionFailed):
        _extract(ExtractionAdapter(stub_oracle(make_extraction(state='judging'))))


def test_extra_fields_are_rejected(stub_oracle, make_extraction):
    payload = make_extraction()
    payload['confidence'] = 0.9
    with pytest.raises(ExtractionFailed):
        _extract(ExtractionAdapter(stub_oracle(payload)))


def test_blank_person_name_is_rejected(stub_oracle, make_extraction):
    payload = make_extraction(answers=[('  ', 'cheetah', 'unknown')])
    with pytest.raises(ExtractionFailed):
        _extract(ExtractionAdapter(stub_oracle(payload)))


def test_oracle_errors_collapse_to_extraction_failed(stub_oracle):
    for exc in (OracleError('no content'), ConnectionError('unreachable')):
        with pytest.raises(ExtractionFailed):
            _extract(ExtractionAdapter(stub_oracle(exc)))


def test_slow_oracle_times_out(stub_oracle, make_extraction):
    def slow(messages):
        time.sleep(0.5)
        return make_extraction()

    with pytest.raises(ExtractionFailed, match='timed out'):
        _extract(ExtractionAdapter(stub_oracle(slow), timeout=0.05))
