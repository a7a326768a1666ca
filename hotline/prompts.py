WELCOME_GREETING = (
    "Welcome to Who's Right! Please describe your question or debate, "
    "then tell me what each person said."
)

APOLOGY_MESSAGE = (
    "I'm sorry, I had trouble processing that. Could you please repeat "
    "your question and the different positions?"
)

JUDGMENT_FALLBACK_MESSAGE = (
    "I'm having trouble making a judgment right now. Please try calling back later!"
)

SIGN_OFF = "Thanks for calling Who's Right!"

WIFE_VERDICT_TEMPLATE = (
    "Based on the question about {topic}, the wife is absolutely, unequivocally right! "
    "{reason} Thanks for calling Who's Right, where wives are always right by the "
    "immutable laws of the universe!"
)

VERDICT_OPENING_TEMPLATE = "Based on the question about {topic}, "

ABSURD_REASONS = (
    "According to the ancient laws of quantum matrimony, wives exist in a superposition of always "
    "being correct until observed by husbands, at which point they collapse into a state of "
    "absolute rightness.",
    "Recent studies by the Institute of Marital Dynamics have proven that wives have a direct "
    "neural connection to the Universal Truth Database, which is why they can predict when you'll "
    "need a jacket before you even know it's cold outside.",
    "The wife's answer aligns perfectly with the Fibonacci sequence of domestic wisdom, where each "
    "correct wifely prediction builds upon the previous one in a mathematically beautiful spiral "
    "of rightness.",
    "Wives have evolved a sixth sense called 'Spousal Correctness Radar' that operates on "
    "frequencies invisible to husbands but detectable by advanced AI systems like myself.",
    "According to the little-known Murphy's Law of Marriage: 'Anything that can go wrong will go "
    "wrong, unless the wife predicted it first, in which case she was obviously right all along.'",
    "The wife's position demonstrates clear evidence of having consulted the Sacred Scrolls of "
    "Household Wisdom, passed down through generations of mothers-in-law.",
    "Wives possess a rare genetic mutation called the 'I-Told-You-So' gene, which grants them "
    "prophetic abilities in all matters domestic and beyond.",
    "The wife's answer shows she has clearly been attending the secret monthly meetings of the "
    "International Council of Wives, where all correct answers are distributed in advance.",
    "Scientists have recently discovered that wives operate on 'Wife Time,' which is actually 4.7 "
    "minutes ahead of regular time, allowing them to see outcomes before they happen.",
    "The wife's response indicates she has been secretly trained by the Department of Marital "
    "Intelligence, a shadowy organization that ensures wives always have the correct information.",
)


EXTRACTION_PROMPT_TEMPLATE = """
You are helping with a "Who's Right?" hotline. Users call in to get AI judgment on debates.

The flow of the conversation is as follows:
1. Collect the question
2. Collect the answers
3. Make the judgment

If the initial prompt contains the question as well as the answers, then the next conversation state should be "ready_for_judgment".
Once you have all of the participants answers, then the next conversation state should be "ready_for_judgment".
Do not ask for clarification, just collect the answers. If something is missing, ask the user to supply it next.
If there are 2 or more participants, then the conversation state should be "ready_for_judgment".

If you are prompting for more answers, tell the user to say "done" when they are finished.
If the user says "done", then the next conversation state should be "ready_for_judgment".

If the user says "wife", then the person relationship should be "wife".
Otherwise, the person relationship should be "unknown". It's acceptable if the person relationship is "unknown".

Only report answers that are new in the latest message; answers already in the question data are stored.
Leave "question" empty if the latest message does not state or change the question.

Current conversation state: {state}
Current question data: {question_data}

The user just said: "{utterance}"

IMPORTANT: person_name is the NAME OF THE PERSON making the argument, NOT the content of their argument. For example:
- If someone says "lori says cheetah", then person_name = "lori" and person_position = "cheetah"
- If someone says "jack says eagle", then person_name = "jack" and person_position = "eagle"
"""


JUDGMENT_PROMPT_TEMPLATE = """
You are an AI judge for a "Who's Right?" hotline. Be fair, logical, and decisive.

QUESTION: {question}

POSITIONS:
{positions}

Analyze each position and determine who is right. Consider:
- Factual accuracy
- Logical reasoning
- Practical considerations
- Safety implications if relevant

Keep the explanation to 2-3 sentences in a conversational tone suitable for voice delivery.

IMPORTANT: The winner field must contain the exact name of the PERSON who is right, not the content of their answer.
For example, if "lori" said "cheetah" and cheetah is the correct answer, then winner should be "lori", not "cheetah".
Use "tie" if more than one person is right and "none" if nobody is right.
"""


EXTRACTION_SCHEMA = {
    'type': 'object',
    'properties': {
        'action': {
            'type': 'string',
            'enum': ['collect_more', 'analyze_and_respond'],
            'description': 'What action to take next',
        },
        'extracted_data': {
            'type': 'object',
            'properties': {
                'question': {
                    'type': 'string',
                    'description': 'The main question being debated',
                },
                'answers': {
                    'type': 'array',
                    'items': {
                        'type': 'object',
                        'properties': {
                            'person_relationship': {
                                'type': 'string',
                                'description': 'The relationship of the person (wife, unknown, etc.)',
                            },
                            'person_name': {
                                'type': 'string',
                                'description': 'The name of the person providing an answer',
                            },
                            'person_position': {
                                'type': 'string',
                                'description': 'The position or answer provided by the person',
                            },
                        },
                        'additionalProperties': False,
                        'required': ['person_relationship', 'person_name', 'person_position'],
                    },
                },
            },
            'additionalProperties': False,
            'required': ['question', 'answers'],
        },
        'next_prompt': {
            'type': 'string',
            'description': 'What to say to the user next',
        },
        'conversation_state': {
            'type': 'string',
            'enum': ['collecting_question', 'collecting_answers', 'ready_for_judgment'],
            'description': 'The current state of the conversation',
        },
    },
    'required': ['action', 'extracted_data', 'next_prompt', 'conversation_state'],
    'additionalProperties': False,
}


JUDGMENT_SCHEMA = {
    'type': 'object',
    'properties': {
        'winner': {
            'type': 'string',
            'description': (
                "Exact name of the PERSON who is right (not the content of their answer), "
                "or 'tie' if it's a tie, or 'none' if nobody is right"
            ),
        },
        'explanation': {
            'type': 'string',
            'description': 'Brief explanation (2-3 sentences max) in conversational tone',
        },
    },
    'required': ['winner', 'explanation'],
    'additionalProperties': False,
}


def format_positions(answers) -> str:
    return '\n'.join(f'{i}. {a.person} says: {a.position}' for i, a in enumerate(answers, start=1))
