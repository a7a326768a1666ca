import json
import logging
from typing import Any

from openai import OpenAI

from .errors import OracleError

logger = logging.getLogger(__name__)


def _get_text_from_completion(completion) -> str:
    # chat.completions shape: choices[0].message.content
    try:
        message = completion.choices[0].message
    except (AttributeError, IndexError, TypeError):
        raise OracleError('completion has no choices')
    refusal = getattr(message, 'refusal', None)
    if refusal:
        raise OracleError(f'model refused: {refusal}')
    content = getattr(message, 'content', None)
    if not content:
        raise OracleError('no response content received from model')
    return content


class StructuredOracle:
    """Chat-completions client that only accepts schema-constrained JSON.

    Every call asks for `response_format=json_schema` with `strict: true`
    and returns the decoded JSON object. The SDK's own retries are disabled:
    a failed call surfaces immediately and the caller decides what to say.
    """

    def __init__(self, api_key: str | None, model: str, temperature: float = 0.3, timeout: float = 20.0):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = None

    def _get_client(self):
        if not self.api_key:
            raise OracleError('OPENAI API key not provided')
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def complete(self, messages: list[dict], schema_name: str, schema: dict) -> Any:
        client = self._get_client()
        completion = client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            response_format={
                'type': 'json_schema',
                'json_schema': {'name': schema_name, 'schema': schema, 'strict': True},
            },
        )
        text = _get_text_from_completion(completion)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug('undecodable %s content: %r', schema_name, text)
            raise OracleError(f'{schema_name} response is not valid JSON: {e}') from e
