"""
Runtime configuration.

Values come from the environment (a local .env file is loaded first) so the
same build can run against the voice gateway, the chat front end, or tests.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    openai_api_key: str | None = None
    extraction_model: str = 'gpt-4o-mini'
    judgment_model: str = 'gpt-4o'
    extraction_temperature: float = 0.3
    judgment_temperature: float = 0.2
    # upper bound for a single oracle round trip
    oracle_timeout: float = 20.0
    public_domain: str | None = None
    tts_provider: str = 'ElevenLabs'
    tts_voice: str = 'RPEIZnKMqlQiZyZd1Dae'
    port: int = 8080
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'Settings':
        env = os.environ
        values = {
            'openai_api_key': env.get('OPENAI_API_KEY') or None,
            'public_domain': env.get('PUBLIC_DOMAIN') or env.get('NGROK_URL') or None,
        }
        optional = {
            'extraction_model': 'EXTRACTION_MODEL',
            'judgment_model': 'JUDGMENT_MODEL',
            'extraction_temperature': 'EXTRACTION_TEMPERATURE',
            'judgment_temperature': 'JUDGMENT_TEMPERATURE',
            'oracle_timeout': 'ORACLE_TIMEOUT_SECONDS',
            'tts_provider': 'TTS_PROVIDER',
            'tts_voice': 'TTS_VOICE',
            'port': 'PORT',
            'log_level': 'LOG_LEVEL',
        }
        for field, var in optional.items():
            if env.get(var):
                values[field] = env[var]
        return cls(**values)

    @property
    def ws_url(self) -> str:
        return f"wss://{self.public_domain or 'localhost'}/ws"
