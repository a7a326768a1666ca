import json
import logging
import uuid

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import Response
from pydantic import BaseModel

from . import prompts
from .config import Settings
from .conversation import ConversationManager
from .errors import DuplicateSession, SessionNotFound
from .extraction import ExtractionAdapter
from .judgment import JudgmentEngine
from .openai_helper import StructuredOracle
from .session_store import SessionStore

settings = Settings.from_env()

# basic logger for the hotline package
logger = logging.getLogger('hotline')
if not logger.handlers:
    # default handler for local runs/tests
    h = logging.StreamHandler()
    fmt = logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s')
    h.setFormatter(fmt)
    logger.addHandler(h)
    logger.setLevel(settings.log_level.upper())


def build_manager(settings: Settings) -> ConversationManager:
    extraction_oracle = StructuredOracle(
        settings.openai_api_key,
        model=settings.extraction_model,
        temperature=settings.extraction_temperature,
        timeout=settings.oracle_timeout,
    )
    judgment_oracle = StructuredOracle(
        settings.openai_api_key,
        model=settings.judgment_model,
        temperature=settings.judgment_temperature,
        timeout=settings.oracle_timeout,
    )
    return ConversationManager(
        SessionStore(),
        ExtractionAdapter(extraction_oracle, timeout=settings.oracle_timeout),
        JudgmentEngine(judgment_oracle, timeout=settings.oracle_timeout),
    )


# one store and manager per process; sessions live only in memory
manager = build_manager(settings)

app = FastAPI(title="Who's Right? - Hotline")


class SessionRef(BaseModel):
    id: str


class AskRequest(BaseModel):
    id: str
    prompt: str


@app.get('/health')
async def health():
    return {'status': 'ok'}


@app.api_route('/twiml', methods=['GET', 'POST'])
async def twiml():
    """TwiML that hands the call to ConversationRelay on our WebSocket."""
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<Response><Connect>'
        f'<ConversationRelay url="{settings.ws_url}" welcomeGreeting="{prompts.WELCOME_GREETING}" '
        f'ttsProvider="{settings.tts_provider}" voice="{settings.tts_voice}" />'
        '</Connect></Response>'
    )
    return Response(content=body, media_type='text/xml')


@app.websocket('/ws')
async def voice_gateway(ws: WebSocket):
    await ws.accept()
    session_id = None
    try:
        while True:
            raw = await ws.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning('[ws] ignoring non-JSON frame')
                continue
            if not isinstance(data, dict):
                logger.warning('[ws] ignoring non-object frame')
                continue

            kind = data.get('type')
            if kind == 'setup':
                if not data.get('callSid'):
                    logger.warning('[ws] setup without callSid')
                    continue
                if session_id is not None and session_id != data['callSid']:
                    logger.warning('[ws] setup for a new call replaces %s', session_id)
                    manager.teardown(session_id)
                session_id = data['callSid']
                logger.info('[ws] setup for call %s', session_id)
                try:
                    manager.setup(session_id)
                except DuplicateSession:
                    logger.warning('[ws] session %s already set up; keeping it', session_id)
            elif kind == 'prompt':
                prompt = data.get('voicePrompt', '')
                logger.debug('[ws] prompt for %s: %s', session_id, prompt)
                try:
                    envelope = await manager.process_turn(prompt, session_id)
                except SessionNotFound:
                    logger.warning('[ws] prompt for unknown session %s', session_id)
                    continue
                await ws.send_json({'type': 'text', 'token': envelope.content, 'last': True})
                logger.debug('[ws] sent response to %s: %s', session_id, envelope.content)
            elif kind == 'interrupt':
                logger.info('[ws] interruption on %s', session_id)
            else:
                logger.warning('[ws] unknown message type received: %s', kind)
    except WebSocketDisconnect:
        logger.info('[ws] connection closed for %s', session_id)
    finally:
        if session_id is not None:
            manager.teardown(session_id)


@app.post('/rpc/setup')
async def rpc_setup():
    sid = str(uuid.uuid4())
    manager.setup(sid)
    return sid


@app.post('/rpc/ask')
async def rpc_ask(payload: AskRequest):
    try:
        envelope = await manager.process_turn(payload.prompt, payload.id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail='session not found')
    return envelope.to_wire()


@app.post('/rpc/getParticipants')
async def rpc_get_participants(payload: SessionRef):
    try:
        participants = manager.participants(payload.id)
    except SessionNotFound:
        return []
    return [p.model_dump() for p in participants]


def run():
    import uvicorn

    uvicorn.run('hotline.main:app', host='0.0.0.0', port=settings.port)
