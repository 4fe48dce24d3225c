"""
HTTP surface for the lead bot.

Routes:
    POST /process  one chat message -> response, session snapshot, needs
    POST /reset    delete every session (test and ops use)
    GET  /         health check
    GET  /test     minimal browser chat for manual testing

This is the only place exceptions are turned into HTTP errors: input
errors become 400, anything else raised while processing becomes 500
with the fault's message. No retry, no rollback.
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse

from mavilda.config import settings
from mavilda.conversation.engine import ConversationEngine, InputError
from mavilda.logging_context import get_session_logger
from mavilda.schemas.api_schema import (
    ErrorResponse,
    HealthResponse,
    ProcessRequest,
    ProcessResponse,
    ResetResponse,
)

logger = get_session_logger(__name__)

ENDPOINTS = ["/process", "/reset", "/test"]

TEST_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Test {bot} Bot</title>
  <style>
    body {{ font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; }}
    #chat {{ border: 1px solid #ddd; height: 400px; overflow-y: auto; padding: 15px;
             margin-bottom: 10px; background: #f9f9f9; }}
    .user {{ background: #007bff; color: white; text-align: right; margin-left: 20%; }}
    .bot {{ background: white; border: 1px solid #ddd; margin-right: 20%; }}
    .message {{ margin: 10px 0; padding: 8px 12px; border-radius: 8px; white-space: pre-wrap; }}
    #msg {{ width: 70%; padding: 10px; }}
  </style>
</head>
<body>
  <h2>🚁 Test {bot} Bot - {company}</h2>
  <div id="chat"></div>
  <input id="msg" placeholder="Escribí tu mensaje..."
         onkeypress="if (event.key === 'Enter') send()">
  <button onclick="send()">Enviar</button>
  <script>
    const sessionId = 'test_' + Date.now();
    const chat = document.getElementById('chat');

    function show(text, cls) {{
      const div = document.createElement('div');
      div.className = 'message ' + cls;
      div.textContent = text;
      chat.appendChild(div);
      chat.scrollTop = chat.scrollHeight;
    }}

    async function send() {{
      const input = document.getElementById('msg');
      const msg = input.value.trim();
      if (!msg) return;
      show(msg, 'user');
      input.value = '';
      try {{
        const resp = await fetch('/process', {{
          method: 'POST',
          headers: {{'Content-Type': 'application/json'}},
          body: JSON.stringify({{message: msg, sessionId: sessionId}})
        }});
        const data = await resp.json();
        show(data.response || data.error, 'bot');
        console.log('Session:', data.session, 'Needs:', data.needs);
      }} catch (error) {{
        show('Error: ' + error.message, 'bot');
      }}
    }}
  </script>
</body>
</html>
"""


def create_app(engine: Optional[ConversationEngine] = None) -> FastAPI:
    """Build the FastAPI app around a conversation engine."""
    engine = engine if engine is not None else ConversationEngine()
    biz = settings.business
    app = FastAPI(title=f"{biz.bot_name} Bot - {biz.company_name}")
    app.state.engine = engine

    @app.post(
        "/process",
        response_model=ProcessResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def process(request: ProcessRequest):
        try:
            result = engine.process(request.message, request.session_id)
        except InputError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except Exception as exc:
            logger.exception("Error processing message")
            return JSONResponse(
                status_code=500,
                content={"error": "Error procesando mensaje", "details": str(exc)},
            )
        return result.to_response()

    @app.post("/reset", response_model=ResetResponse)
    def reset() -> ResetResponse:
        return ResetResponse(cleared=engine.reset_sessions())

    @app.get("/", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            name=f"{biz.bot_name} Bot - {biz.company_name}",
            version=settings.server.version,
            endpoints=ENDPOINTS,
            timestamp=datetime.now(timezone.utc),
        )

    @app.get("/test", response_class=HTMLResponse)
    def test_page() -> str:
        return TEST_PAGE.format(bot=biz.bot_name, company=biz.company_name)

    return app


app = create_app()
