import os

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import FileResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from chatbot.constants import AI_ERROR_REPLY
from chatbot.dialogue import DialogueRouter
from chatbot.logger import logger

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


def create_app(router: DialogueRouter) -> FastAPI:
    fastapi_app = FastAPI()

    @fastapi_app.post("/api/chat")
    async def chat(request: Request):
        try:
            data = await request.json()
        except Exception:
            raise HTTPException(status_code=400, detail="No JSON received")

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, str):
            raise HTTPException(status_code=400, detail="Field 'message' must be a string")

        logger.debug("Received message from client: %s", message)
        try:
            # The router may block on file writes and the model call
            result = await run_in_threadpool(router.handle_message, message)
        except Exception:
            logger.exception("Error in /api/chat")
            return JSONResponse({"reply": AI_ERROR_REPLY}, status_code=500)

        payload = {"reply": result.reply}
        if result.action:
            payload["action"] = result.action
        return JSONResponse(payload)

    @fastapi_app.get("/")
    async def index():
        return FileResponse(os.path.join(STATIC_DIR, "index.html"))

    @fastapi_app.get("/health")
    async def health():
        return JSONResponse({"status": "ok"})

    return fastapi_app
