import asyncio
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from api.dependencies import get_transcriber
from llm.providers.openai_provider import OpenAIProvider

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/transcribe")
async def transcribe(
    audio: Optional[UploadFile] = File(default=None),
    transcriber: OpenAIProvider = Depends(get_transcriber),
) -> dict:
    """Speech-to-text for recorded task input; the text is then sent to /buckets/assign."""
    if audio is None:
        raise HTTPException(status_code=400, detail="Missing audio file.")

    # Configuration errors are handled app-wide.
    transcriber.ensure_configured()

    content = await audio.read()
    try:
        text = await asyncio.to_thread(
            transcriber.transcribe,
            content,
            audio.filename or "audio.webm",
            audio.content_type or "application/octet-stream",
        )
    except (httpx.HTTPError, KeyError, ValueError) as e:
        logger.error(f"Failed to transcribe audio: {e}")
        raise HTTPException(status_code=500, detail="Failed to transcribe audio.")

    return {"text": text}
