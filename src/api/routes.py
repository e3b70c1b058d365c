"""FastAPI routes exposing the conversation controller."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from api.dependencies import Runtime, get_runtime
from api.schemas import AcceptSummaryRequest, SendMessageRequest
from journal.errors import JournalError
from journal.schemas import ChatState, SpeechState
from storage.files import SaveResult

LOGGER = logging.getLogger(__name__)

router = APIRouter()

WAV_CONTENT_TYPES = {"audio/wav", "audio/x-wav", "audio/wave"}


@router.get("/chat", response_model=ChatState)
async def get_chat(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    return runtime.controller.state


@router.post("/chat/messages", response_model=ChatState)
async def send_message(
    request: SendMessageRequest,
    runtime: Runtime = Depends(get_runtime),
) -> ChatState:
    task = runtime.controller.send_message(request.text)
    if task is None:
        raise HTTPException(status_code=409, detail="A request is already in progress.")
    # Shielded so a client disconnect never cancels the conversation update.
    await asyncio.shield(task)
    return runtime.controller.state


@router.post("/chat/clear", response_model=ChatState)
async def clear_chat(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.clear_chat()
    return runtime.controller.state


@router.delete("/chat/error", response_model=ChatState)
async def clear_error(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.clear_error()
    return runtime.controller.state


@router.delete("/chat/notice", response_model=ChatState)
async def clear_notice(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.clear_save_success()
    return runtime.controller.state


@router.post("/chat/journal", response_model=ChatState)
async def generate_journal_entry(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    task = runtime.controller.save_journal_entry()
    if task is None:
        raise HTTPException(
            status_code=409,
            detail="A journal entry is already being generated, reviewed or saved.",
        )
    await asyncio.shield(task)
    return runtime.controller.state


@router.post("/chat/journal/accept", response_model=ChatState)
async def accept_journal_entry(
    request: AcceptSummaryRequest,
    runtime: Runtime = Depends(get_runtime),
) -> ChatState:
    controller = runtime.controller
    if not controller.accept_summary_and_save(request.content):
        raise HTTPException(status_code=409, detail="No journal entry is awaiting review.")

    result = SaveResult(success=False)
    try:
        result = await runtime.storage.save(request.content, runtime.storage.journal_entry_filename())
    finally:
        controller.on_file_saved(result.success, result.location)
    return controller.state


@router.post("/chat/journal/reject", response_model=ChatState)
async def reject_journal_entry(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.reject_summary()
    return runtime.controller.state


@router.post("/chat/transcript", response_model=ChatState)
async def prepare_transcript(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    if runtime.controller.save_chat_transcript() is None:
        raise HTTPException(status_code=409, detail="A transcript export is already pending.")
    return runtime.controller.state


@router.post("/chat/transcript/confirm", response_model=ChatState)
async def confirm_transcript(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    controller = runtime.controller
    transcript = controller.state.pending_transcript
    if transcript is None:
        raise HTTPException(status_code=409, detail="No transcript is awaiting export.")

    result = SaveResult(success=False)
    try:
        result = await runtime.storage.save(transcript, runtime.storage.transcript_filename())
    finally:
        controller.on_transcript_saved(result.success, result.location)
    return controller.state


@router.post("/chat/transcript/cancel", response_model=ChatState)
async def cancel_transcript(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.on_transcript_saved(False)
    return runtime.controller.state


@router.post("/chat/modes/input", response_model=ChatState)
async def toggle_input_mode(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.toggle_input_mode()
    return runtime.controller.state


@router.post("/chat/modes/output", response_model=ChatState)
async def toggle_output_mode(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.toggle_output_mode()
    return runtime.controller.state


@router.post("/speech/listen", response_model=ChatState)
async def start_listening(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    controller = runtime.controller
    try:
        task = controller.start_listening()
    except JournalError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    if task is None:
        raise HTTPException(status_code=409, detail="Cannot start listening right now.")
    return controller.state


@router.post("/speech/audio", response_model=ChatState)
async def upload_utterance(
    audio_file: UploadFile = File(...),
    runtime: Runtime = Depends(get_runtime),
) -> ChatState:
    if audio_file.content_type not in WAV_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported audio format.")
    controller = runtime.controller
    if controller.speech_state is not SpeechState.LISTENING:
        raise HTTPException(status_code=409, detail="Not listening.")

    runtime.audio_source.submit(await audio_file.read())
    await asyncio.shield(controller.wait_idle())
    return controller.state


@router.post("/speech/stop-listening", response_model=ChatState)
async def stop_listening(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.stop_listening()
    return runtime.controller.state


@router.post("/speech/stop-speaking", response_model=ChatState)
async def stop_speaking(runtime: Runtime = Depends(get_runtime)) -> ChatState:
    runtime.controller.stop_speaking()
    return runtime.controller.state


@router.get("/speech/output")
async def take_speech_output(runtime: Runtime = Depends(get_runtime)) -> Response:
    clip = runtime.audio_sink.take()
    if clip is None:
        raise HTTPException(status_code=404, detail="No synthesized audio available.")
    return Response(content=clip.audio, media_type=clip.mime_type)
