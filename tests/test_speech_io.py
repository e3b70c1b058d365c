from __future__ import annotations

import asyncio

import pytest

from conftest import FakeSpeechEngine, settle
from config.providers import TTSProvider
from config.settings import AppSettings
from journal.errors import SpeechError, SpeechUnavailableError
from journal.schemas import SpeechState
from journal.speech_io import SpeechIOCoordinator


def test_toggle_input_mode_is_an_involution():
    coordinator = SpeechIOCoordinator(FakeSpeechEngine())

    assert coordinator.toggle_input_mode() is True
    assert coordinator.toggle_input_mode() is False
    assert coordinator.modes.input_is_speech is False


def test_begin_listening_requires_available_engine():
    coordinator = SpeechIOCoordinator(FakeSpeechEngine(available=False))

    with pytest.raises(SpeechUnavailableError):
        coordinator.begin_listening(request_in_flight=False)
    assert coordinator.state is SpeechState.IDLE


def test_begin_listening_is_noop_while_request_in_flight():
    coordinator = SpeechIOCoordinator(FakeSpeechEngine())

    assert coordinator.begin_listening(request_in_flight=True) is None
    assert coordinator.state is SpeechState.IDLE


def test_listen_returns_recognized_text_and_goes_idle():
    async def scenario():
        engine = FakeSpeechEngine()
        coordinator = SpeechIOCoordinator(engine)
        session = coordinator.begin_listening(request_in_flight=False)
        assert coordinator.state is SpeechState.LISTENING

        listening = asyncio.create_task(coordinator.listen(session))
        await settle()
        engine.hear("  I went hiking today ")
        assert await listening == "I went hiking today"
        assert coordinator.state is SpeechState.IDLE

    asyncio.run(scenario())


def test_recognition_error_surfaces_speech_error_and_goes_idle():
    async def scenario():
        engine = FakeSpeechEngine()
        coordinator = SpeechIOCoordinator(engine)
        session = coordinator.begin_listening(request_in_flight=False)

        listening = asyncio.create_task(coordinator.listen(session))
        await settle()
        engine.fail_listening(RuntimeError("microphone disconnected"))
        with pytest.raises(SpeechError) as excinfo:
            await listening
        assert excinfo.value.detail == "microphone disconnected"
        assert coordinator.state is SpeechState.IDLE

    asyncio.run(scenario())


def test_turning_speech_input_off_stops_listening():
    async def scenario():
        engine = FakeSpeechEngine()
        coordinator = SpeechIOCoordinator(engine)
        coordinator.toggle_input_mode()
        session = coordinator.begin_listening(request_in_flight=False)
        listening = asyncio.create_task(coordinator.listen(session))
        await settle()

        coordinator.toggle_input_mode()
        assert coordinator.state is SpeechState.IDLE
        assert engine.stop_listening_calls == 1
        assert await listening == ""

        coordinator.toggle_input_mode()
        assert coordinator.state is SpeechState.IDLE

    asyncio.run(scenario())


def test_stop_listening_is_idempotent_when_idle():
    engine = FakeSpeechEngine()
    coordinator = SpeechIOCoordinator(engine)

    coordinator.stop_listening()

    assert coordinator.state is SpeechState.IDLE
    assert engine.stop_listening_calls == 0


def test_speak_enters_speaking_for_the_duration():
    async def scenario():
        engine = FakeSpeechEngine()
        engine.hold_speech = True
        coordinator = SpeechIOCoordinator(engine)

        speaking = asyncio.create_task(coordinator.speak("Hello", AppSettings()))
        await settle()
        assert coordinator.state is SpeechState.SPEAKING
        assert coordinator.begin_listening(request_in_flight=False) is None

        engine.finish_speaking()
        await speaking
        assert coordinator.state is SpeechState.IDLE
        assert engine.spoken == ["Hello"]

    asyncio.run(scenario())


def test_turning_speech_output_off_stops_speaking():
    async def scenario():
        engine = FakeSpeechEngine()
        engine.hold_speech = True
        coordinator = SpeechIOCoordinator(engine)
        coordinator.toggle_output_mode()

        speaking = asyncio.create_task(coordinator.speak("Hello", AppSettings()))
        await settle()
        coordinator.toggle_output_mode()

        assert coordinator.state is SpeechState.IDLE
        assert engine.stop_speaking_calls == 1
        await speaking
        assert coordinator.state is SpeechState.IDLE

    asyncio.run(scenario())


def test_speak_skips_blank_text_and_is_not_started_while_listening():
    async def scenario():
        engine = FakeSpeechEngine()
        coordinator = SpeechIOCoordinator(engine)

        await coordinator.speak("   ", AppSettings())
        coordinator.begin_listening(request_in_flight=False)
        await coordinator.speak("Hello", AppSettings())

        assert engine.spoken == []
        assert coordinator.state is SpeechState.LISTENING

    asyncio.run(scenario())


def test_synthesis_failure_surfaces_speech_error():
    async def scenario():
        engine = FakeSpeechEngine()
        engine.speech_error = RuntimeError("voice unavailable")
        coordinator = SpeechIOCoordinator(engine)

        with pytest.raises(SpeechError):
            await coordinator.speak("Hello", AppSettings())
        assert coordinator.state is SpeechState.IDLE

    asyncio.run(scenario())


def test_state_changes_are_reported():
    changes = []
    engine = FakeSpeechEngine()
    coordinator = SpeechIOCoordinator(engine, on_change=lambda: changes.append(coordinator.state))

    coordinator.begin_listening(request_in_flight=False)
    coordinator.stop_listening()
    coordinator.set_voice_provider(TTSProvider.OPENAI)

    assert changes == [SpeechState.LISTENING, SpeechState.IDLE]
    assert engine.providers == [TTSProvider.OPENAI]
