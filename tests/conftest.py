"""Shared fakes for the Telegram bot and the OpenAI client."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from guidebot.fetcher import PlaceCandidate
from guidebot.llm import GuideLLM
from guidebot.pipeline import GuidePipeline
from guidebot.state import SessionStore


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeBot:
    """Records what would have been sent to Telegram."""

    def __init__(self):
        self.messages = []
        self.actions = []
        self.voices = []

    def send_message(self, chat_id, text, **kwargs):
        self.messages.append(SimpleNamespace(chat_id=chat_id, text=text, **kwargs))

    def send_chat_action(self, chat_id, action):
        self.actions.append((chat_id, action))

    def send_voice(self, chat_id, voice):
        self.voices.append((chat_id, voice.read()))


class FakeStreamingSpeech:
    def __init__(self, audio=b"OggS-audio", error=None):
        self.audio = audio
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        audio = self.audio

        class _Response:
            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def stream_to_file(self, path):
                with open(path, "wb") as f:
                    f.write(audio)

        return _Response()


def make_openai_client(filter_content=None, narration="Перед вами старая крепость.", speech=None):
    client = MagicMock()
    client.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=filter_content))]
    )
    client.responses.create.return_value = SimpleNamespace(output_text=narration)
    client.audio.speech.with_streaming_response = speech or FakeStreamingSpeech()
    return client


def place(title, meters, subtitle="Достопримечательность"):
    return PlaceCandidate(title=title, subtitle=subtitle, distance_meters=meters, distance_text=f"{meters} м")


def filter_answer(*places):
    return json.dumps({"places": [p.to_payload() for p in places]}, ensure_ascii=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(cooldown_seconds=60, told_ttl_seconds=3600, clock=clock)


@pytest.fixture
def fake_bot():
    return FakeBot()


@pytest.fixture
def make_pipeline(fake_bot, store):
    """Build a pipeline around a fixed candidate list; the finder records its calls."""

    def _make(candidates, client=None, use_audio_tts=False):
        client = client or make_openai_client()
        finder_calls = []

        def finder(coord):
            finder_calls.append(coord)
            return list(candidates)

        pipeline = GuidePipeline(fake_bot, GuideLLM(client), store, finder, use_audio_tts=use_audio_tts)
        pipeline.finder_calls = finder_calls
        pipeline.client = client
        return pipeline

    return _make
