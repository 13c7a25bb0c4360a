# guidebot/llm.py
"""OpenAI-backed capabilities: interest filter, narration and speech."""
import json
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from openai import OpenAIError

from .config import USER_LANGUAGE
from .fetcher import Coordinate, PlaceCandidate
from .formatter import FILTER_PROMPT, build_sight_prompt, guide_instructions

FILTER_MODEL = "gpt-4o-mini"
GUIDE_MODEL = "gpt-4o"
TTS_MODEL = "gpt-4o-mini-tts"
TTS_VOICE = "alloy"
TTS_FORMAT = "opus"  # Telegram voice notes are OGG/Opus

T = TypeVar("T")


@dataclass
class LLMResult(Generic[T]):
    """Model output, or the safe default plus the reason it was used."""
    value: T
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


def parse_filter_response(content: Optional[str], places: List[PlaceCandidate]) -> LLMResult[List[PlaceCandidate]]:
    """Map a `{"places": [...]}` answer back onto the candidates that were sent.

    Items are matched by title; anything the model invented is dropped. Falls
    back to `places` when nothing usable remains.
    """
    try:
        data = json.loads(content or "")
    except ValueError:
        return LLMResult(places, "invalid JSON")
    picked = data.get("places") if isinstance(data, dict) else None
    if not isinstance(picked, list):
        return LLMResult(places, "no places array")

    by_title = {p.title: p for p in places}
    kept: Dict[str, PlaceCandidate] = {}
    for item in picked:
        title = None
        if isinstance(item, dict):
            t = item.get("title")
            title = t.get("text") if isinstance(t, dict) else t
        elif isinstance(item, str):
            title = item
        if isinstance(title, str) and title in by_title:
            kept[title] = by_title[title]
    if not kept:
        return LLMResult(places, "empty selection")
    return LLMResult(list(kept.values()))


class GuideLLM:
    def __init__(self, client, language: Dict[str, str] = USER_LANGUAGE):
        self.client = client
        self.language = language

    def filter_places(self, places: List[PlaceCandidate]) -> LLMResult[List[PlaceCandidate]]:
        if len(places) <= 1:
            return LLMResult(list(places))
        payload = json.dumps([p.to_payload() for p in places], ensure_ascii=False)
        try:
            resp = self.client.chat.completions.create(
                model=FILTER_MODEL,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": FILTER_PROMPT},
                    {"role": "user", "content": payload},
                ],
            )
            content = resp.choices[0].message.content
        except (OpenAIError, AttributeError, IndexError) as e:
            print(f"[LLM] filter request failed: {e}")
            return LLMResult(list(places), "request failed")

        result = parse_filter_response(content, places)
        if result.is_fallback:
            print(f"[LLM] filter fallback ({result.fallback_reason}): {content!r}")
        return result

    def narrate(self, coord: Coordinate, place: PlaceCandidate) -> LLMResult[Optional[str]]:
        try:
            resp = self.client.responses.create(
                model=GUIDE_MODEL,
                instructions=guide_instructions(self.language),
                input=build_sight_prompt(coord, place),
            )
        except OpenAIError as e:
            print(f"[LLM] narration request failed for {place.title}: {e}")
            return LLMResult(None, "request failed")
        text = (getattr(resp, "output_text", None) or "").strip()
        if not text:
            return LLMResult(None, "empty output")
        return LLMResult(text)

    def synthesize(self, text: str, path: str) -> None:
        """Write speech for `text` to `path`. Errors propagate to the caller."""
        with self.client.audio.speech.with_streaming_response.create(
            model=TTS_MODEL,
            voice=TTS_VOICE,
            input=text,
            response_format=TTS_FORMAT,
        ) as response:
            response.stream_to_file(path)
