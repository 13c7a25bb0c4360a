# guidebot/pipeline.py
import enum
import os
import traceback
from typing import Callable, List

from .fetcher import Coordinate, PlaceCandidate
from .formatter import (
    MSG_ALREADY_TOLD,
    MSG_COOLDOWN,
    MSG_NO_INFO,
    MSG_NOTHING_NEARBY,
    make_search_markup,
)
from .llm import GuideLLM
from .state import SessionStore
from .utils import temp_audio_path


class Outcome(enum.Enum):
    COOLDOWN = "cooldown"
    NOTHING_NEARBY = "nothing_nearby"
    ALREADY_TOLD = "already_told"
    NO_INFO = "no_info"
    TEXT = "text"
    VOICE = "voice"


class GuidePipeline:
    """Turns one location event into (at most) one reply about the nearest new place."""

    def __init__(self, bot, llm: GuideLLM, store: SessionStore,
                 finder: Callable[[Coordinate], List[PlaceCandidate]],
                 use_audio_tts: bool = False):
        self.bot = bot
        self.llm = llm
        self.store = store
        self.finder = finder
        self.use_audio_tts = use_audio_tts

    def _notify(self, chat_id, text, live):
        # live-location updates stay silent
        if not live:
            self.bot.send_message(chat_id, text)

    def _typing(self, chat_id):
        self.bot.send_chat_action(chat_id, "typing")

    def process_location(self, chat_id, user_id: int, coord: Coordinate, live: bool = False) -> Outcome:
        if not self.store.try_acquire(user_id):
            self._notify(chat_id, MSG_COOLDOWN, live)
            return Outcome.COOLDOWN

        self._typing(chat_id)
        unique = self.finder(coord)
        if not unique:
            self._notify(chat_id, MSG_NOTHING_NEARBY, live)
            return Outcome.NOTHING_NEARBY

        fresh = [p for p in unique if not self.store.has_told(user_id, p.title)]
        if not fresh:
            nearest = min(unique, key=lambda p: p.distance_meters)
            self._notify(chat_id, MSG_ALREADY_TOLD.format(title=nearest.title), live)
            return Outcome.ALREADY_TOLD

        if len(fresh) > 1:
            self._typing(chat_id)
        filtered = self.llm.filter_places(fresh)
        if filtered.is_fallback:
            print(f"[Pipeline] user {user_id}: unfiltered candidates ({filtered.fallback_reason})")
        place = min(filtered.value, key=lambda p: p.distance_meters)

        if not self.store.mark_told(user_id, place.title):
            self._notify(chat_id, MSG_ALREADY_TOLD.format(title=place.title), live)
            return Outcome.ALREADY_TOLD

        self._typing(chat_id)
        narration = self.llm.narrate(coord, place)
        if narration.is_fallback:
            print(f"[Pipeline] user {user_id}: no narration for {place.title} ({narration.fallback_reason})")
            self._notify(chat_id, MSG_NO_INFO.format(title=place.title), live)
            return Outcome.NO_INFO

        return self.dispatch(chat_id, place, narration.value)

    # -------------------- Response dispatch --------------------
    def dispatch(self, chat_id, place: PlaceCandidate, text: str) -> Outcome:
        if self.use_audio_tts:
            try:
                self._send_voice(chat_id, text)
                return Outcome.VOICE
            except Exception:
                print(f"[Pipeline] voice reply failed for chat {chat_id}, falling back to text")
                traceback.print_exc()
        self.bot.send_message(chat_id, text, reply_markup=make_search_markup(place),
                              disable_web_page_preview=True)
        return Outcome.TEXT

    def _send_voice(self, chat_id, text: str):
        path = temp_audio_path()
        try:
            self._typing(chat_id)
            self.llm.synthesize(text, path)
            with open(path, "rb") as audio:
                self.bot.send_voice(chat_id, audio)
        finally:
            try:
                os.remove(path)
            except FileNotFoundError:
                pass
