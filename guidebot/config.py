# guidebot/config.py
import os
from typing import List

TELEGRAM_API_KEY = os.getenv("TELEGRAM_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
YANDEX_GEOSUGGEST_API_KEY = os.getenv("YANDEX_GEOSUGGEST_API_KEY")

USE_AUDIO_TTS = os.getenv("USE_AUDIO_TTS", "0").strip().lower() in ("1", "true", "yes", "on")
COOLDOWN_SECONDS = int(os.getenv("COOLDOWN_SECONDS", "60"))
METERS_LIMIT = int(os.getenv("METERS_LIMIT", "150"))
# handler workers; each location event holds one for its whole pipeline
BOT_THREADS = int(os.getenv("BOT_THREADS", "16"))

USER_LANGUAGE = {"code": "ru", "name": "Russian"}

REQUIRED = ("TELEGRAM_API_KEY", "OPENAI_API_KEY", "YANDEX_GEOSUGGEST_API_KEY")


def missing_credentials() -> List[str]:
    return [name for name in REQUIRED if not globals().get(name)]
