# guidebot/utils.py

import os
import secrets
import tempfile
from urllib.parse import quote

SEARCH_URL = "https://yandex.ru/search/"

def search_link(title, subtitle=""):
    """Web search URL for a place, e.g. 'https://yandex.ru/search/?text=Old%20Fort%20...'."""
    text = f"{title} {subtitle}".strip()
    return SEARCH_URL + "?text=" + quote(text, safe="-_.!~*'()")

def temp_audio_path(suffix=".ogg", directory=None):
    """Random file name for a synthesized reply so concurrent requests never collide."""
    name = f"response-{secrets.token_hex(8)}{suffix}"
    return os.path.join(directory or tempfile.gettempdir(), name)
