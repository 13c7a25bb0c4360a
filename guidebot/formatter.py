# guidebot/formatter.py
from typing import Dict

from telebot import types

from .fetcher import Coordinate, PlaceCandidate
from .utils import search_link

MSG_COOLDOWN = "Погодь чутка."
MSG_NOTHING_NEARBY = "Рядом ничего не знаю."
MSG_ALREADY_TOLD = "Рядом только {title}, но я тебе уже про него рассказывал."
MSG_NO_INFO = "Рядом {title}. Не могу найти информацию об этом месте."

FILTER_PROMPT = (
    "Filter the list of places and provide only the most interesting ones for the tourist.\n"
    "Don't explain anything. Answer only JSON in format "
    '{ "places": <array of places (keep the data format as is)> }'
)

GUIDE_PROMPT = """You are a helpful tour guide.
Provide the detail information and all gossips, mystical stories (if they exist), etc, about the place that tourist sees.
Use user's coordinates to only determine the city (but don't tell the city to the user, he already knows), don't guess the exact location using it.
User tells you what he sees.
Don't say hello or hi. Just answer the question. It should look like you continue the conversation, not starting.
For example: "You can see the Eiffel Tower from here. It's a famous landmark in Paris."
"""


def guide_instructions(language: Dict[str, str]) -> str:
    return f"{GUIDE_PROMPT}\nUse language: {language['name']}."


def build_sight_prompt(coord: Coordinate, place: PlaceCandidate) -> str:
    lat, lon = coord
    sight = f"{place.title} ({place.subtitle})" if place.subtitle else place.title
    return (
        f"Мои координаты: lng {lon}, lat {lat}.\n"
        f"В {place.distance_text} от меня находится {sight}."
    )


def make_search_markup(place: PlaceCandidate):
    kb = types.InlineKeyboardMarkup()
    kb.add(types.InlineKeyboardButton(f"Яндекс: {place.title}", url=search_link(place.title, place.subtitle)))
    return kb
