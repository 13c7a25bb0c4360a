# guidebot/fetcher.py
import traceback
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests

from .config import METERS_LIMIT, USER_LANGUAGE

API_URL = "https://suggest-maps.yandex.ru/v1/suggest"
SEARCH_SPAN = "0.003,0.003"
MAX_RESULTS = 10
REQUEST_TIMEOUT = 12

# Query hints for the suggest API; None is a pass without text.
PLACES_SEEKING_MATRIX = ["достопримечательность", None, "памятник"]

Coordinate = Tuple[float, float]  # (latitude, longitude)


def _text(block: Any) -> str:
    if isinstance(block, dict):
        return str(block.get("text") or "")
    if isinstance(block, str):
        return block
    return ""


@dataclass(frozen=True)
class PlaceCandidate:
    title: str
    subtitle: str
    distance_meters: float
    distance_text: str

    @classmethod
    def from_suggestion(cls, item: Dict[str, Any]) -> Optional["PlaceCandidate"]:
        """Build a candidate from a suggest result, or None if it is unusable."""
        if not isinstance(item, dict):
            return None
        title = _text(item.get("title")).strip()
        dist = item.get("distance")
        if not title or not isinstance(dist, dict):
            return None
        try:
            value = float(dist.get("value"))
        except (TypeError, ValueError):
            return None
        return cls(
            title=title,
            subtitle=_text(item.get("subtitle")).strip(),
            distance_meters=value,
            distance_text=_text(dist) or f"{int(value)} м",
        )

    def to_payload(self) -> Dict[str, Any]:
        """Same shape as the suggest API returns."""
        return {
            "title": {"text": self.title},
            "subtitle": {"text": self.subtitle},
            "distance": {"value": self.distance_meters, "text": self.distance_text},
        }


def fetch_nearby_places(coord: Coordinate, api_key: str, query_text: Optional[str] = None,
                        meters_limit: float = METERS_LIMIT) -> List[PlaceCandidate]:
    """Places closer than `meters_limit`, nearest first. Empty list on any failure."""
    lat, lon = coord
    params = {
        "lang": USER_LANGUAGE["code"],
        "highlight": "0",
        "ll": f"{lon},{lat}",
        "spn": SEARCH_SPAN,
        "results": str(MAX_RESULTS),
        "strict_bounds": "1",
        "apikey": api_key,
    }
    if query_text:
        params["text"] = query_text

    try:
        r = requests.get(API_URL, params=params, timeout=REQUEST_TIMEOUT)
        body = r.json()
    except (requests.RequestException, ValueError) as e:
        print(f"[Fetcher] suggest request failed ({query_text!r}): {e}")
        return []
    if r.status_code != 200 or not isinstance(body, dict):
        print(f"[Fetcher] suggest returned {r.status_code} for {query_text!r}")
        return []

    places = []
    for item in body.get("results") or []:
        try:
            place = PlaceCandidate.from_suggestion(item)
        except Exception:
            traceback.print_exc()
            continue
        if place and place.distance_meters < meters_limit:
            places.append(place)
    places.sort(key=lambda p: p.distance_meters)
    return places


def dedupe_by_title(places: Iterable[PlaceCandidate]) -> List[PlaceCandidate]:
    unique: Dict[str, PlaceCandidate] = {}
    for p in places:
        unique[p.title] = p
    return list(unique.values())


def collect_candidates(coord: Coordinate, api_key: str,
                       hints: Iterable[Optional[str]] = PLACES_SEEKING_MATRIX) -> List[PlaceCandidate]:
    """Run the finder once per hint and merge the results, one entry per title."""
    found: List[PlaceCandidate] = []
    for hint in hints:
        found.extend(fetch_nearby_places(coord, api_key, hint))
    return dedupe_by_title(found)
