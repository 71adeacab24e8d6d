from __future__ import annotations

from typing import Dict, Mapping, Optional

UNKNOWN_NAME = "Unknown"

DEFAULT_NAMES: Dict[str, str] = {
    "al-capone": "Al Capone",
    "pat-garret": "Pat Garret",
    "wyatt-earp": "Wyatt Earp",
    "doc-holiday": "Doc Holiday",
    "wild-bill": "Wild Bill",
    "stu-ungar": "Stu Ungar",
    "kitty-leroy": "Kitty Leroy",
    "poker-alice": "Poker Alice",
    "madame-moustache": "Madame Moustache",
}


class PlayerNamesRepository:
    """Maps player ids to display names for the presentation layer."""

    def __init__(self, names: Optional[Mapping[str, str]] = None) -> None:
        self._names: Dict[str, str] = dict(DEFAULT_NAMES if names is None else names)

    def name_for_id(self, player_id: str) -> str:
        return self._names.get(player_id, UNKNOWN_NAME)

    def register(self, player_id: str, name: str) -> None:
        self._names[player_id] = name

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._names
