from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from utils.constants import logger
from utils.exceptions import ConfigError

@dataclass(frozen=True)
class CryptoEntry:
    """
    Key material for one (game, category) pair, as hex strings.
    An entry without `iv` is the plain `category = "<hex>"` form and uses the default IV.
    """
    key: str
    iv: str | None = None

    @property
    def is_detailed(self) -> bool:
        return self.iv is not None

    @classmethod
    def from_value(cls, value: Any, where: str) -> CryptoEntry:
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, dict):
            key = value.get("key")
            iv = value.get("iv")
            if not isinstance(key, str):
                raise ConfigError(f"Missing or invalid 'key' for {where}!")
            if iv is not None and not isinstance(iv, str):
                raise ConfigError(f"Invalid 'iv' for {where}!")
            unknown = set(value) - {"key", "iv"}
            if unknown:
                raise ConfigError(f"Unknown field(s) {', '.join(sorted(unknown))} for {where}!")
            return cls(key, iv)
        raise ConfigError(f"Invalid entry for {where}, expected a hex string or a table with 'key'!")

# default keys of the known titles, stored as the raw ASCII the games ship with
_DEFAULT_KEYS: dict[str, dict[str, bytes]] = {
    "classic": {
        "native": b"USCaPQpA4TSNVxMI1v9SK9UC0yZuAnb2",
        "save":   b"44iUY5aTrlaYoet9lapRlaK1Ehlec5i0"
    },
    "rio": {
        "native": b"USCaPQpA4TSNVxMI1v9SK9UC0yZuAnb2",
        "save":   b"44iUY5aTrlaYoet9lapRlaK1Ehlec5i0"
    },
    "seasons": {
        "native": b"zePhest5faQuX2S2Apre@4reChAtEvUt",
        "save":   b"brU4u=EbR4s_A3APu6U#7B!axAm*We#5"
    },
    "space": {
        "native": b"RmgdZ0JenLFgWwkYvCL2lSahFbEhFec4",
        "save":   b"TpeczKQL07HVdPbVUhAr6FjUsmRctyc5"
    },
    "friends": {
        "native":     b"EJRbcWh81YG4YzjfLAPMssAnnzxQaDn1",
        "save":       b"XN3OCmUFL6kINHuca2ZQL4gqJg0r18ol",
        "downloaded": b"rF1pFq2wDzgR7PQ94dTFuXww0YvY7nfK"
    },
    "starwars": {
        "native": b"An8t3mn8U6spiQ0zHHr3a1loDrRa3mtE",
        "save":   b"e83Tph0R3aZ2jGK6eS91uLvQpL33vzNi"
    },
    "starwarsii": {
        "native": b"B0pm3TAlzkN9ghzoe2NizEllPdN0hQni",
        "save":   b"taT3vigDoNlqd44yiPbt21biCpVma6nb"
    },
    "stella": {
        "native": b"4FzZOae60yAmxTClzdgfcr4BAbPIgj7X",
        "save":   b"Bll3qkcy5fKrNVxZqtkFH19Ojn2sdJFu"
    }
}
DEFAULT_KEYS: Mapping[str, Mapping[str, bytes]] = MappingProxyType(
    {game: MappingProxyType(categories) for game, categories in _DEFAULT_KEYS.items()}
)

class Registry:
    """
    Read-only mapping of game -> category -> `CryptoEntry`.
    Identifiers are lower-cased when stored and when looked up.
    `merge` returns a new registry, the receiver is never modified.
    """
    def __init__(self, games: Mapping[str, Mapping[str, CryptoEntry]] | None = None) -> None:
        normalized: dict[str, dict[str, CryptoEntry]] = {}
        for game, categories in (games or {}).items():
            target = normalized.setdefault(game.lower(), {})
            for category, entry in categories.items():
                target[category.lower()] = entry
        self._games = MappingProxyType({g: MappingProxyType(c) for g, c in normalized.items()})

    @property
    def games(self) -> Mapping[str, Mapping[str, CryptoEntry]]:
        return self._games

    def get(self, game: str, category: str) -> CryptoEntry | None:
        categories = self._games.get(game.lower())
        if categories is None:
            return None
        return categories.get(category.lower())

    def entries(self) -> Iterator[tuple[str, str, CryptoEntry]]:
        """Every (game, category, entry), sorted by game then category."""
        for game in sorted(self._games):
            categories = self._games[game]
            for category in sorted(categories):
                yield game, category, categories[category]

    def categories(self, game: str) -> list[str]:
        return sorted(self._games.get(game.lower(), {}))

    def merge(self, override: Registry) -> Registry:
        games = {g: dict(c) for g, c in self._games.items()}
        for game, category, entry in override.entries():
            games.setdefault(game, {})[category] = entry
        return Registry(games)

    def __len__(self) -> int:
        return sum(len(c) for c in self._games.values())

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        game, category = pair
        return self.get(game, category) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return list(self.entries()) == list(other.entries())

    def __repr__(self) -> str:
        return f"Registry(games={len(self._games)}, entries={len(self)})"

    @classmethod
    def default(cls) -> Registry:
        return cls({
            game: {category: CryptoEntry(key.hex()) for category, key in categories.items()}
            for game, categories in DEFAULT_KEYS.items()
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Registry:
        """Build a registry from the parsed `[games.<game>]` document."""
        games = data.get("games", {})
        if not isinstance(games, dict):
            raise ConfigError("'games' must be a table!")

        parsed: dict[str, dict[str, CryptoEntry]] = {}
        for game, categories in games.items():
            if not isinstance(categories, dict):
                raise ConfigError(f"'games.{game}' must be a table!")
            target = parsed.setdefault(game.lower(), {})
            for category, value in categories.items():
                target[category.lower()] = CryptoEntry.from_value(value, f"games.{game}.{category}")
        return cls(parsed)

    @classmethod
    def load(cls, path: str) -> Registry:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read config file at {path}: {e}")
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML config file {path}: {e}")
        return cls.from_dict(data)

    @classmethod
    def load_or_default(cls, path: str | None = None, required: bool = False) -> Registry:
        """
        The built-in registry, with the entries from `path` merged over it when the file exists.
        A missing file is only an error when `required` is set (a path the user asked for).
        """
        registry = cls.default()
        if not path:
            return registry
        if not os.path.isfile(path):
            if required:
                raise ConfigError(f"Config file {path} not found!")
            logger.warning(f"Config file {path} not found, using built-in keys.")
            return registry

        user_registry = cls.load(path)
        logger.info(f"Loaded {len(user_registry)} entries from {path}.")
        return registry.merge(user_registry)
