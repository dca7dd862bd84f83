import os
import tempfile
import unittest

from abcrypt.registry import Registry, CryptoEntry, DEFAULT_KEYS
from utils.exceptions import ConfigError

KEY_X = "11" * 32
KEY_Y = "22" * 32
KEY_Z = "33" * 32
IV = "44" * 16


class RegistryTests(unittest.TestCase):
    def test_default_contains_known_titles(self):
        registry = Registry.default()
        self.assertEqual(
            sorted(registry.games),
            ["classic", "friends", "rio", "seasons", "space", "starwars", "starwarsii", "stella"]
        )
        self.assertEqual(registry.categories("friends"), ["downloaded", "native", "save"])
        self.assertEqual(len(registry), 17)

    def test_default_keys_stored_as_hex(self):
        entry = Registry.default().get("seasons", "save")
        self.assertEqual(entry, CryptoEntry(b"brU4u=EbR4s_A3APu6U#7B!axAm*We#5".hex()))
        self.assertFalse(entry.is_detailed)
        for categories in DEFAULT_KEYS.values():
            for key in categories.values():
                self.assertEqual(len(key), 32)

    def test_lookup_is_case_insensitive(self):
        registry = Registry({"Game": {"Cat": CryptoEntry(KEY_X)}})
        self.assertEqual(registry.get("GAME", "cAT"), CryptoEntry(KEY_X))
        self.assertIn(("game", "CAT"), registry)
        self.assertNotIn(("game", "other"), registry)
        self.assertIsNone(registry.get("missing", "cat"))

    def test_is_read_only(self):
        registry = Registry.default()
        with self.assertRaises(TypeError):
            registry.games["new"] = {}
        with self.assertRaises(TypeError):
            registry.games["classic"]["native"] = CryptoEntry(KEY_X)

    def test_default_keys_read_only(self):
        with self.assertRaises(TypeError):
            DEFAULT_KEYS["classic"] = {}
        with self.assertRaises(TypeError):
            DEFAULT_KEYS["classic"]["native"] = b"x" * 32
        self.assertEqual(Registry.default().get("classic", "native"), CryptoEntry(b"USCaPQpA4TSNVxMI1v9SK9UC0yZuAnb2".hex()))

    def test_entries_sorted(self):
        registry = Registry({
            "b": {"z": CryptoEntry(KEY_X), "a": CryptoEntry(KEY_Y)},
            "a": {"m": CryptoEntry(KEY_Z)}
        })
        self.assertEqual([(g, c) for g, c, _ in registry.entries()], [("a", "m"), ("b", "a"), ("b", "z")])

    def test_merge_semantics(self):
        base = Registry({
            "gameA": {"cat1": CryptoEntry(KEY_X), "cat2": CryptoEntry(KEY_Z)},
            "gameC": {"cat1": CryptoEntry(KEY_Z)}
        })
        override = Registry({
            "GAMEA": {"Cat1": CryptoEntry(KEY_Y)},
            "gameB": {"cat2": CryptoEntry(KEY_Z, IV)}
        })
        merged = base.merge(override)

        self.assertEqual(merged.get("gamea", "cat1"), CryptoEntry(KEY_Y))
        self.assertEqual(merged.get("gameb", "cat2"), CryptoEntry(KEY_Z, IV))
        self.assertEqual(merged.get("gamea", "cat2"), CryptoEntry(KEY_Z))
        self.assertEqual(merged.get("gamec", "cat1"), CryptoEntry(KEY_Z))
        # base is untouched
        self.assertEqual(base.get("gamea", "cat1"), CryptoEntry(KEY_X))
        self.assertIsNone(base.get("gameb", "cat2"))

    def test_from_dict_both_entry_forms(self):
        registry = Registry.from_dict({
            "games": {
                "Seasons": {
                    "save": KEY_X,
                    "native": {"key": KEY_Y, "iv": IV},
                    "downloaded": {"key": KEY_Z}
                }
            }
        })
        self.assertEqual(registry.get("seasons", "save"), CryptoEntry(KEY_X))
        self.assertEqual(registry.get("seasons", "native"), CryptoEntry(KEY_Y, IV))
        self.assertEqual(registry.get("seasons", "downloaded"), CryptoEntry(KEY_Z))
        self.assertTrue(registry.get("seasons", "native").is_detailed)

    def test_from_dict_rejects_bad_shapes(self):
        bad_documents = [
            {"games": []},
            {"games": {"g": "not a table"}},
            {"games": {"g": {"c": 5}}},
            {"games": {"g": {"c": {"iv": IV}}}},
            {"games": {"g": {"c": {"key": KEY_X, "iv": 7}}}},
            {"games": {"g": {"c": {"key": KEY_X, "nonce": IV}}}}
        ]
        for document in bad_documents:
            with self.subTest(document=document):
                with self.assertRaises(ConfigError):
                    Registry.from_dict(document)

    def test_from_dict_empty(self):
        self.assertEqual(len(Registry.from_dict({})), 0)


class RegistryFileTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "config.toml")

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, text: str) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(text)

    def test_load_toml(self):
        self.write(
            "[games.seasons]\n"
            f'save = "{KEY_X}"\n'
            f'native = {{ key = "{KEY_Y}", iv = "{IV}" }}\n'
        )
        registry = Registry.load(self.path)
        self.assertEqual(registry.get("seasons", "save"), CryptoEntry(KEY_X))
        self.assertEqual(registry.get("seasons", "native"), CryptoEntry(KEY_Y, IV))

    def test_load_or_default_merges_over_defaults(self):
        self.write(
            "[games.Classic]\n"
            f'Native = "{KEY_X}"\n'
            "[games.newgame]\n"
            f'save = "{KEY_Y}"\n'
        )
        registry = Registry.load_or_default(self.path)
        self.assertEqual(registry.get("classic", "native"), CryptoEntry(KEY_X))
        self.assertEqual(registry.get("newgame", "save"), CryptoEntry(KEY_Y))
        self.assertEqual(registry.get("classic", "save"), Registry.default().get("classic", "save"))
        self.assertEqual(len(registry), 18)

    def test_load_or_default_missing_file(self):
        registry = Registry.load_or_default(os.path.join(self.tmpdir.name, "nope.toml"))
        self.assertEqual(registry, Registry.default())
        self.assertEqual(Registry.load_or_default(None), Registry.default())

    def test_load_or_default_required_file_missing(self):
        with self.assertRaises(ConfigError):
            Registry.load_or_default(os.path.join(self.tmpdir.name, "nope.toml"), required=True)
        self.assertEqual(Registry.load_or_default(None, required=True), Registry.default())

    def test_not_utf8(self):
        with open(self.path, "wb") as f:
            f.write(b'save = "\xff\xfe"\n')
        with self.assertRaises(ConfigError):
            Registry.load(self.path)

    def test_malformed_toml(self):
        self.write("[games.seasons\nsave = ")
        with self.assertRaises(ConfigError):
            Registry.load(self.path)
        with self.assertRaises(ConfigError):
            Registry.load_or_default(self.path)

    def test_unreadable_path(self):
        with self.assertRaises(ConfigError):
            Registry.load(self.tmpdir.name)


if __name__ == "__main__":
    unittest.main()
