from __future__ import annotations

from pathlib import Path
import struct
import sys
import tempfile
import unittest
import zlib

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from steamlocate.core.errors import ShortcutDecodeFailed
from steamlocate.core.keyvalues import decode_binary, encode_binary
from steamlocate.core.models import Shortcut
from steamlocate.core.shortcuts import ShortcutParser, shortcuts_document


def _write_shortcuts(root: Path, user_id: str, data: bytes) -> Path:
    path = root / "userdata" / user_id / "config" / "shortcuts.vdf"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def _entry(index: str, fields: list[bytes]) -> bytes:
    return b"\x00" + index.encode() + b"\x00" + b"".join(fields) + b"\x08"


def _str(key: str, value: str) -> bytes:
    return b"\x01" + key.encode() + b"\x00" + value.encode("utf-8") + b"\x00"


def _int(key: str, value: int) -> bytes:
    return b"\x02" + key.encode() + b"\x00" + struct.pack("<I", value)


def _document(*entries: bytes) -> bytes:
    return b"\x00shortcuts\x00" + b"".join(entries) + b"\x08\x08"


class ShortcutParserTests(unittest.TestCase):
    def test_parses_entries_and_derives_ids(self) -> None:
        exe = '"/opt/games/celeste/Celeste"'
        name = "Celeste"
        data = _document(
            _entry(
                "0",
                [
                    _int("appid", 0xDEADBEEF),
                    _str("AppName", name),
                    _str("Exe", exe),
                    _str("StartDir", '"/opt/games/celeste/"'),
                    _str("LaunchOptions", "--fullscreen"),
                    _int("IsHidden", 1),
                    b"\x00tags\x00" + _str("0", "favorite") + _str("1", "Platformer") + b"\x08",
                ],
            )
        )
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            path = _write_shortcuts(root, "12345", data)

            shortcuts = ShortcutParser().discover(root)
            self.assertEqual(len(shortcuts), 1)
            shortcut = shortcuts[0]
            expected_legacy = (zlib.crc32((exe + name).encode("utf-8")) & 0xFFFFFFFF) | 0x80000000
            self.assertEqual(shortcut.legacy_id, expected_legacy)
            self.assertEqual(shortcut.game_id, (expected_legacy << 32) | 0x02000000)
            self.assertEqual(shortcut.stored_app_id, 0xDEADBEEF)
            self.assertEqual(shortcut.tags, ("favorite", "Platformer"))
            self.assertEqual(shortcut.launch_options, "--fullscreen")
            self.assertTrue(shortcut.hidden)
            self.assertEqual(shortcut.user_id, "12345")
            self.assertEqual(shortcut.source_path, path)
            self.assertEqual(shortcut.grid_id, str(expected_legacy))

    def test_keys_are_case_insensitive(self) -> None:
        data = _document(_entry("0", [_str("appname", "Lower"), _str("exe", "/bin/lower")]))
        with tempfile.TemporaryDirectory() as temp_dir:
            path = _write_shortcuts(Path(temp_dir), "1", data)
            (shortcut,) = ShortcutParser().parse_file(path)
            self.assertEqual(shortcut.name, "Lower")
            self.assertEqual(shortcut.executable, "/bin/lower")
            self.assertIsNone(shortcut.stored_app_id)

    def test_users_are_filtered_and_ordered(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            _write_shortcuts(root, "200", _document(_entry("0", [_str("AppName", "B"), _str("Exe", "b")])))
            _write_shortcuts(root, "100", _document(_entry("0", [_str("AppName", "A"), _str("Exe", "a")])))
            (root / "userdata" / "300" / "config").mkdir(parents=True)

            parser = ShortcutParser()
            self.assertEqual([shortcut.name for shortcut in parser.discover(root)], ["A", "B"])
            self.assertEqual([shortcut.name for shortcut in parser.discover(root, user_id="200")], ["B"])

    def test_corrupt_file_raises_decode_failure(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            path = _write_shortcuts(root, "1", b"\x00shortcuts\x00\x000\x00\x01AppName\x00Trunc")
            with self.assertRaises(ShortcutDecodeFailed) as context:
                ShortcutParser().discover(root)
            self.assertEqual(context.exception.path, path)

    def test_missing_shortcuts_object_raises_decode_failure(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = _write_shortcuts(Path(temp_dir), "1", _str("other", "x") + b"\x08")
            with self.assertRaises(ShortcutDecodeFailed):
                ShortcutParser().parse_file(path)

    def test_missing_userdata_yields_no_shortcuts(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            self.assertEqual(ShortcutParser().discover(Path(temp_dir)), [])

    def test_written_document_reads_back(self) -> None:
        created = Shortcut.create("Celeste", '"C:\\Games\\Celeste\\Celeste.exe"')
        self.assertEqual(created.start_dir, '"C:\\Games\\Celeste"')
        self.assertEqual(created.stored_app_id, created.legacy_id)

        document = decode_binary(encode_binary(shortcuts_document([created])))
        (parsed,) = ShortcutParser().from_keyvalues(document)
        self.assertEqual(parsed, created)


if __name__ == "__main__":
    unittest.main()
