from __future__ import annotations

import os
from pathlib import Path
import sys
import tempfile
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from steamlocate.core.libraryfolders import LibraryFolderResolver, path_key
from steamlocate.core.locator import RootLocator


def _write_listing(root: Path, text: str, relative: str = "steamapps/libraryfolders.vdf") -> Path:
    listing = root / relative
    listing.parent.mkdir(parents=True, exist_ok=True)
    listing.write_text(text, encoding="utf-8")
    return listing


def _vdf_path(path: Path) -> str:
    return str(path).replace("\\", "\\\\")


def _symlink_or_skip(test: unittest.TestCase, link: Path, target: Path) -> None:
    link.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.symlink(target, link, target_is_directory=True)
    except (OSError, NotImplementedError) as exc:
        test.skipTest(f"symlinks unavailable: {exc}")


class LibraryFolderResolverTests(unittest.TestCase):
    def test_new_format_entries_are_resolved_in_index_order(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            root = base / "Steam"
            lib_a = base / "LibA"
            lib_b = base / "LibB"
            _write_listing(
                root,
                f"""
                "libraryfolders"
                {{
                    "contentstatsid" "-1"
                    "0" {{ "path" "{_vdf_path(root)}" "label" "" }}
                    "2" {{ "path" "{_vdf_path(lib_b)}" "label" "Fast" "totalsize" "1000" }}
                    "1" {{ "path" "{_vdf_path(lib_a)}" "contentid" "42" }}
                }}
                """,
            )

            folders, problems = LibraryFolderResolver().resolve(root)
            self.assertEqual(problems, [])
            self.assertEqual([folder.path for folder in folders], [root, lib_a, lib_b])
            self.assertEqual(folders[1].content_id, "42")
            self.assertEqual(folders[2].label, "Fast")
            self.assertEqual(folders[2].total_size, 1000)

    def test_old_format_string_entries_are_resolved(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            root = base / "Steam"
            extra = base / "Games"
            _write_listing(
                root,
                f"""
                "LibraryFolders"
                {{
                    "TimeNextStatsReport" "1234567890"
                    "ContentStatsID" "-1"
                    "1" "{_vdf_path(extra)}"
                }}
                """,
            )

            folders, problems = LibraryFolderResolver().resolve(root)
            self.assertEqual(problems, [])
            self.assertEqual([folder.path for folder in folders], [root, extra])

    def test_listing_with_n_extra_folders_yields_n_plus_one(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            root = base / "Steam"
            extras = [base / f"Lib{index}" for index in range(1, 4)]
            body = "\n".join(f'"{index}" "{_vdf_path(path)}"' for index, path in enumerate(extras, start=1))
            _write_listing(root, f'"libraryfolders" {{ {body} }}')

            folders, _problems = LibraryFolderResolver().resolve(root)
            self.assertEqual(len(folders), len(extras) + 1)
            self.assertEqual(folders[0].path, root)

    def test_duplicate_paths_appear_once(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            root = base / "Steam"
            extra = base / "Games"
            _write_listing(
                root,
                f"""
                "libraryfolders"
                {{
                    "0" {{ "path" "{_vdf_path(root)}" }}
                    "1" {{ "path" "{_vdf_path(extra)}" }}
                    "2" {{ "path" "{_vdf_path(extra)}/." }}
                }}
                """,
            )

            folders, _problems = LibraryFolderResolver().resolve(root)
            keys = [path_key(folder.path) for folder in folders]
            self.assertEqual(len(keys), len(set(keys)))
            self.assertEqual([folder.path for folder in folders], [root, extra])

    def test_missing_listing_yields_root_only(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / "steamapps").mkdir()
            messages: list[str] = []
            folders, problems = LibraryFolderResolver().resolve(root, progress_callback=messages.append)
            self.assertEqual([folder.path for folder in folders], [root])
            self.assertEqual(problems, [])
            self.assertTrue(messages)

    def test_malformed_listing_is_reported_and_root_kept(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            listing = _write_listing(root, '"libraryfolders" { "1" { "path" "/x" ')

            folders, problems = LibraryFolderResolver().resolve(root)
            self.assertEqual([folder.path for folder in folders], [root])
            self.assertEqual(len(problems), 1)
            self.assertEqual(problems[0].path, listing)

    def test_listing_without_expected_root_key_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            _write_listing(root, '"Something" { "1" "/x" }')

            folders, problems = LibraryFolderResolver().resolve(root)
            self.assertEqual(len(folders), 1)
            self.assertEqual(len(problems), 1)
            self.assertIn("libraryfolders", problems[0].reason)

    def test_config_listing_is_used_when_steamapps_listing_missing(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            root = base / "Steam"
            extra = base / "Other"
            (root / "steamapps").mkdir(parents=True)
            listing = _write_listing(
                root,
                f'"libraryfolders" {{ "1" "{_vdf_path(extra)}" }}',
                relative="config/libraryfolders.vdf",
            )

            resolver = LibraryFolderResolver()
            self.assertEqual(resolver.listing_path(root), listing)
            folders, _problems = resolver.resolve(root)
            self.assertEqual([folder.path for folder in folders], [root, extra])

    def test_root_named_through_symlink_appears_once(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            home = Path(temp_dir)
            real_root = home / ".local" / "share" / "Steam"
            (real_root / "steamapps").mkdir(parents=True)
            linked_root = home / ".steam" / "steam"
            _symlink_or_skip(self, linked_root, real_root)
            extra = home / "Games"
            _write_listing(
                real_root,
                f"""
                "libraryfolders"
                {{
                    "0" {{ "path" "{_vdf_path(linked_root)}" }}
                    "1" {{ "path" "{_vdf_path(extra)}" }}
                }}
                """,
            )

            root = RootLocator(home=home, platform="linux", environ={}).locate()
            folders, problems = LibraryFolderResolver().resolve(root)
            self.assertEqual(problems, [])
            self.assertEqual(len(folders), 2)
            self.assertEqual(folders[0].path, root)
            self.assertEqual(folders[1].path, extra)

    def test_symlinked_root_matches_listing_of_real_path(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            real_root = base / "real"
            (real_root / "steamapps").mkdir(parents=True)
            linked_root = base / "linked"
            _symlink_or_skip(self, linked_root, real_root)
            _write_listing(real_root, f'"libraryfolders" {{ "0" {{ "path" "{_vdf_path(real_root)}" }} }}')

            folders, _problems = LibraryFolderResolver().resolve(linked_root)
            self.assertEqual([folder.path for folder in folders], [linked_root])

    def test_listing_is_found_under_mixed_case_steamapps(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            base = Path(temp_dir)
            root = base / "Steam"
            extra = base / "Games"
            _write_listing(
                root,
                f'"libraryfolders" {{ "1" "{_vdf_path(extra)}" }}',
                relative="SteamApps/libraryfolders.vdf",
            )

            resolver = LibraryFolderResolver()
            self.assertIsNotNone(resolver.listing_path(root))
            folders, _problems = resolver.resolve(root)
            self.assertEqual([folder.path for folder in folders], [root, extra])


if __name__ == "__main__":
    unittest.main()
