from __future__ import annotations


# Environment variable that pins the Steam root and disables probing.
STEAM_DIR_ENV = "STEAM_DIR"


# (hive, key path, value name) tried in order on Windows.
REGISTRY_LOCATIONS: tuple[tuple[str, str, str], ...] = (
    ("HKEY_CURRENT_USER", r"Software\Valve\Steam", "SteamPath"),
    ("HKEY_LOCAL_MACHINE", r"SOFTWARE\Wow6432Node\Valve\Steam", "InstallPath"),
    ("HKEY_LOCAL_MACHINE", r"SOFTWARE\Valve\Steam", "InstallPath"),
)


# Home-relative Steam roots probed on Linux, in priority order.
LINUX_CANDIDATE_DIRS: tuple[str, ...] = (
    ".steam/steam",
    ".local/share/Steam",
    ".steam/root",
    # Flatpak
    ".var/app/com.valvesoftware.Steam/data/Steam",
    # Snap, including the 'experimental.hidden-snap-folder' layout
    "snap/steam/common/.local/share/Steam",
    ".snap/data/steam/common/.local/share/Steam",
)

MACOS_CANDIDATE_DIRS: tuple[str, ...] = ("Library/Application Support/Steam",)


# Subdirectory whose presence marks a directory as a Steam root.
# Matched case-insensitively; old installs use "SteamApps".
STEAMAPPS_DIR = "steamapps"
COMMON_DIR = "common"

# Looked up inside the root's steamapps directory first, then at the fallback path.
LIBRARY_LISTING_NAME = "libraryfolders.vdf"
LIBRARY_LISTING_FALLBACK = "config/libraryfolders.vdf"
LIBRARY_LISTING_ROOT_KEY = "libraryfolders"

APP_MANIFEST_GLOB = "appmanifest_*.acf"
APP_MANIFEST_ROOT_KEY = "AppState"

USERDATA_DIR = "userdata"
SHORTCUTS_RELATIVE_PATH = "config/shortcuts.vdf"
SHORTCUTS_ROOT_KEY = "shortcuts"
