import os
import sys
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Works out where user data lives. SQ_DATA_DIR always wins (tests and portable installs use it), then APPDATA on
# Windows, then the XDG data home everywhere else.
def resolve_data_root() -> Path:
    override = os.getenv("SQ_DATA_DIR")
    if override:
        return Path(override)

    appdata = os.getenv("APPDATA")
    if appdata and sys.platform.startswith("win"):
        return Path(appdata) / "SleepQuality"

    xdg_data = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "SleepQuality"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    root: Path
    data: Path

    logs: Path
    current: Path
    snapshots: Path

    database: Path

    @staticmethod
    def build():
        # Folder for the package itself, no user-specific files
        root = Path(__file__).resolve().parents[2]

        # Folder for all sleep-tracking user-specific stuff
        data = ensure_directory(resolve_data_root())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")
        snapshots = ensure_directory(data / "snapshots")

        return ProjectPaths(
            root = root,
            data = data,
            logs = logs,
            current = current,
            snapshots = snapshots,
            database = data / "sleep_history.db"
        )
PATHS = ProjectPaths.build()
