"""
Library root detection and standard data paths.

All pdfmanager data lives in a .pdfmanager/ directory: the config file,
one JSON collection per document kind, and the backups directory.

Resolution order for the library root (the directory holding .pdfmanager/):
  1. PDFMANAGER_HOME environment variable (highest priority)
  2. Walk up from cwd looking for .pdfmanager/ directory
  3. Global config file (~/.config/pdfmanager/config.yaml) library_root key
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path

import yaml

DATA_DIR_NAME = ".pdfmanager"

# Bundled default files shipped in pdfmanager/data/
DEFAULT_FILES = ("config.json", "books.json", "slides.json", "classnotes.json")


@dataclass(frozen=True)
class LibraryPaths:
    """Standard paths for the library data directory."""

    root: Path
    data_dir: Path

    config_file: Path
    books: Path
    slides: Path
    classnotes: Path

    backups: Path


def get_global_config_path() -> Path:
    """Return the path to the global pdfmanager config file.

    Respects XDG_CONFIG_HOME if set, otherwise ~/.config/pdfmanager/config.yaml.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "pdfmanager" / "config.yaml"


def load_global_config() -> dict:
    """Load the global configuration.

    Returns:
        Configuration dict, or empty dict if file is missing or invalid.
    """
    config_path = get_global_config_path()
    if not config_path.is_file():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _walk_up_for_data_dir(start_path: Path) -> Path | None:
    current = start_path.resolve()
    while current != current.parent:
        if (current / DATA_DIR_NAME).is_dir():
            return current
        current = current.parent
    return None


def find_library_root(start_path: Path | None = None) -> Path:
    """Find the library root using 3-tier resolution.

    Args:
        start_path: Starting path for the directory walk (defaults to cwd)

    Returns:
        Path to the directory containing .pdfmanager/

    Raises:
        FileNotFoundError: If no .pdfmanager/ directory is found by any method
    """
    env_root = os.environ.get("PDFMANAGER_HOME")
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if (env_path / DATA_DIR_NAME).is_dir():
            return env_path
        raise FileNotFoundError(
            f"PDFMANAGER_HOME={env_root} does not contain a {DATA_DIR_NAME}/ directory."
        )

    if start_path is None:
        start_path = Path.cwd()
    result = _walk_up_for_data_dir(Path(start_path))
    if result is not None:
        return result

    library_root = load_global_config().get("library_root")
    if library_root:
        global_path = Path(library_root).expanduser().resolve()
        if (global_path / DATA_DIR_NAME).is_dir():
            return global_path
        raise FileNotFoundError(
            f"Global config library_root={library_root} does not contain a {DATA_DIR_NAME}/ directory."
        )

    raise FileNotFoundError(
        f"Could not find {DATA_DIR_NAME}/ directory starting from {start_path}. "
        f"Run 'pdfmanager init' to create one, set PDFMANAGER_HOME, or configure "
        f"library_root in {get_global_config_path()}."
    )


@lru_cache(maxsize=1)
def get_library_root() -> Path:
    """Get the cached library root path."""
    return find_library_root()


def get_paths(root: Path | None = None) -> LibraryPaths:
    """Get all standard paths for the library.

    Args:
        root: Library root (uses cached default if not provided)
    """
    if root is None:
        root = get_library_root()

    root = Path(root)
    data_dir = root / DATA_DIR_NAME

    return LibraryPaths(
        root=root,
        data_dir=data_dir,
        config_file=data_dir / "config.json",
        books=data_dir / "books.json",
        slides=data_dir / "slides.json",
        classnotes=data_dir / "classnotes.json",
        backups=data_dir / "backups",
    )


def get_default_files() -> dict[str, str]:
    """Get the bundled default data files.

    Returns:
        Dict mapping filename to content
    """
    data_path = resources.files("pdfmanager") / "data"
    return {name: (data_path / name).read_text(encoding="utf-8") for name in DEFAULT_FILES}


def install_defaults(paths: LibraryPaths, force: bool = False) -> list[Path]:
    """Copy the bundled default files into the data directory.

    Existing files are left alone unless force is set.

    Returns:
        Paths that were written
    """
    paths.data_dir.mkdir(parents=True, exist_ok=True)
    paths.backups.mkdir(parents=True, exist_ok=True)

    written = []
    for name, content in get_default_files().items():
        target = paths.data_dir / name
        if target.exists() and not force:
            continue
        target.write_text(content, encoding="utf-8")
        written.append(target)
    return written
