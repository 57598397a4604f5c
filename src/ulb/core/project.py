"""Project scaffolding: the directory skeleton the backend expects."""

from pathlib import Path

from .config import BuildConfig, save_build_config
from .constants import (
    CONFIG_FILENAME,
    DEFAULT_PACKAGES,
    PACKAGE_LIST_FILE,
    PACKAGE_REMOVE_FILE,
    PROJECT_DIRS,
)


def create_project(
    root: Path,
    config: BuildConfig,
    *,
    force: bool = False,
) -> list[Path]:
    """Create the skeleton under root and return the paths created.

    Existing directories are left alone. An existing Config.toml is only
    replaced when force is set; package lists are never overwritten.
    """
    root = Path(root)
    config_path = root / CONFIG_FILENAME
    if config_path.exists() and not force:
        raise FileExistsError(f"{config_path} already exists (use --force to overwrite)")

    root.mkdir(parents=True, exist_ok=True)
    created: list[Path] = []

    for rel in PROJECT_DIRS:
        d = root / rel
        if not d.exists():
            d.mkdir(parents=True)
            created.append(d)

    save_build_config(config_path, config)
    created.append(config_path)

    package_list = root / PACKAGE_LIST_FILE
    if not package_list.exists():
        package_list.write_text("\n".join(DEFAULT_PACKAGES) + "\n", encoding="utf-8")
        created.append(package_list)

    remove_list = root / PACKAGE_REMOVE_FILE
    if not remove_list.exists():
        remove_list.write_text("", encoding="utf-8")
        created.append(remove_list)

    return created
