"""Backend command line construction."""

from dataclasses import dataclass, field
from pathlib import Path

from ..core.config import Settings
from ..core.constants import FLAG_JSON_OUTPUT


@dataclass(frozen=True)
class BackendInvocation:
    """One backend run: executable, ordered arguments, working directory."""
    executable: Path
    arguments: tuple[str, ...] = ()
    working_dir: Path = field(default_factory=Path.cwd)

    @property
    def argv(self) -> list[str]:
        return [str(self.executable), *self.arguments]


def build_invocation(
    settings: Settings,
    verb: str,
    *,
    flags: list[str] | None = None,
    json_output: bool = False,
) -> BackendInvocation:
    """backend <verb> [flags...] [--json-output] <config>.

    The backend resolves project folders relative to its working directory,
    so it runs in the directory holding the config file.
    """
    config_path = settings.config_path
    args = [verb, *(flags or [])]
    if json_output:
        args.append(FLAG_JSON_OUTPUT)
    args.append(config_path.name)
    return BackendInvocation(
        executable=settings.backend_path,
        arguments=tuple(args),
        working_dir=config_path.parent.resolve(),
    )
