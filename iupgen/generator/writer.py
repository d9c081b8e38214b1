"""Output paths, file writing and formatting for generated elements."""

import logging
import shutil
import subprocess
from pathlib import Path

from .types import ClassDescriptor
from .util import to_snake_case

logger = logging.getLogger(__name__)


def element_path(base_path: str | Path, descriptor: ClassDescriptor) -> Path:
    """Return where an element's source lives under the output tree."""
    return Path(base_path) / "elements" / f"{to_snake_case(descriptor.name)}.zig"


def write_element(path: Path, text: str) -> None:
    """Write generated source, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def format_file(path: Path, zig: str = "zig") -> bool:
    """Normalize a generated file with `zig fmt`.

    Returns True when the file was formatted. A missing or failing formatter
    is logged and leaves the file as written.
    """
    executable = shutil.which(zig)
    if executable is None:
        logger.warning("%s not found, skipping formatting of %s", zig, path)
        return False

    result = subprocess.run(
        [executable, "fmt", str(path)], check=False, capture_output=True, text=True
    )
    if result.returncode != 0:
        logger.warning("zig fmt failed for %s: %s", path, result.stderr.strip())
        return False
    return True
