"""Dependencies excluded from updating."""

from pathlib import Path


def load_skip_list(path: Path | None) -> set[str]:
    """Read dependency names to skip, one per line.

    Blank lines and ``#`` comments are ignored. A missing file means
    nothing is skipped.
    """
    if path is None or not Path(path).exists():
        return set()

    names = set()
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        name = line.split("#", 1)[0].strip()
        if name:
            names.add(name)
    return names
