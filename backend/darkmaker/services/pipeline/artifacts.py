"""
Artifact tracking for one render job
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from darkmaker.models import ArtifactKind, FileHandle


@dataclass(frozen=True)
class TrackedArtifact:
    handle: FileHandle
    kind: ArtifactKind


class ArtifactSet:
    """Ordered, duplicate-free record of every file a job owns

    Cleanup deletes what is in here and nothing else.
    """

    def __init__(self):
        self._items: Dict[Path, TrackedArtifact] = {}

    def add(self, handle: FileHandle, kind: ArtifactKind = ArtifactKind.GENERATED) -> FileHandle:
        key = Path(handle.path)
        if key not in self._items:
            self._items[key] = TrackedArtifact(handle=handle, kind=kind)
        return handle

    def __contains__(self, handle: FileHandle) -> bool:
        return Path(handle.path) in self._items

    def __iter__(self) -> Iterator[TrackedArtifact]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def paths(self, kind: Optional[ArtifactKind] = None) -> List[Path]:
        return [path for path, item in self._items.items() if kind is None or item.kind is kind]

    def drain(self, delete: Callable[[Path], bool], keep: Optional[Path] = None) -> int:
        """Delete every tracked file and empty the set

        ``keep`` is released from tracking without being deleted.

        Returns:
            Number of files removed
        """
        removed = 0
        for path in list(self._items):
            if keep is None or path != keep:
                if delete(path):
                    removed += 1
            del self._items[path]
        return removed
