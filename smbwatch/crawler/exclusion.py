"""Share and extension exclusion."""

from collections.abc import Iterable
from dataclasses import dataclass, field


def normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension.startswith("."):
        extension = extension[1:]
    return extension


@dataclass(frozen=True)
class ExclusionFilter:
    """Share names are matched as given, extensions case-insensitively."""

    shares: frozenset[str] = field(default_factory=frozenset)
    extensions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_lists(
        cls,
        shares: Iterable[str] = (),
        extensions: Iterable[str] = (),
    ) -> "ExclusionFilter":
        return cls(
            shares=frozenset(shares),
            extensions=frozenset(normalize_extension(ext) for ext in extensions),
        )

    def should_skip_share(self, name: str) -> bool:
        return name in self.shares

    def should_skip_file(self, extension: str) -> bool:
        return extension.lower() in self.extensions
