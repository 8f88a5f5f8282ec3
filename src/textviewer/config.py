"""Viewer configuration options."""

from dataclasses import dataclass, fields, replace

MB = 1024 * 1024


@dataclass(frozen=True)
class ViewerOptions:
    """Explicit configuration for a reading session.

    Every component receives these values from its caller; nothing reads
    module-level settings.
    """

    chunk_size: int = 1000  # lines per virtual-scroll chunk
    visible_chunk_radius: int = 3  # chunks kept materialized around the viewport
    lines_per_page: int = 30
    include_cover_page: bool = False
    large_file_threshold_bytes: int = 50 * MB
    virtualization_threshold_chars: int = 100_000
    virtualization_threshold_lines: int = 1_000
    estimated_line_height: float = 20

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name == "include_cover_page":
                continue
            value = getattr(self, f.name)
            if value <= 0:
                raise ValueError(f"{f.name} must be positive, got {value!r}")

    def with_overrides(self, **overrides) -> "ViewerOptions":
        """Return a copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)
