"""Format metadata value objects.

ONLY extracted format metadata - a tagged union over the format families
we know how to read, with an explicit absent variant.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class FseqMetadata:
    """Header facts of a rendered FSEQ show file."""

    version: str
    channel_count: int
    frame_count: int
    step_time_ms: int
    sequence_length_seconds: float
    fps: int
    compression: str
    kind: str = "fseq"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class XsqMetadata:
    """Facts read from an xLights source sequence."""

    xlights_version: Optional[str] = None
    media_file: Optional[str] = None
    sequence_type: Optional[str] = None
    sequence_timing: Optional[str] = None
    model_count: int = 0
    effect_count: int = 0
    kind: str = "xsq"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AbsentMetadata:
    """No metadata: unsupported format or extraction failed."""

    kind: str = "none"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind}


FormatMetadata = Union[FseqMetadata, XsqMetadata, AbsentMetadata]

ABSENT_METADATA = AbsentMetadata()

_KINDS = {
    "fseq": FseqMetadata,
    "xsq": XsqMetadata,
    "none": AbsentMetadata,
}


def metadata_from_dict(data: Optional[Dict[str, Any]]) -> FormatMetadata:
    """Rebuild a metadata variant from its ``to_dict`` form.

    Unknown kinds and malformed payloads decode to the absent variant.
    """
    if not data:
        return ABSENT_METADATA
    klass = _KINDS.get(data.get("kind", "none"))
    if klass is None or klass is AbsentMetadata:
        return ABSENT_METADATA
    try:
        return klass(**data)
    except TypeError:
        return ABSENT_METADATA
