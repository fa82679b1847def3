"""
Build manifest (``metadata.json``).

The manifest travels with the shared objects and tells the loading
application what the bundle contains. It is created once per successful
build and never modified afterwards; a rebuild replaces it wholesale.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from codeckit.build.features import FeatureSet
from codeckit.core.filesystem import atomic_write
from codeckit.cross.targets import ArchitectureProfile

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "metadata.json"
FORMAT_VERSION = 1

# Load order matters to the consumer: dependencies first
REQUIRED_LIBRARIES = (
    "libavutil.so",
    "libswresample.so",
    "libavcodec.so",
    "libavformat.so",
    "libswscale.so",
    "libavfilter.so",
)

# JSON key for the alignment flag is not a valid identifier
_ALIGNED_KEY = "16kb_aligned"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with second precision, e.g. '2024-05-01T12:00:00Z'."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class BuildManifest:
    """Descriptor for one successful per-ABI build."""

    ffmpeg_version: str
    build_type: str
    build_label: str
    license: str
    abi: str
    build_date: str
    min_android_api: int
    aligned_16kb: bool
    codecs_audio: str
    codecs_video: str
    excluded_patented: str
    note: str = ""
    required_libraries: List[str] = field(
        default_factory=lambda: list(REQUIRED_LIBRARIES)
    )
    format_version: int = FORMAT_VERSION

    @classmethod
    def for_profile(
        cls,
        profile: ArchitectureProfile,
        ffmpeg_version: str,
        features: FeatureSet,
        build_date: Optional[str] = None,
    ) -> "BuildManifest":
        """
        Synthesize the manifest for a build.

        Args:
            profile: Architecture the libraries were built for
            ffmpeg_version: Upstream FFmpeg version
            features: Feature set the build was configured with
            build_date: Override timestamp (default: now, UTC)
        """
        return cls(
            ffmpeg_version=ffmpeg_version,
            build_type=features.name,
            build_label=features.label,
            license=features.license,
            abi=profile.abi_dir,
            build_date=build_date or utc_timestamp(),
            min_android_api=profile.api_level,
            aligned_16kb=features.page_aligned,
            codecs_audio=features.codecs_audio(),
            codecs_video=features.codecs_video(),
            excluded_patented=",".join(features.excluded_patented),
            note=features.note,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise in the key order consumers expect."""
        data: Dict[str, Any] = {
            "format_version": self.format_version,
            "ffmpeg_version": self.ffmpeg_version,
            "build_type": self.build_type,
            "build_label": self.build_label,
            "license": self.license,
            "abi": self.abi,
            "build_date": self.build_date,
            "min_android_api": self.min_android_api,
            _ALIGNED_KEY: self.aligned_16kb,
        }
        if self.note:
            data["note"] = self.note
        data["codecs_audio"] = self.codecs_audio
        data["codecs_video"] = self.codecs_video
        data["excluded_patented"] = self.excluded_patented
        data["required_libraries"] = list(self.required_libraries)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildManifest":
        """
        Rebuild a manifest from parsed JSON.

        Raises:
            ValueError: If a required field is missing
        """
        try:
            return cls(
                format_version=int(data["format_version"]),
                ffmpeg_version=data["ffmpeg_version"],
                build_type=data["build_type"],
                build_label=data["build_label"],
                license=data["license"],
                abi=data["abi"],
                build_date=data["build_date"],
                min_android_api=int(data["min_android_api"]),
                aligned_16kb=bool(data.get(_ALIGNED_KEY, False)),
                codecs_audio=data.get("codecs_audio", ""),
                codecs_video=data.get("codecs_video", ""),
                excluded_patented=data.get("excluded_patented", ""),
                note=data.get("note", ""),
                required_libraries=list(data["required_libraries"]),
            )
        except KeyError as e:
            raise ValueError(f"Manifest missing required field: {e.args[0]}") from e

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=4) + "\n"

    def write(self, path: Path) -> Path:
        """Write the manifest atomically and return its path."""
        atomic_write(path, self.to_json())
        logger.info(f"Generated {path.name}")
        return path

    @classmethod
    def load(cls, path: Path) -> "BuildManifest":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
