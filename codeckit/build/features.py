"""
Licensing-driven FFmpeg feature selection.

The royalty-free allow-list lives in one versioned table instead of inline
configure flags, so every build and its manifest derive from the same data.
Bump ``version`` whenever the selection changes.

Excluded on purpose (patent pools / Dolby / DTS): dca, truehd, mlp, ac3,
eac3, aac, h264, hevc, mpeg2video, mpeg4. The MP1/2/3 decoders are kept;
their patents have expired.
"""

from dataclasses import dataclass
from typing import List, Tuple

PAGE_SIZE = 16384
PCM_ANCHOR = "mp3"


@dataclass(frozen=True)
class FeatureSet:
    """An immutable FFmpeg component allow-list."""

    name: str
    version: int
    label: str
    license: str
    switches: Tuple[str, ...]
    filters: Tuple[str, ...]
    audio_decoders: Tuple[str, ...]
    pcm_decoders: Tuple[str, ...]
    video_decoders: Tuple[str, ...]
    image_decoders: Tuple[str, ...]
    parsers: Tuple[str, ...]
    demuxers: Tuple[str, ...]
    protocols: Tuple[str, ...]
    excluded_patented: Tuple[str, ...]
    optimization_cflags: str = "-O3 -fPIC -DANDROID"
    page_size: int = PAGE_SIZE
    note: str = ""

    @property
    def decoders(self) -> Tuple[str, ...]:
        return (
            self.audio_decoders
            + self.pcm_decoders
            + self.video_decoders
            + self.image_decoders
        )

    @property
    def ldflags(self) -> str:
        """Align segments to the target's largest memory-mapping granularity."""
        return f"-Wl,-z,max-page-size={self.page_size}"

    @property
    def page_aligned(self) -> bool:
        return self.page_size >= PAGE_SIZE

    def codecs_audio(self) -> str:
        """Audio decoders for the manifest, PCM variants folded into ``pcm_*``."""
        names = list(self.audio_decoders)
        if self.pcm_decoders:
            # Listed right after mp3 in published manifests
            at = names.index(PCM_ANCHOR) + 1 if PCM_ANCHOR in names else len(names)
            names.insert(at, "pcm_*")
        return ",".join(names)

    def codecs_video(self) -> str:
        return ",".join(self.video_decoders + self.image_decoders)

    def configure_flags(self) -> List[str]:
        """
        Render the component selection as configure arguments.

        Everything is disabled first, then the allow-list re-enabled, so a
        newer FFmpeg with extra components cannot widen the selection.
        """
        flags = list(self.switches)
        flags += [
            "--disable-decoders",
            "--disable-encoders",
            "--disable-parsers",
            "--disable-demuxers",
            "--disable-muxers",
            "--disable-bsfs",
            "--disable-filters",
        ]
        flags.append(f"--enable-filter={','.join(self.filters)}")
        flags.append(f"--enable-decoder={','.join(self.decoders)}")
        flags.append(f"--enable-parser={','.join(self.parsers)}")
        flags.append(f"--enable-demuxer={','.join(self.demuxers)}")
        flags.append(f"--enable-protocol={','.join(self.protocols)}")
        flags += ["--enable-swresample", "--enable-swscale"]
        return flags


SAFE_CORE = FeatureSet(
    name="safe-core",
    version=2,
    label="Safe Core (Royalty-Free)",
    license="LGPL-2.1",
    switches=(
        "--enable-shared",
        "--disable-static",
        "--disable-doc",
        "--disable-programs",
        "--disable-symver",
        "--enable-pic",
        "--enable-jni",
        "--enable-mediacodec",
        "--disable-gpl",
        "--disable-nonfree",
    ),
    filters=(
        "aformat",
        "anull",
        "atrim",
        "format",
        "null",
        "trim",
        "scale",
        "volume",
        "aresample",
    ),
    audio_decoders=(
        "opus",
        "vorbis",
        "flac",
        "alac",
        "mp3",
        "mp2",
        "mp1",
        "wavpack",
        "ape",
    ),
    pcm_decoders=(
        "pcm_s16le",
        "pcm_s16be",
        "pcm_s24le",
        "pcm_s24be",
        "pcm_s32le",
        "pcm_f32le",
        "pcm_f64le",
        "pcm_mulaw",
        "pcm_alaw",
        "pcm_u8",
        "pcm_s8",
    ),
    video_decoders=("vp8", "vp9", "av1", "theora"),
    image_decoders=("mjpeg", "rawvideo", "gif", "png", "webp", "bmp"),
    parsers=("opus", "vorbis", "flac", "vp8", "vp9", "av1", "mpegaudio"),
    demuxers=(
        "ogg",
        "flac",
        "wav",
        "matroska",
        "webm",
        "mp3",
        "gif",
        "apng",
        "image2",
        "concat",
    ),
    protocols=("file", "http", "https", "concat", "data", "pipe"),
    excluded_patented=(
        "dca",
        "truehd",
        "mlp",
        "ac3",
        "eac3",
        "aac",
        "h264",
        "hevc",
        "mpeg2video",
        "mpeg4",
    ),
    note=(
        "Royalty-free codecs only. No patented codecs "
        "(DTS, TrueHD, AC3, AAC, H.264, H.265)."
    ),
)
