"""Static per-device precision and backend profiles."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from speaker_scribe.core.exceptions import UnsupportedDeviceError

PRIMARY_DEVICE = "cuda"
FALLBACK_DEVICE = "cpu"

# Segmentation is pinned to CPU float32 on every profile
SEGMENTATION_DEVICE = FALLBACK_DEVICE
SEGMENTATION_PRECISION = "float32"


@dataclass(frozen=True)
class DeviceProfile:
    """Resolved backend settings for one device key."""
    device: str
    backend: str
    is_primary: bool
    precision: Mapping[str, str] = field(default_factory=dict)
    segmentation_device: str = SEGMENTATION_DEVICE

    @property
    def transcription_precision(self) -> str:
        return self.precision["transcription"]

    @property
    def segmentation_precision(self) -> str:
        return self.precision["segmentation"]


_PROFILES: Mapping[str, DeviceProfile] = MappingProxyType({
    PRIMARY_DEVICE: DeviceProfile(
        device=PRIMARY_DEVICE,
        backend="cuda",
        is_primary=True,
        precision=MappingProxyType({
            "transcription": "float16",
            "segmentation": SEGMENTATION_PRECISION,
        }),
    ),
    FALLBACK_DEVICE: DeviceProfile(
        device=FALLBACK_DEVICE,
        backend="cpu",
        is_primary=False,
        precision=MappingProxyType({
            "transcription": "int8",
            "segmentation": SEGMENTATION_PRECISION,
        }),
    ),
})

SUPPORTED_DEVICES: tuple[str, ...] = tuple(_PROFILES)


def resolve_device(device: str) -> DeviceProfile:
    """Look up the profile for ``device``.

    Raises:
        UnsupportedDeviceError: For any key other than 'cuda' or 'cpu'
    """
    try:
        return _PROFILES[device]
    except (KeyError, TypeError):
        raise UnsupportedDeviceError(device, SUPPORTED_DEVICES) from None


def detect_device() -> str:
    """Pick 'cuda' when torch sees a GPU, otherwise 'cpu'."""
    try:
        import torch
        return PRIMARY_DEVICE if torch.cuda.is_available() else FALLBACK_DEVICE
    except ImportError:
        return FALLBACK_DEVICE
