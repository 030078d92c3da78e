"""Compute device profiles."""

from speaker_scribe.devices.profile import (
    DeviceProfile,
    PRIMARY_DEVICE,
    FALLBACK_DEVICE,
    SUPPORTED_DEVICES,
    resolve_device,
    detect_device,
)

__all__ = [
    "DeviceProfile",
    "PRIMARY_DEVICE",
    "FALLBACK_DEVICE",
    "SUPPORTED_DEVICES",
    "resolve_device",
    "detect_device",
]
