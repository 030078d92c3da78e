"""Audio file decoding into pipeline buffers."""

from pathlib import Path

import numpy as np

from speaker_scribe.core import SAMPLE_RATE, InvalidAudioError
from speaker_scribe.utils.decorators import logged


@logged
def load_audio(path: Path | str, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Decode any librosa-readable file to mono float32 at ``sample_rate``.

    Raises:
        InvalidAudioError: If the file is missing, undecodable, or empty
    """
    path = Path(path)
    if not path.exists():
        raise InvalidAudioError(f"Audio file not found: {path}")

    import librosa

    try:
        audio, _ = librosa.load(str(path), sr=sample_rate, mono=True)
    except Exception as e:
        raise InvalidAudioError(f"Could not decode {path.name}: {e}") from e

    if audio.size == 0:
        raise InvalidAudioError(f"{path.name} contains no samples")
    return audio.astype(np.float32, copy=False)
