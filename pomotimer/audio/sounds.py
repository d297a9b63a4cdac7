"""Bell synthesis and playback using numpy + QSoundEffect.

The session bell is generated programmatically as a WAV file (a sine
wave with one overtone, shaped by an ADSR envelope) and cached in the
data directory, so later launches only load it.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)

BELL_FILENAME = "bell.wav"
SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int,
    decay: int,
    sustain_level: float,
    release: int,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.full(length, sustain_level, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    r_start = max(length - release, d_end)
    if r_start < length:
        env[r_start:] = np.linspace(sustain_level, 0.0, length - r_start)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Float samples in -1..1 → mono 16-bit PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def generate_bell(duration_s: float = 1.2) -> bytes:
    """Soft bell at A5 with an octave overtone and a long release."""
    tone = _sine(880.0, duration_s) * 0.4 + _sine(1760.0, duration_s) * 0.1
    env = _make_envelope(
        len(tone),
        attack=int(SAMPLE_RATE * 0.01),
        decay=int(SAMPLE_RATE * 0.25),
        sustain_level=0.3,
        release=int(SAMPLE_RATE * 0.7),
    )
    return _to_wav_bytes(tone * env)


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Caches the bell WAV and plays it through QSoundEffect.

    Usage::

        mgr = SoundManager(sounds_dir=paths.sounds_dir)
        mgr.set_volume(70)
        mgr.play_tone()
    """

    def __init__(
        self,
        sounds_dir: Path,
        parent: QObject | None = None,
        *,
        volume: int = 70,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = max(0, min(volume, 100)) / 100.0
        self._sounds_dir = Path(sounds_dir)
        self._effect: QSoundEffect | None = None

    # ── public API ────────────────────────────────────────────────────

    @property
    def bell_path(self) -> Path:
        return self._sounds_dir / BELL_FILENAME

    @property
    def volume(self) -> int:
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_volume(self, level: int) -> None:
        """Set volume (0-100)."""
        self._volume = max(0, min(level, 100)) / 100.0
        if self._effect is not None:
            self._effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play_tone(self) -> None:
        """Play the bell.  No-op when disabled.  OSError from the cache
        write propagates to the caller."""
        if not self._enabled:
            return
        effect = self._load_effect()
        effect.play()

    # ── internal ──────────────────────────────────────────────────────

    def ensure_wav_file(self) -> Path:
        """Write the bell WAV to the cache directory if missing."""
        path = self.bell_path
        if not path.exists():
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(generate_bell())
            logger.debug("bell cached at %s", path)
        return path

    def _load_effect(self) -> QSoundEffect:
        if self._effect is None:
            path = self.ensure_wav_file()
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(str(path)))
            effect.setVolume(self._volume)
            self._effect = effect
        return self._effect
