from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from tetris_engine.game import GameEvent


logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# frequency (Hz), duration (s), amplitude
TONES: Dict[GameEvent, Tuple[float, float, float]] = {
    GameEvent.MOVE: (680.0, 0.07, 0.25),
    GameEvent.SOFT_DROP: (520.0, 0.08, 0.3),
    GameEvent.ROTATE: (890.0, 0.09, 0.3),
    GameEvent.HARD_DROP: (360.0, 0.15, 0.4),
    GameEvent.LINE_CLEAR: (780.0, 0.2, 0.35),
    GameEvent.SPAWN: (600.0, 0.07, 0.22),
    GameEvent.LOCK: (440.0, 0.12, 0.28),
    GameEvent.GAME_OVER: (250.0, 0.35, 0.4),
}


def synthesize_tone(frequency: float, duration: float, amplitude: float,
                    sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Stereo int16 sine burst with a half-sine envelope."""
    frames = int(sample_rate * duration)
    t = np.arange(frames, dtype=np.float64)
    envelope = np.sin(t / max(frames, 1) * np.pi)
    wave = np.sin(2.0 * np.pi * frequency * t / sample_rate) * amplitude * envelope
    mono = (wave * 32767).astype(np.int16)
    return np.column_stack((mono, mono))


class ToneBank:
    """Engine listener that plays a short synthesized tone per event."""

    def __init__(self, sample_rate: int = SAMPLE_RATE) -> None:
        self.enabled = True
        self._sounds: Dict[GameEvent, pygame.mixer.Sound] = {}
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=2)
            for event, (freq, duration, amp) in TONES.items():
                buf = synthesize_tone(freq, duration, amp, sample_rate)
                self._sounds[event] = pygame.sndarray.make_sound(buf)
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)
            self.enabled = False

    def __call__(self, event: GameEvent) -> None:
        sound: Optional[pygame.mixer.Sound] = self._sounds.get(event)
        if self.enabled and sound is not None:
            sound.play()
