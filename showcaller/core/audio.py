from __future__ import annotations
import asyncio, io, logging, math, struct, sys, wave

log = logging.getLogger(__name__)

TONES_HZ = (880.0, 1320.0)
TONE_MS = 150
SAMPLE_RATE = 22050

def two_tone_wav(freqs=TONES_HZ, tone_ms: int = TONE_MS, rate: int = SAMPLE_RATE, volume: float = 0.3) -> bytes:
    """Bip court à deux tons, WAV mono 16 bits."""
    n = int(rate * tone_ms / 1000)
    frames = bytearray()
    for f in freqs:
        for i in range(n):
            # petite enveloppe linéaire pour éviter les clics
            env = min(1.0, i / (n * 0.1), (n - i) / (n * 0.1))
            sample = volume * env * math.sin(2 * math.pi * f * i / rate)
            frames += struct.pack("<h", int(sample * 32767))
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(bytes(frames))
    return buf.getvalue()

class BellPlayer:
    """Lecteur minimal headless: deux sonneries terminal, une par ton."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def __call__(self, wav: bytes) -> None:
        self.stream.write("\a" * len(TONES_HZ))
        self.stream.flush()

class AudioCue:
    def __init__(self, player=None, enabled: bool = True):
        self.player = player
        self.enabled = enabled
        self._wav = two_tone_wav()

    def play(self) -> None:
        """Fire-and-forget. Ne lève jamais: un son bloqué n'est pas une erreur."""
        if not self.enabled or self.player is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        try:
            if loop is None:
                self.player(self._wav)
                return
            fut = loop.run_in_executor(None, self.player, self._wav)
            fut.add_done_callback(_log_failure)
        except Exception:
            log.warning("Audio cue failed", exc_info=True)

def _log_failure(fut) -> None:
    if fut.cancelled():
        return
    exc = fut.exception()
    if exc is not None:
        log.warning("Audio cue failed: %s", exc)
