"""
Audio cache for synthesized speech.

The welcome and reset lines are spoken on every session start, so keeping
their audio in the warm Lambda means one Polly call per distinct sentence.
Polly output for a given voice and sentence never changes, so entries do not
expire; the cache is bounded by the total size of the stored audio instead.
"""

import hashlib
from collections import OrderedDict
from threading import Lock
from typing import Dict, Optional


class AudioCache:
    """Thread-safe LRU of base64 audio, evicted by total encoded size."""

    def __init__(self, max_bytes: int = 4 * 1024 * 1024):
        self.max_bytes = max_bytes
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self._bytes = 0
        self._hits = 0
        self._misses = 0
        self._lock = Lock()

    @staticmethod
    def key_for(voice_id: str, text: str) -> str:
        return hashlib.sha256(f"{voice_id}\x1f{text}".encode()).hexdigest()

    def get(self, voice_id: str, text: str) -> Optional[str]:
        key = self.key_for(voice_id, text)
        with self._lock:
            audio = self._entries.get(key)
            if audio is None:
                self._misses += 1
                return None
            self._hits += 1
            self._entries.move_to_end(key)
            return audio

    def put(self, voice_id: str, text: str, audio: str) -> bool:
        """Store audio; clips larger than the whole budget are not kept."""
        size = len(audio)
        if size > self.max_bytes:
            return False

        key = self.key_for(voice_id, text)
        with self._lock:
            previous = self._entries.pop(key, None)
            if previous is not None:
                self._bytes -= len(previous)
            self._entries[key] = audio
            self._bytes += size

            while self._bytes > self.max_bytes:
                _, evicted = self._entries.popitem(last=False)
                self._bytes -= len(evicted)
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._bytes = 0

    def stats(self) -> Dict[str, int]:
        """Counters for the speech log line."""
        with self._lock:
            return {
                "entries": len(self._entries),
                "bytes": self._bytes,
                "max_bytes": self.max_bytes,
                "hits": self._hits,
                "misses": self._misses,
            }
