# tinymacs/core/BufferList.py
"""BufferList.py
==================
The set of live buffers: the main buffer and the minibuffer.

Windows do not hold buffers directly. They hold a :class:`BufferRef`, an
opaque handle resolved through the list on every access, so replacing a
buffer never leaves a window pointing at a stale object.
"""

from dataclasses import dataclass

from tinymacs.core.Buffer import Buffer


@dataclass(frozen=True)
class BufferRef:
    """Stable handle to a buffer in a :class:`BufferList`."""

    index: int

    @classmethod
    def main(cls) -> "BufferRef":
        return cls(0)

    @classmethod
    def minibuffer(cls) -> "BufferRef":
        return cls(1)


# ==================== BufferList Class ====================
class BufferList:
    """Owns the main buffer and the minibuffer for the life of the editor."""

    def __init__(self, main_buffer: Buffer, minibuffer: Buffer) -> None:
        self._buffers: list[Buffer] = [main_buffer, minibuffer]

    def resolve_ref(self, ref: BufferRef) -> Buffer:
        """Returns the buffer behind ``ref``.

        Raises:
            LookupError: If the handle does not name a live buffer. The main
                and minibuffer handles always resolve.
        """
        if not 0 <= ref.index < len(self._buffers):
            raise LookupError(f"No buffer for {ref}")
        return self._buffers[ref.index]

    @property
    def main_buffer(self) -> Buffer:
        return self._buffers[BufferRef.main().index]

    @property
    def minibuffer(self) -> Buffer:
        return self._buffers[BufferRef.minibuffer().index]
