import logging
import struct
from typing import Final

import zmq
import zmq.asyncio

from .base import FrameSink
from ..models import FrameResult

logger = logging.getLogger(__name__)

class ZMQSink(FrameSink):
    """
    Real-time broadcast of frustum parameters to a renderer using ZMQ PUB/SUB.

    Wire Format (81 bytes + 7 byte topic):
    - Topic: 'frustum' (7 bytes)
    - Valid: bool (1 byte)
    - Timestamp: float64 seconds, monotonic (8 bytes)
    - Frustum: left, right, bottom, top, near, far as float64 (48 bytes)
    - Eye position: x, y, z in meters as float64 (24 bytes)

    Invalid frames are still sent (with Valid = False) so the renderer can
    keep its previous projection.
    """

    # ! = Network (Big Endian)
    # ? = bool  (validity)
    # d = float64 x 10 (timestamp, l, r, b, t, n, f, x, y, z)
    _PACKER: Final[struct.Struct] = struct.Struct("!?10d")
    _TOPIC: Final[bytes] = b"frustum"

    def __init__(self, host: str = "tcp://*:5556"):
        """
        Args:
            host: The ZMQ binding address. Default binds to all interfaces on port 5556.
        """
        self.host = host

        self._ctx = zmq.asyncio.Context()
        self._sock = self._ctx.socket(zmq.PUB)

        # Renderers only care about the latest frames: 2 seconds at 60Hz
        self._sock.setsockopt(zmq.SNDHWM, 60 * 2)

    @classmethod
    def pack(cls, frame: FrameResult) -> bytes:
        """Topic + binary payload for one frame."""
        f = frame.frustum
        return cls._TOPIC + cls._PACKER.pack(
            f.ok,
            frame.timestamp,
            *f.bounds,
            *frame.eye,
        )

    @classmethod
    def unpack(cls, message: bytes) -> tuple:
        if not message.startswith(cls._TOPIC):
            raise ValueError("not a frustum message")
        return cls._PACKER.unpack(message[len(cls._TOPIC):])

    async def start(self) -> None:
        """Bind the publisher socket."""
        try:
            self._sock.bind(self.host)
            logger.info(f"ZMQSink bound to {self.host}")
        except zmq.ZMQError as e:
            logger.error(f"Failed to bind ZMQSink to {self.host}: {e}")
            raise

    async def send(self, frame: FrameResult) -> None:
        try:
            await self._sock.send(self.pack(frame))
        except zmq.ZMQError as e:
            # A broken subscriber must never stall the frame loop.
            logger.error(f"ZMQ broadcast failed: {e}")

    async def close(self) -> None:
        """Shut down the ZMQ context."""
        logger.info("Closing ZMQSink...")
        # Close immediately, don't wait for unsent messages
        self._sock.close(linger=0)
        self._ctx.term()
