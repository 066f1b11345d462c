from .base import FrameSink
from .parquet import ParquetSink
from .zmq import ZMQSink

__all__ = ["FrameSink", "ParquetSink", "ZMQSink"]
