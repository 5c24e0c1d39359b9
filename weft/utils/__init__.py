from .stream_accumulator import StreamAccumulator
from .stream_channel import StreamChannel

__all__ = ["StreamAccumulator", "StreamChannel"]
