"""
intensive — cooperative CPU-bound operations for asyncio.

    import intensive as I

    def checksum(embed):
        total = 0
        for chunk in chunks:
            total = crc32(chunk, total)
            yield                      # checkpoint: safe to breathe here
        return total

    op = I.operation(checksum)
    op.run_sync()                      # all at once
    await op.run()                     # yielding to the event loop regularly

    from intensive import policy       # Breath intervals
    from intensive import tracing      # Context binding, breath metrics
"""

from intensive import policy
from intensive._types import (
    CHECKPOINT,
    Breath,
    Checkpoint,
    Event,
    Stats,
    Steps,
    Definition,
    BoundDefinition,
    is_operation,
)
from intensive._errors import NotAnOperation, OperationBusy, OperationError
from intensive._compose import Embed
from intensive._operation import Operation, operation
from intensive import tracing

__version__ = "0.1.0"

__all__ = (
    "policy",
    "tracing",
    "CHECKPOINT",
    "Breath",
    "Checkpoint",
    "Event",
    "Stats",
    "Steps",
    "Definition",
    "BoundDefinition",
    "Embed",
    "Operation",
    "operation",
    "is_operation",
    "OperationError",
    "NotAnOperation",
    "OperationBusy",
)
