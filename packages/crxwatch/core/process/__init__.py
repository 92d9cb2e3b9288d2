"""External process execution capability.

Example:
    >>> from crxwatch.core.process import AsyncProcessRunner
    >>> runner = AsyncProcessRunner()
    >>> outcome = await runner.run(["diff", "-U", "10", "-r", "a", "b"])
    >>> outcome.returncode
    1
"""

from .impl_fake import FakeProcessRunner, ProcessCall
from .impl_real import AsyncProcessRunner
from .models import ExitOutcome
from .protocols import ProcessRunner

__all__ = [
    "ExitOutcome",
    "ProcessRunner",
    "AsyncProcessRunner",
    "FakeProcessRunner",
    "ProcessCall",
]
