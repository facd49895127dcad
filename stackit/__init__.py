"""
StackIt - question/answer platform core.

The vote & acceptance consistency engine lives in ``stackit.engines.voting``.
"""

__version__ = "1.0.0"
