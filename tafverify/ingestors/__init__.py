"""Report ingestors for tafverify."""

from .bulletin import decode_bulletin, detect_report_type, split_bulletin

__all__ = ["decode_bulletin", "detect_report_type", "split_bulletin"]
