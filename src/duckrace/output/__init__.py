"""Output formatting and export."""

from .console import ConsoleOutput, describe_event
from .export import Exporter, compact_event, compact_result

__all__ = ["ConsoleOutput", "Exporter", "compact_event", "compact_result", "describe_event"]
