"""
Display interface: structured game events and the sinks that show them.
"""

from .event_emitter import GameEvent, DisplaySink, MemorySink, EventEmitter
from .console import ConsoleSink

__all__ = ['GameEvent', 'DisplaySink', 'MemorySink', 'EventEmitter', 'ConsoleSink']
