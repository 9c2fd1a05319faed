"""
Queue module.
Contains the queue engine and the history and reprint service.
"""

from print_queue.queue.engine import QueueEngine
from print_queue.queue.history import HistoryService

__all__ = ["QueueEngine", "HistoryService"]
