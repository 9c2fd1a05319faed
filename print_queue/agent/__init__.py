"""
Agent module.
Contains the polling print agent that consumes a unit's queue.
"""

from print_queue.agent.main import PrintAgent, run

__all__ = ["PrintAgent", "run"]
