from repo_search.pipeline.clock import Clock, LoopClock, ManualClock
from repo_search.pipeline.controller import SearchController
from repo_search.pipeline.debounce import Debouncer
from repo_search.pipeline.dedupe import Deduplicator
from repo_search.pipeline.signals import Signal

__all__ = [
    "Clock",
    "LoopClock",
    "ManualClock",
    "SearchController",
    "Debouncer",
    "Deduplicator",
    "Signal",
]
