from wikivoice.pipeline.orchestrator import SearchOrchestrator

__all__ = [
    "SearchOrchestrator",
]
