from .scenario import AggregateScenario, Outcome, same_payload

__all__ = [
    "AggregateScenario",
    "Outcome",
    "same_payload",
]
