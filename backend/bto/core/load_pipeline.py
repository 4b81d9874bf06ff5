"""Load Pipeline — composes the two load phases behind an explicit barrier.

Invariants:
    - hydrate() completes for every kind before resolve() starts
    - The returned graph is RESOLVED (possibly empty or partially hydrated,
      which callers treat as a valid degenerate state)

Design Decisions:
    - Function composition over call-order convention: the stage field on the
      graph makes an out-of-order call fail loudly with LoadStageError
"""

from bto.core.housing_graph import HousingGraph
from bto.core.hydrate_entities import hydrate
from bto.core.repository_protocols import RecordSource
from bto.core.resolve_references import resolve


def load_graph(source: RecordSource) -> HousingGraph:
    """Unloaded -> Hydrated -> Resolved."""
    return resolve(hydrate(HousingGraph(), source), source)
