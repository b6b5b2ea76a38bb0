"""Pipeline orchestration for level generation.

``LevelGenerator`` runs one attempt through the ordered stages (paths,
branches, relaxation, pruning, validation, content) and retries with the next
seed whenever a stage raises ``GenerationAttemptFailed``. The first attempt
that survives every stage becomes the returned ``Level``.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from roomcrawl.items.catalog import ItemCatalog, ItemDefinition
from roomcrawl.logging_utils import get_logger

from .branches import augment_branches
from .config import GENERATION_CONFIGS, GeneratorSettings, LevelGenConfig, select_config
from .connectivity import validate_connectivity
from .content import populate_content
from .errors import GenerationAttemptFailed, LevelGenerationError
from .metrics import init_metrics
from .paths import build_primary_paths
from .pruning import prune_connections
from .relax import relax_positions
from .rooms import Edge, Room, RoomGraph, VisitedState

log = get_logger("roomcrawl.level")


@dataclass
class Level:
    graph: RoomGraph
    key_definitions: List[ItemDefinition]
    depth: int
    seed: int
    config: LevelGenConfig
    current_id: int = -1
    previous_id: int = -1
    score: int = 0
    attempts: int = 1
    pruned_edges: List[Edge] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.current_id < 0:
            self.current_id = self.graph.start_id
        if self.previous_id < 0:
            self.previous_id = self.graph.start_id

    @property
    def current_room(self) -> Room:
        return self.graph[self.current_id]

    @property
    def previous_room(self) -> Room:
        return self.graph[self.previous_id]

    def mark_entered(self, room: Room) -> None:
        room.visited = VisitedState.VISITED
        for other_id in room.neighbors:
            other = self.graph[other_id]
            if other.visited is VisitedState.NOT_SEEN:
                other.visited = VisitedState.SEEN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "depth": self.depth,
            "seed": self.seed,
            "score": self.score,
            "current_room": self.current_id,
            "previous_room": self.previous_id,
            "start_room": self.graph.start_id,
            "end_room": self.graph.end_id,
            "keys": [d.slug for d in self.key_definitions],
            "rooms": [
                {
                    "id": r.id,
                    "x": round(r.x, 3),
                    "y": round(r.y, 3),
                    "neighbors": list(r.neighbors),
                    "visited": r.visited.value,
                    "items": [i.to_dict() for i in r.items],
                }
                for r in self.graph
            ],
        }


class LevelGenerator:
    """Generate levels from an item catalog and a depth-indexed config table."""

    def __init__(
        self,
        catalog: ItemCatalog,
        configs: Sequence[LevelGenConfig] = GENERATION_CONFIGS,
        settings: Optional[GeneratorSettings] = None,
        rng_factory: Callable[[int], random.Random] = random.Random,
    ):
        self.catalog = catalog
        self.configs = tuple(configs)
        self.settings = settings or GeneratorSettings()
        self.rng_factory = rng_factory
        self.last_seed: Optional[int] = None

    def generate(
        self,
        depth: int = 0,
        attempts: Optional[int] = None,
        seed: Optional[int] = None,
        forced: bool = False,
    ) -> Level:
        """Return the first successful level, trying consecutive seeds.

        ``forced`` selects the larger budget used when a finished level must
        be replaced. Raises ``LevelGenerationError`` once the budget is spent.
        """
        if attempts is None:
            attempts = self.settings.forced_attempts if forced else self.settings.attempts
        if seed is None:
            seed = self.settings.seed
        base = seed if seed is not None else time.time_ns()
        reason = None
        failures: Dict[str, int] = {}
        for k in range(attempts):
            attempt_seed = base + k
            self.last_seed = attempt_seed
            try:
                level = self.run_attempt(depth, attempt_seed)
            except GenerationAttemptFailed as exc:
                reason = exc.reason
                failures[reason] = failures.get(reason, 0) + 1
                log.debug(event="generation_attempt_failed", seed=attempt_seed, reason=exc.reason, detail=exc.detail)
                continue
            level.attempts = k + 1
            if level.metrics:
                level.metrics['attempts'] = k + 1
                level.metrics['failures'] = failures
            log.info(
                event="level_generated",
                depth=depth,
                seed=attempt_seed,
                attempts=k + 1,
                rooms=len(level.graph),
                edges=level.graph.edge_count(),
                keys=len(level.key_definitions),
            )
            return level
        log.error(event="level_generation_exhausted", depth=depth, seed=self.last_seed, attempts=attempts, reason=reason)
        raise LevelGenerationError(self.last_seed, attempts, reason)

    def run_attempt(self, depth: int, seed: int) -> Level:
        """Execute one attempt with per-phase timing into ``metrics['phase_ms']``."""
        rng = self.rng_factory(seed)
        config = select_config(depth, self.configs)
        metrics: Dict[str, Any] = init_metrics() if self.settings.enable_metrics else {}
        if metrics:
            start = time.perf_counter()
            phase_times: Dict[str, float] = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter()
                r = fn(*a, **k)
                phase_times[label] = round((time.perf_counter() - ps) * 1000, 3)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        graph = RoomGraph()
        layout = _phase('primary_paths', build_primary_paths, graph, config, rng)
        if metrics:
            metrics['primary_rooms'] = sum(len(p) for p in layout.paths)
        _phase('branches', augment_branches, graph, layout, config.secondary_path_chance, rng, metrics)
        if metrics:
            metrics['rooms_created'] = len(graph)
        _phase('relax', relax_positions, graph, layout.x_margin)
        pruned = _phase('prune', prune_connections, graph, config.prune_chance, rng, metrics)
        _phase('validate', validate_connectivity, graph, metrics)
        keys = _phase('content', populate_content, graph, self.catalog, rng, metrics)

        level = Level(graph=graph, key_definitions=keys, depth=depth, seed=seed, config=config, pruned_edges=pruned, metrics=metrics)
        level.mark_entered(graph.start)
        if metrics:
            metrics['runtime_ms'] = round((time.perf_counter() - start) * 1000, 3)
            metrics['phase_ms'] = phase_times
        return level


__all__ = ["Level", "LevelGenerator"]
