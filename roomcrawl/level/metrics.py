from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'rooms_created': 0,
        'primary_rooms': 0,
        'branch_edges_added': 0,
        'loop_rooms_added': 0,
        'edges_pruned': 0,
        'rooms_stranded': 0,
        'items_scattered': 0,
        'keys_placed': 0,
        'key_draws': 0,
        'attempts': 0,
        'failures': {},
        'runtime_ms': 0.0,
    }
