from ulid import ULID


def new_aggregate_id() -> str:
    """Generate a new, lexicographically sortable aggregate id."""
    return str(ULID())
