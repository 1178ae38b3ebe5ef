"""Even splitting of integer workloads across hosts."""

from loco_agent.errors import InvalidConfiguration


def even_load(total: int, parts: int) -> list[int]:
    """Split a total into shares differing by at most one.

    Every share gets `total // parts`; the remainder goes one unit at a
    time to the trailing shares, so `even_load(5, 2)` is `[2, 3]` and
    `even_load(100, 3)` is `[33, 33, 34]`.

    Args:
        total: Non-negative amount to split.
        parts: Number of shares.

    Returns:
        Shares in host order; their sum equals `total`.

    Raises:
        InvalidConfiguration: If `parts` is less than one or `total` is negative.
    """
    if parts < 1:
        raise InvalidConfiguration(f'Can not split a workload into {parts} parts')
    if total < 0:
        raise InvalidConfiguration(f'Can not split a negative amount {total}')

    share, remainder = divmod(total, parts)

    return [
        share + (index >= parts - remainder)
        for index in range(parts)
    ]


def even_bounds(total: int, parts: int) -> list[tuple[int, int]]:
    """Split `range(total)` into contiguous half-open bounds.

    Bounds follow the shares of `even_load` and leave no gaps.
    """
    bounds = []
    start = 0
    for share in even_load(total, parts):
        bounds.append((start, start + share))
        start += share

    return bounds
