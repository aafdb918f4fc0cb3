"""Split ordered sequences into API-sized chunks."""

from typing import List, Sequence, TypeVar

T = TypeVar('T')


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split items into consecutive chunks of at most size elements.

    Order is preserved across and within chunks. Every chunk except the last
    holds exactly size items; no empty chunk is ever produced. The input is
    not modified.

    Args:
        items: Ordered sequence to split
        size: Maximum chunk length (must be >= 1)

    Returns:
        List of chunks (empty list for empty input)

    Raises:
        ValueError: If size is less than 1

    Example:
        >>> chunk([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"Chunk size must be a positive integer, got {size}")

    return [list(items[start:start + size]) for start in range(0, len(items), size)]
