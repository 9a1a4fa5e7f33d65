"""
Edit distance between token names.

Classic Levenshtein distance with unit cost for insertion, deletion and
substitution.
"""


def levenshtein(a: str, b: str) -> int:
    """
    Number of single-character edits turning a into b.

    Uses a single rolling row, O(len(a) * len(b)) time and O(len(b)) space.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    row = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        prev_diag = row[0]
        row[0] = i
        for j in range(1, len(b) + 1):
            current = row[j]
            cost = 0 if a[i - 1] == b[j - 1] else 1
            row[j] = min(
                row[j] + 1,          # deletion
                row[j - 1] + 1,      # insertion
                prev_diag + cost,    # substitution
            )
            prev_diag = current
    return row[len(b)]


def within_distance(a: str, b: str, threshold: int) -> bool:
    """True when levenshtein(a, b) <= threshold."""
    # Length difference is a lower bound on the distance
    if abs(len(a) - len(b)) > threshold:
        return False
    return levenshtein(a, b) <= threshold
