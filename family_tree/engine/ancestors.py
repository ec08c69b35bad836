"""One-hop parent lookup used by every traversal."""

from family_tree.engine.cancellation import Deadline, check_deadline
from family_tree.storage.sqlite import GraphReader, Person


def parents_of(
    reader: GraphReader, person_id: str, deadline: Deadline | None = None
) -> list[Person]:
    """Get the distinct direct parents of a person.

    An unknown id, or a person with no recorded parents, gives an empty list.
    Parents are returned sorted by name so traversals are reproducible, but
    callers should treat the result as a set.

    Args:
        reader: Graph store primitives for the current session
        person_id: Child whose parents are wanted
        deadline: Optional cancellation signal

    Returns:
        List of parent Person objects, without duplicates
    """
    check_deadline(deadline)
    seen: dict[str, Person] = {}
    for parent in reader.find_parents(person_id):
        seen.setdefault(parent.id, parent)
    return sorted(seen.values(), key=lambda p: (p.name, p.id))
