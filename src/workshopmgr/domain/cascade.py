"""Delete plans for records with dependents.

A plan lists every record a deletion must take with it. It is computed from
a snapshot first and then executed by the store as one atomic batch, so a
failure part-way never leaves orphans behind.
"""

from dataclasses import dataclass
from typing import Iterable

from workshopmgr.domain.entities import Child, Collection, Registration


@dataclass(frozen=True)
class DeletePlan:
    """Ordered removals: dependents first, the target record last."""

    steps: tuple[tuple[Collection, str], ...]

    def count(self, collection: Collection) -> int:
        return sum(1 for step_collection, _ in self.steps if step_collection == collection)

    def __len__(self) -> int:
        return len(self.steps)


def plan_child_deletion(child_id: str, registrations: Iterable[Registration]) -> DeletePlan:
    """Child plus all of its registrations."""
    steps = [
        (Collection.REGISTRATIONS, reg.id)
        for reg in registrations
        if reg.child_id == child_id
    ]
    steps.append((Collection.CHILDREN, child_id))
    return DeletePlan(steps=tuple(steps))


def plan_parent_deletion(
    parent_id: str,
    children: Iterable[Child],
    registrations: Iterable[Registration],
) -> DeletePlan:
    """Parent, its children, and the children's registrations."""
    registrations = list(registrations)
    steps: list[tuple[Collection, str]] = []
    for child in children:
        if child.parent_id == parent_id:
            steps.extend(plan_child_deletion(child.id, registrations).steps)
    steps.append((Collection.PARENTS, parent_id))
    return DeletePlan(steps=tuple(steps))


def plan_workshop_deletion(
    workshop_id: str, registrations: Iterable[Registration]
) -> DeletePlan:
    """Workshop plus the registrations pointing at it."""
    steps = [
        (Collection.REGISTRATIONS, reg.id)
        for reg in registrations
        if reg.workshop_id == workshop_id
    ]
    steps.append((Collection.WORKSHOPS, workshop_id))
    return DeletePlan(steps=tuple(steps))
