"""
Quest collection manager / 任务集合管理器

A pure reducer over ``QuestState`` plus a thin stateful wrapper. The reducer
keeps two invariants on every transition:

- quest orders are exactly 0..n-1
- points_remaining + sum(experience_point_value) == TOTAL_EXPERIENCE_POINTS

Rejected actions log a warning and return the prior state object. Unknown
action types raise ``InvariantError``.
"""

from dataclasses import dataclass, replace
from typing import ClassVar, FrozenSet, Optional, Sequence, Tuple, Union

from app.account_setup.constants import (
    MAX_EXPERIENCE_POINTS_PER_QUEST,
    MAX_QUESTS_ALLOWED,
    TOTAL_EXPERIENCE_POINTS,
)
from app.account_setup.display import has_attribute_been_deleted_or_swapped
from app.account_setup.ordering import find_index_by_name, reindex, swap_elements
from app.exceptions import InvariantError
from app.schemas.attribute import Attribute, Direction
from app.schemas.quest import Quest
from app.utils.logger import get_logger
from app.utils.text import normalize_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class QuestState:
    quests: Tuple[Quest, ...] = ()
    points_remaining: int = TOTAL_EXPERIENCE_POINTS


# Actions / 动作

@dataclass(frozen=True)
class AddQuest:
    type: ClassVar[str] = "ADD_QUEST"
    quest: Quest


@dataclass(frozen=True)
class DeleteQuest:
    type: ClassVar[str] = "DELETE_QUEST"
    name: str
    order: Optional[int] = None


@dataclass(frozen=True)
class ChangeQuestOrder:
    type: ClassVar[str] = "CHANGE_QUEST_ORDER"
    name: str
    direction: Direction
    order: Optional[int] = None


@dataclass(frozen=True)
class ChangeQuestExperience:
    type: ClassVar[str] = "CHANGE_QUEST_EXPERIENCE"
    name: str
    direction: Direction
    order: Optional[int] = None


@dataclass(frozen=True)
class RemoveUnavailableAffectedAttributes:
    type: ClassVar[str] = "REMOVE_UNAVAILABLE_AFFECTED_ATTRIBUTES"
    attribute_names: FrozenSet[str]


QuestAction = Union[
    AddQuest,
    DeleteQuest,
    ChangeQuestOrder,
    ChangeQuestExperience,
    RemoveUnavailableAffectedAttributes,
]


def _add_quest(state: QuestState, action: AddQuest) -> QuestState:
    quest = action.quest
    if normalize_name(quest.name) in {normalize_name(q.name) for q in state.quests}:
        logger.warning("Quest with this name already exists: %s", quest.name)
        return state
    if len(state.quests) >= MAX_QUESTS_ALLOWED:
        logger.warning("Cannot add quest %s, limit of %d reached", quest.name, MAX_QUESTS_ALLOWED)
        return state
    if quest.experience_point_value > state.points_remaining:
        logger.warning(
            "Not enough points for quest %s (%d requested, %d remaining)",
            quest.name,
            quest.experience_point_value,
            state.points_remaining,
        )
        return state

    added = quest.model_copy(update={"order": len(state.quests)})
    return QuestState(
        quests=state.quests + (added,),
        points_remaining=state.points_remaining - added.experience_point_value,
    )


def _delete_quest(state: QuestState, action: DeleteQuest) -> QuestState:
    index = find_index_by_name(state.quests, action.name, action.order, kind="quest")
    if index == -1:
        logger.warning("Quest not found for deletion: %s", action.name)
        return state

    removed = state.quests[index]
    remaining = state.quests[:index] + state.quests[index + 1:]
    return QuestState(
        quests=tuple(reindex(remaining)),
        points_remaining=state.points_remaining + removed.experience_point_value,
    )


def _change_quest_order(state: QuestState, action: ChangeQuestOrder) -> QuestState:
    index = find_index_by_name(state.quests, action.name, action.order, kind="quest")
    if index == -1:
        logger.warning("Quest not found for reorder: %s", action.name)
        return state

    target = index - 1 if action.direction == Direction.UP else index + 1
    if not 0 <= target < len(state.quests):
        logger.warning("Quest %s is already at the boundary", action.name)
        return state

    return replace(state, quests=tuple(reindex(swap_elements(state.quests, index, target))))


def _change_quest_experience(state: QuestState, action: ChangeQuestExperience) -> QuestState:
    index = find_index_by_name(state.quests, action.name, action.order, kind="quest")
    if index == -1:
        logger.warning("Quest not found for experience change: %s", action.name)
        return state

    quest = state.quests[index]
    if action.direction == Direction.UP:
        if state.points_remaining <= 0:
            logger.warning("No experience points remaining")
            return state
        if quest.experience_point_value >= MAX_EXPERIENCE_POINTS_PER_QUEST:
            logger.warning("Quest %s is already at maximum experience", quest.name)
            return state
        delta = 1
    else:
        if quest.experience_point_value <= 0:
            logger.warning("Quest %s has no experience to remove", quest.name)
            return state
        delta = -1

    updated = quest.model_copy(
        update={"experience_point_value": quest.experience_point_value + delta}
    )
    return QuestState(
        quests=_replace_quest(state.quests, updated),
        points_remaining=state.points_remaining - delta,
    )


def _remove_unavailable_affected_attributes(
    state: QuestState,
    action: RemoveUnavailableAffectedAttributes,
) -> QuestState:
    changed = False
    quests = []
    for quest in state.quests:
        kept = [a for a in quest.affected_attributes if a.name in action.attribute_names]
        if len(kept) != len(quest.affected_attributes):
            changed = True
            quest = quest.model_copy(update={"affected_attributes": kept})
        quests.append(quest)

    if not changed:
        return state
    return replace(state, quests=tuple(quests))


def _replace_quest(quests: Sequence[Quest], updated: Quest) -> Tuple[Quest, ...]:
    index = find_index_by_name(quests, updated.name)
    if index == -1:
        raise InvariantError(f"Quest {updated.name!r} vanished during update")
    return tuple(quests[:index]) + (updated,) + tuple(quests[index + 1:])


_HANDLERS = {
    AddQuest.type: _add_quest,
    DeleteQuest.type: _delete_quest,
    ChangeQuestOrder.type: _change_quest_order,
    ChangeQuestExperience.type: _change_quest_experience,
    RemoveUnavailableAffectedAttributes.type: _remove_unavailable_affected_attributes,
}


def quest_reducer(state: QuestState, action: QuestAction) -> QuestState:
    """
    Apply one action and return the next state.

    Raises:
        InvariantError: For an unhandled action type.
    """
    handler = _HANDLERS.get(getattr(action, "type", None))
    if handler is None:
        raise InvariantError(f"Unhandled quest action: {action!r}")
    return handler(state, action)


class QuestManager:
    """
    任务集合管理器

    Stateful holder around ``quest_reducer``. ``observe_attributes`` is the
    change-detection hook: it runs the reference cascade only when the
    attribute collection shrank or lost a name.
    """

    def __init__(
        self,
        attributes: Optional[Sequence[Attribute]] = None,
        state: Optional[QuestState] = None,
    ):
        self._state = state or QuestState()
        self._observed: Tuple[Attribute, ...] = tuple(attributes or ())

    @property
    def state(self) -> QuestState:
        return self._state

    @property
    def quests(self):
        return list(self._state.quests)

    @property
    def points_remaining(self) -> int:
        return self._state.points_remaining

    def dispatch(self, action: QuestAction) -> bool:
        """Apply an action. Returns True when the state changed."""
        previous = self._state
        self._state = quest_reducer(previous, action)
        return self._state is not previous

    def add_quest(self, quest: Quest) -> bool:
        return self.dispatch(AddQuest(quest))

    def delete_quest(self, name: str, order: Optional[int] = None) -> bool:
        return self.dispatch(DeleteQuest(name, order))

    def change_quest_order(self, name: str, direction: Direction, order: Optional[int] = None) -> bool:
        return self.dispatch(ChangeQuestOrder(name, Direction(direction), order))

    def change_quest_experience(
        self,
        name: str,
        direction: Direction,
        order: Optional[int] = None,
    ) -> bool:
        return self.dispatch(ChangeQuestExperience(name, Direction(direction), order))

    def observe_attributes(self, attributes: Sequence[Attribute]) -> bool:
        """Run the cascade if attributes were removed since the last observation."""
        previous = self._observed
        self._observed = tuple(attributes)
        if not has_attribute_been_deleted_or_swapped(previous, self._observed):
            return False
        names = frozenset(attr.name for attr in self._observed)
        return self.dispatch(RemoveUnavailableAffectedAttributes(names))
