"""
Attribute collection manager / 属性集合管理器

Owns the ordered attribute list. ``order`` always equals the list index and
the required attribute can never be removed. Every change builds a new list
so observers can compare the previous and current collections.
"""

from typing import List, Optional, Sequence, Union

from app.account_setup.constants import MAX_ATTRIBUTES_ALLOWED, REQUIRED_ATTRIBUTE_NAME
from app.account_setup.ordering import find_index_by_name, reindex, swap_elements
from app.account_setup.validation import validate_attribute_name
from app.exceptions import ValidationError
from app.schemas.attribute import Attribute, create_attribute
from app.utils.logger import get_logger

logger = get_logger(__name__)

AttributeRef = Union[Attribute, str]


class AttributeManager:
    """
    属性集合管理器

    Attribute collection manager.

    Lookups are by name; an ``Attribute`` passed in only contributes its
    ``order`` as a hint.
    """

    def __init__(self, attributes: Optional[Sequence[Attribute]] = None):
        self._attributes: List[Attribute] = reindex(attributes or [])

    @property
    def attributes(self) -> List[Attribute]:
        return list(self._attributes)

    def add_attribute(self, name: str) -> Attribute:
        """
        Append a new attribute.

        Raises:
            ValidationError: On invalid or duplicate names, or when the
                collection is full. Errors are keyed by ``attribute_name``.
        """
        errors = validate_attribute_name(name, self._attributes)
        if not errors and len(self._attributes) >= MAX_ATTRIBUTES_ALLOWED:
            errors = [f"No more than {MAX_ATTRIBUTES_ALLOWED} attributes are allowed"]
        if errors:
            raise ValidationError(errors[0], {"attribute_name": errors})

        attribute = create_attribute(name.strip(), len(self._attributes))
        self._attributes = [*self._attributes, attribute]
        logger.debug("Attribute added: %s", attribute.name)
        return attribute

    def delete_attribute(self, attribute: AttributeRef) -> bool:
        """Remove an attribute. Returns False (and logs) when nothing changed."""
        name, hint = self._unpack(attribute)
        if name == REQUIRED_ATTRIBUTE_NAME:
            logger.warning("Cannot delete the required attribute %s", name)
            return False

        index = find_index_by_name(self._attributes, name, hint, kind="attribute")
        if index == -1:
            logger.warning("Attribute not found for deletion: %s", name)
            return False

        self._attributes = reindex(self._attributes[:index] + self._attributes[index + 1:])
        logger.debug("Attribute deleted: %s", name)
        return True

    def swap_attribute_up(self, attribute: AttributeRef) -> bool:
        return self._swap(attribute, -1)

    def swap_attribute_down(self, attribute: AttributeRef) -> bool:
        return self._swap(attribute, 1)

    def _swap(self, attribute: AttributeRef, step: int) -> bool:
        name, hint = self._unpack(attribute)
        index = find_index_by_name(self._attributes, name, hint, kind="attribute")
        if index == -1:
            logger.warning("Attribute not found for reorder: %s", name)
            return False

        target = index + step
        if not 0 <= target < len(self._attributes):
            logger.warning("Attribute %s is already at the boundary", name)
            return False

        self._attributes = reindex(swap_elements(self._attributes, index, target))
        return True

    @staticmethod
    def _unpack(attribute: AttributeRef):
        if isinstance(attribute, Attribute):
            return attribute.name, attribute.order
        return attribute, None
