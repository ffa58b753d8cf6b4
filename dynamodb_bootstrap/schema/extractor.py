"""Pick the key-bearing attributes out of an entity descriptor."""

from typing import List, NamedTuple, Tuple

from ..models import AttributeDescriptor, EntityDescriptor, KeyRole


class TaggedAttribute(NamedTuple):
    """An attribute descriptor paired with every key role it holds."""
    descriptor: AttributeDescriptor
    roles: Tuple[KeyRole, ...]


def extract_key_attributes(entity: EntityDescriptor) -> List[TaggedAttribute]:
    """Return the role-tagged attributes of ``entity`` in declaration order.

    Attributes without any key role never appear in AttributeDefinitions, so
    they are dropped here. An entity with no tagged attributes yields an empty
    list; the missing primary key is reported when the table schema is
    validated.
    """
    return [
        TaggedAttribute(attribute.descriptor, attribute.roles)
        for attribute in entity.attributes
        if attribute.roles
    ]
