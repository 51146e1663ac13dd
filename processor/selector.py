"""Cascading selection of candidate event nodes in a parsed page."""
import logging
from typing import Callable, List, NamedTuple, Sequence

from bs4 import Tag

logger = logging.getLogger(__name__)

Predicate = Callable[[Tag], bool]


class SelectorTier(NamedTuple):
    """Named group of node predicates tried together."""
    name: str
    predicates: Sequence[Predicate]

    def matches(self, node: Tag) -> bool:
        return any(predicate(node) for predicate in self.predicates)


def has_class(*class_names: str) -> Predicate:
    """Predicate matching elements carrying any of the given classes."""
    wanted = set(class_names)

    def predicate(node: Tag) -> bool:
        return bool(wanted.intersection(node.get('class') or ()))
    return predicate


def has_attribute(name: str) -> Predicate:
    def predicate(node: Tag) -> bool:
        return node.has_attr(name)
    return predicate


def link_containing(fragment: str) -> Predicate:
    """Predicate matching <a> elements whose href contains fragment."""
    def predicate(node: Tag) -> bool:
        return node.name == 'a' and fragment in (node.get('href') or '')
    return predicate


def is_tag(name: str) -> Predicate:
    def predicate(node: Tag) -> bool:
        return node.name == name
    return predicate


def inside(ancestor: Predicate, predicate: Predicate) -> Predicate:
    """Predicate matching nodes that also have an ancestor matching ancestor."""
    def combined(node: Tag) -> bool:
        if not predicate(node):
            return False
        return any(ancestor(parent) for parent in node.parents if isinstance(parent, Tag))
    return combined


CONTAINERS: Sequence[Predicate] = (
    has_class('ext-campaignevents-collaborationlist'),
    has_class('mw-collaborationlist'),
    has_class('collaborationlist'),
    has_class('mw-parser-output'),
    is_tag('main'),
)

# Most specific first
SELECTOR_TIERS: Sequence[SelectorTier] = (
    SelectorTier('event-platform', (
        has_attribute('data-ce-event-id'),
        has_class('ce-event'),
    )),
    SelectorTier('event-card', (
        has_class('ce-event-card', 'event-card', 'mw-event-card'),
        inside(has_class('mw-list-item'), has_class('mw-ui-card')),
    )),
    SelectorTier('event-details-link', (
        link_containing('Special:EventDetails'),
    )),
    SelectorTier('wiki-link', (
        link_containing('/wiki/'),
    )),
)


def select_candidate_nodes(
    root: Tag,
    containers: Sequence[Predicate] = CONTAINERS,
    tiers: Sequence[SelectorTier] = SELECTOR_TIERS
) -> List[Tag]:
    """
    Find candidate event nodes using the first selector tier that matches.

    Containers are tried in order; within each container found, tiers are
    tried from most to least specific and the first non-empty tier wins.

    Args:
        root: Parsed document
        containers: Predicates locating the listing container
        tiers: Selector tiers, most specific first

    Returns:
        Candidate nodes in document order, or an empty list
    """
    for container_predicate in containers:
        container = root.find(container_predicate)
        if container is None:
            continue
        for tier in tiers:
            nodes = container.find_all(tier.matches)
            if nodes:
                logger.info(
                    f"Selected {len(nodes)} candidate nodes with tier '{tier.name}'"
                )
                return nodes
    logger.warning("No candidate event nodes found in any container")
    return []
