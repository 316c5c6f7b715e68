import pytest

from number_maker.formula import digit_to_formula
from number_maker.frontier import Frontier, SeenCache
from number_maker.group import Group
from number_maker.settings import Options, build_settings

one, two, three = (digit_to_formula(d) for d in (1, 2, 3))


def _frontier(**kwargs: object) -> Frontier:
    options = Options(digit_string="123", symbols=["+"])
    for key, value in kwargs.items():
        setattr(options, key, value)
    return Frontier(build_settings(options))


def test_push_is_idempotent() -> None:
    frontier = _frontier()
    group = Group((one, two))
    assert frontier.push(group)
    assert not frontier.push(group)
    assert len(frontier) == 1
    assert frontier.queued_total == 1
    assert frontier.cache_hit_total == 1


def test_reordered_group_is_a_duplicate() -> None:
    frontier = _frontier()
    assert frontier.push(Group((one, two)))
    assert not frontier.push(Group((two, one)))


def test_order_matters_when_preserved() -> None:
    frontier = _frontier(preserve_order=True)
    assert frontier.push(Group((one, two)))
    assert frontier.push(Group((two, one)))


def test_seen_cache_resets_when_full() -> None:
    cache = SeenCache(2)
    cache.add("a")
    cache.add("b")
    cache.add("c")
    assert cache.resets == 1
    assert len(cache) == 1
    assert "a" not in cache and "c" in cache


def test_seen_cache_needs_room() -> None:
    with pytest.raises(ValueError):
        SeenCache(0)


def _order(frontier: Frontier) -> list[str]:
    root = Group((one,))
    children = [Group((two,)), Group((three,))]
    grandchild = Group((one, three))
    frontier.push(root)
    visited = []
    while frontier:
        group = frontier.pop()
        visited.append(",".join(f.text for f in group.formulas))
        if group is root:
            frontier.extend(children)
        elif group is children[0]:
            frontier.extend([grandchild])
    return visited


def test_depth_first_expands_newest_first() -> None:
    assert _order(_frontier(traversal="depth")) == ["1", "2", "1,3", "3"]


def test_breadth_first_expands_oldest_first() -> None:
    assert _order(_frontier(traversal="breadth")) == ["1", "2", "3", "1,3"]
