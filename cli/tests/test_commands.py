import pytest

from treeshell import Branch, Command, ConfigurationError, Leaf, resolve


def _noop(ctx, args) -> None:
    return None


def _tree() -> dict:
    return {
        "show": Leaf(description="Show status", handler=_noop),
        "set": Leaf(description="Set value", arguments=["key", "value"], handler=_noop),
        "config": Branch(
            description="Configuration",
            children={
                "interfaces": Branch(
                    description="Interfaces",
                    children={
                        "list": Leaf(description="List interfaces", handler=_noop),
                        "add": Leaf(description="Add interface", arguments=["name"], handler=_noop),
                    },
                ),
                "routes": Leaf(description="Routes", handler=_noop),
            },
        ),
    }


def test_resolve_empty_path() -> None:
    for path in ([], [""]):
        result = resolve(_tree(), path)
        assert result.is_empty
        assert result.arguments == []
        assert not result.force_list


def test_resolve_exact_leaf() -> None:
    tree = _tree()
    result = resolve(tree, ["show"])
    assert result.matches == {"show": tree["show"]}
    assert result.arguments == []
    assert not result.force_list
    assert result.single == ("show", tree["show"])


def test_resolve_unique_prefix_at_every_level() -> None:
    tree = _tree()
    result = resolve(tree, ["con", "int", "li"])
    assert result.matches == {"config interfaces list": tree["config"].children["interfaces"].children["list"]}


def test_resolve_keeps_remaining_tokens_as_arguments() -> None:
    result = resolve(_tree(), ["se", "a", '"b', 'c"'])
    assert list(result.matches) == ["set"]
    assert result.arguments == ["a", '"b', 'c"']


def test_resolve_ambiguous_prefix_forces_listing() -> None:
    result = resolve(_tree(), ["s", "x"])
    assert sorted(result.matches) == ["set", "show"]
    assert result.force_list
    assert result.arguments == ["s", "x"]


def test_resolve_not_found() -> None:
    result = resolve(_tree(), ["nope"])
    assert result.not_found
    assert result.matches == {}
    assert resolve(_tree(), ["config", "zzz"]).not_found


def test_resolve_exact_name_wins_over_prefix() -> None:
    tree = {"set": Leaf(handler=_noop), "setup": Leaf(handler=_noop)}
    assert list(resolve(tree, ["set"]).matches) == ["set"]
    assert sorted(resolve(tree, ["se"]).matches) == ["set", "setup"]


def test_resolve_question_mark_lists_root() -> None:
    result = resolve(_tree(), ["?"])
    assert sorted(result.matches) == ["config", "set", "show"]
    assert result.force_list
    assert result.arguments == []


def test_resolve_question_mark_lists_branch_children() -> None:
    result = resolve(_tree(), ["config", "?"])
    assert sorted(result.matches) == ["config interfaces", "config routes"]
    assert result.force_list
    assert result.arguments == []


def test_resolve_question_mark_after_leaf_keeps_leaf() -> None:
    tree = _tree()
    result = resolve(tree, ["set", "a", "?"])
    assert result.matches == {"set": tree["set"]}
    assert result.force_list
    assert result.arguments == ["a"]


def test_resolve_question_mark_is_stripped_from_ambiguous_arguments() -> None:
    result = resolve(_tree(), ["s", "?"])
    assert result.arguments == ["s"]
    assert result.force_list


def test_resolve_branch_without_handler_lists_children() -> None:
    result = resolve(_tree(), ["config"])
    assert sorted(result.matches) == ["config interfaces", "config routes"]
    assert not result.force_list


def test_resolve_branch_with_handler_is_a_single_match() -> None:
    menu = Branch(description="Menu", handler=_noop, children={"a": Leaf(handler=_noop)})
    result = resolve({"menu": menu}, ["menu"])
    assert result.matches == {"menu": menu}

    listed = resolve({"menu": menu}, ["menu", "?"])
    assert list(listed.matches) == ["menu a"]


def test_resolve_skips_empty_tokens() -> None:
    result = resolve(_tree(), ["config", "", "routes"])
    assert list(result.matches) == ["config routes"]


def test_resolve_parent_with_arguments_is_a_configuration_error() -> None:
    tree = {
        "bad": Command(description="Broken", arguments=["x"], children={"child": Leaf(handler=_noop)}),
        "ok": Leaf(handler=_noop),
    }
    with pytest.raises(ConfigurationError) as exc:
        resolve(tree, ["bad"])
    assert exc.value.path == "bad"
    with pytest.raises(ConfigurationError):
        resolve(tree, ["ba", "?"])
    assert list(resolve(tree, ["ok"]).matches) == ["ok"]


def test_branch_and_leaf_shapes() -> None:
    assert Branch().arguments == []
    assert Leaf().children == {}
    assert Branch(children={"a": Leaf()}).is_branch
    assert not Leaf().is_branch
    with pytest.raises(TypeError):
        Leaf(children={"a": Leaf()})
    with pytest.raises(TypeError):
        Branch(arguments=["x"])
