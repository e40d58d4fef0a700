from __future__ import annotations

import pytest

from bms_table.errors import HeaderValidationError
from bms_table.table_head import lint_head_dict, parse_head, resolve_data_location


def _head(**kw):
    d = {"name": "Satellite", "symbol": "sl", "data_url": "score.json"}
    d.update(kw)
    return d


def test_valid_head_keeps_unknown_fields():
    data = _head(levels=[0, "1", 2.5], tag="x", course=[{"name": "dan"}])
    head = parse_head(data)
    assert head.name == "Satellite"
    assert head.symbol == "sl"
    assert head.data_url == "score.json"
    assert head.levels == (0, "1", 2.5)
    assert head.level_order is None
    assert head.extra == {"tag": "x", "course": [{"name": "dan"}]}
    assert head.to_dict() == data
    assert head.get("course") == [{"name": "dan"}]


def test_alternate_spellings():
    head = parse_head({"name": "a", "symbol": "b", "dataLocation": "d.json", "levelOrder": ["x"]})
    assert head.data_url == "d.json"
    assert head.level_order == ("x",)

    head = parse_head(_head(level_order=[1, 2]))
    assert head.level_order == (1, 2)


def test_every_issue_is_reported():
    with pytest.raises(HeaderValidationError) as ei:
        parse_head({"name": 1, "levels": ["a", True, None], "level_order": "nope"})
    paths = [i.path for i in ei.value.issues]
    assert paths == ["name", "symbol", "data_url", "levels.1", "levels.2", "level_order"]
    msg = str(ei.value)
    assert "symbol" in msg and "levels.2" in msg


def test_not_an_object():
    issues = lint_head_dict(["name"])
    assert len(issues) == 1
    with pytest.raises(HeaderValidationError):
        parse_head(None)


def test_null_levels_is_invalid():
    issues = lint_head_dict(_head(levels=None))
    assert [i.path for i in issues] == ["levels"]


def test_resolve_relative_and_absolute():
    head = parse_head(_head(data_url="data/score.json"))
    assert resolve_data_location(head, "https://example.com/sl/header.json") == "https://example.com/sl/data/score.json"

    head = parse_head(_head(data_url="https://cdn.example.net/score.json"))
    assert resolve_data_location(head, "https://example.com/sl/header.json") == "https://cdn.example.net/score.json"


def test_resolve_rejects_non_http():
    head = parse_head(_head(data_url="javascript:alert(1)"))
    with pytest.raises(HeaderValidationError) as ei:
        resolve_data_location(head, "https://example.com/header.json")
    assert ei.value.issues[0].path == "data_url"
