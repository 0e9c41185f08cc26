import pytest

from gemproxy.llms.formatters.shared import parse_tool_arguments


@pytest.mark.unit
@pytest.mark.parametrize(
    "arguments",
    ["not json", "[1, 2]", "42", '"text"', "", "{broken"],
)
def test_non_object_arguments_fall_back_to_raw(arguments: str) -> None:
    parsed = parse_tool_arguments(arguments)
    assert parsed.structured is False
    assert parsed.value == {"raw": arguments}


@pytest.mark.unit
def test_object_arguments_are_decoded() -> None:
    parsed = parse_tool_arguments('{"a": 1, "b": [true]}')
    assert parsed.structured is True
    assert parsed.value == {"a": 1, "b": [True]}
    assert parsed.raw == '{"a": 1, "b": [true]}'


@pytest.mark.unit
def test_missing_arguments() -> None:
    parsed = parse_tool_arguments(None)
    assert parsed.structured is False
    assert parsed.value == {"raw": ""}


@pytest.mark.unit
def test_object_arguments_pass_through() -> None:
    parsed = parse_tool_arguments({"city": "Oslo"})
    assert parsed.structured is True
    assert parsed.value == {"city": "Oslo"}
    assert parsed.raw == '{"city": "Oslo"}'
