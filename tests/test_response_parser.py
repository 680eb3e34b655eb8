from __future__ import annotations

import pytest

from errors import ProviderError
from response_parser import extract_json_object, parse_solution


def test_parse_solution_from_prose_wrapped_json() -> None:
    text = (
        'Sure: {"approach":"A","code":"C","timeComplexity":"O(n)",'
        '"spaceComplexity":"O(1)"} hope this helps'
    )

    result = parse_solution(text)

    assert result.approach == "A"
    assert result.code == "C"
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(1)"
    assert result.is_error is False


def test_braces_inside_strings_do_not_end_the_object() -> None:
    text = '```json\n{"code": "if x { return }", "nested": {"a": 1}}\n``` trailing }'

    data = extract_json_object(text)

    assert data == {"code": "if x { return }", "nested": {"a": 1}}


def test_no_json_in_response() -> None:
    with pytest.raises(ProviderError, match="Could not extract JSON"):
        parse_solution("I am unable to see the screenshot.")


def test_invalid_json_is_rejected() -> None:
    with pytest.raises(ProviderError, match="not valid JSON"):
        extract_json_object("{approach: A}")


def test_missing_field_is_rejected() -> None:
    with pytest.raises(ProviderError, match="spaceComplexity"):
        parse_solution('{"approach":"A","code":"C","timeComplexity":"O(n)"}')


def test_empty_field_is_rejected() -> None:
    with pytest.raises(ProviderError, match="code"):
        parse_solution('{"approach":"A","code":"  ","timeComplexity":"O(n)","spaceComplexity":"O(1)"}')
