from snapshotkit.filters import (
    filter_newlines,
    filter_paths,
    map_json_strings,
    normalize_lines,
    normalize_paths,
    redact_data,
)
from snapshotkit.redactions import Redactions


def test_normalize_lines():
    assert normalize_lines("a\r\nb\rc\nd") == "a\nb\nc\nd"


def test_normalize_paths():
    assert normalize_paths("C:\\a\\b/c") == "C:/a/b/c"


def test_filters_on_text():
    assert filter_paths("John\\Doe\r\n") == "John/Doe\r\n"
    assert filter_newlines("John/Doe\r\n") == "John/Doe\n"


def test_binary_untouched():
    data = b"a\\b\r\n"
    assert filter_paths(data) == b"a\\b\r\n"
    assert filter_newlines(data) == b"a\\b\r\n"


def test_json_normalize_paths_and_lines_string():
    data = filter_paths({"name": "John\\Doe\r\n"})
    assert data == {"name": "John/Doe\r\n"}
    data = filter_newlines(data)
    assert data == {"name": "John/Doe\n"}


def test_json_normalize_paths_and_lines_nested_string():
    data = filter_paths(
        {"person": {"name": "John\\Doe\r\n", "nickname": "Jo\\hn\r\n"}}
    )
    assert data == {"person": {"name": "John/Doe\r\n", "nickname": "Jo/hn\r\n"}}
    data = filter_newlines(data)
    assert data == {"person": {"name": "John/Doe\n", "nickname": "Jo/hn\n"}}


def test_json_normalize_paths_and_lines_obj_key():
    data = filter_paths(
        {"person": {"John\\Doe\r\n": "name", "Jo\\hn\r\n": "nickname"}}
    )
    assert data == {"person": {"John/Doe\r\n": "name", "Jo/hn\r\n": "nickname"}}
    data = filter_newlines(data)
    assert data == {"person": {"John/Doe\n": "name", "Jo/hn\n": "nickname"}}


def test_json_normalize_paths_and_lines_array():
    data = filter_paths({"people": ["John\\Doe\r\n", "Jo\\hn\r\n"]})
    assert data == {"people": ["John/Doe\r\n", "Jo/hn\r\n"]}
    data = filter_newlines(data)
    assert data == {"people": ["John/Doe\n", "Jo/hn\n"]}


def test_json_normalize_paths_and_lines_array_obj():
    data = filter_paths(
        {"people": [{"name": "John\\Doe\r\n", "nickname": "Jo\\hn\r\n"}]}
    )
    assert data == {"people": [{"name": "John/Doe\r\n", "nickname": "Jo/hn\r\n"}]}
    data = filter_newlines(data)
    assert data == {"people": [{"name": "John/Doe\n", "nickname": "Jo/hn\n"}]}


def test_json_scalars_untouched():
    assert filter_paths({"n": 1, "b": True, "z": None}) == {"n": 1, "b": True, "z": None}


def test_map_json_strings_does_not_mutate_input():
    original = {"k": ["a\\b"]}
    result = map_json_strings(original, str.upper)
    assert result == {"K": ["A\\B"]}
    assert original == {"k": ["a\\b"]}


def test_redact_data_text():
    redactions = Redactions()
    redactions.insert("[LOCATION]", "World")
    assert redact_data("Hello World!", redactions) == "Hello [LOCATION]!"


def test_redact_data_json_keys_and_values():
    redactions = Redactions()
    redactions.insert("[A]", "key-a")
    redactions.insert("[V]", "value-b")
    data = {"key-a": "value-a", "key-b": "value-b"}
    assert redact_data(data, redactions) == {"[A]": "value-a", "key-b": "[V]"}


def test_redact_data_binary_untouched():
    redactions = Redactions()
    redactions.insert("[LOCATION]", "World")
    assert redact_data(b"World", redactions) == b"World"