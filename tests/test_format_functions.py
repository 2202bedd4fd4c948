from issue_reporter.config.format_functions import (
    to_pretty_json, to_compact_json, truncate_text, is_valid_image_reference, preview,
)


def deeply_nested_list(depth=100000):
    nested = []
    for _ in range(depth):
        nested = [nested]
    return nested


def test_pretty_json():
    assert to_pretty_json({'a': [1]}) == '{\n  "a": [\n    1\n  ]\n}'
    assert to_pretty_json({'name': 'café'}) == '{\n  "name": "café"\n}'


def test_unserializable_values_fall_back():
    value = {'when': object()}
    assert to_pretty_json(value) == str(value)
    assert to_compact_json(value) == ""


def test_too_deeply_nested_values_fall_back():
    value = deeply_nested_list()

    assert to_pretty_json(value) == "<list nested too deeply to render>"
    assert to_compact_json(value) == ""


def test_truncate_text():
    assert truncate_text("") == ""
    assert truncate_text("short", 10) == "short"
    assert truncate_text("x" * 20, 10) == "xxxxxxx..."


def test_image_reference_and_preview():
    assert is_valid_image_reference("https://img.example.com/a.png")
    assert not is_valid_image_reference("null")
    assert not is_valid_image_reference(None)
    assert preview("x" * 150) == "x" * 100 + "..."
