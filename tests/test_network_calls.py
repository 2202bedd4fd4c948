import json

from issue_reporter.core.network_calls import NetworkCallParser, unescape_quoted, parse_generic_json
from issue_reporter.core.report import NetworkCall


def test_plain_quoted_and_double_encoded_forms_parse_identically(network_calls_json):
    parser = NetworkCallParser()
    quoted = '"' + network_calls_json.replace('\\', '\\\\').replace('"', '\\"') + '"'
    double_encoded = json.dumps(network_calls_json)

    plain = parser.parse(network_calls_json)
    from_quoted = parser.parse(quoted)
    from_double = parser.parse(double_encoded)

    assert plain.ok and from_quoted.ok and from_double.ok
    assert len(plain.calls) == 2
    assert plain.calls == from_quoted.calls == from_double.calls
    assert plain.strategy == 'direct'


def test_single_quoted_form(network_calls_json):
    result = NetworkCallParser().parse("'" + network_calls_json + "'")

    assert result.ok
    assert result.strategy == 'unescaped'
    assert result.calls[0].method == 'POST'


def test_parsed_fields(network_calls_json):
    call = NetworkCallParser().parse(network_calls_json).calls[1]

    assert call.url == 'https://api.example.com/v1/items/1'
    assert call.headers == {'Content-Type': 'application/json'}
    assert call.body == {'value': 'x' * 10}
    assert call.response_status == 500
    assert call.response_body == '{"error":"internal"}'
    assert call.page_url == 'https://app.example.com/items'
    assert call.timestamp == '2024-05-01T10:00:00Z'


def test_garbage_yields_empty_list_without_raising():
    raw = "this is {not json at all"
    result = NetworkCallParser().parse(raw)

    assert result.calls == []
    assert not result.ok
    assert result.raw == raw
    assert result.error


def test_json_that_is_not_a_call_list_fails_softly():
    result = NetworkCallParser().parse('{"requestData": {}}')

    assert not result.ok
    assert result.calls == []


def test_empty_and_null_inputs():
    parser = NetworkCallParser()

    assert parser.parse("").ok
    assert parser.parse(None).calls == []
    assert parser.parse("null").calls == []


def test_appended_strategy_is_used():
    def parse_semicolon_list(text):
        return [NetworkCall(url=url) for url in text.split(';')]

    parser = NetworkCallParser()
    parser.strategies.append(('semicolon', parse_semicolon_list))
    result = parser.parse("https://a;https://b")

    assert result.strategy == 'semicolon'
    assert [call.url for call in result.calls] == ['https://a', 'https://b']


def test_network_call_round_trips_wire_form(network_calls_json):
    call = NetworkCallParser().parse(network_calls_json).calls[0]

    assert call.to_dict() == json.loads(network_calls_json)[0]


def test_unescape_quoted():
    assert unescape_quoted('"[{\\"a\\": \\"b\\\\c\\"}]"') == '[{"a": "b\\c"}]'
    assert unescape_quoted('  [1]  ') == '[1]'


def test_parse_generic_json():
    assert parse_generic_json('{"a": 1}') == (True, {'a': 1})
    assert parse_generic_json('nope') == (False, None)


def test_double_encoded_strategy(network_calls_json):
    from issue_reporter.core.network_calls import PARSE_STRATEGIES

    parser = NetworkCallParser(strategies=[PARSE_STRATEGIES[0], PARSE_STRATEGIES[2]])
    result = parser.parse(json.dumps(network_calls_json))

    assert result.strategy == 'double_encoded'
    assert result.calls == NetworkCallParser().parse(network_calls_json).calls


def test_deeply_nested_garbage_does_not_raise():
    raw = "[" * 100000

    result = NetworkCallParser().parse(raw)

    assert not result.ok
    assert result.calls == []
    assert result.raw == raw
    assert parse_generic_json(raw) == (False, None)
