import json

import pytest

from issue_reporter.core.exceptions import ReportValidationError, UploadError
from issue_reporter.core.report_intake import ReportIntake, Screenshot, report_from_request

from .conftest import FakeUploader, network_call


def test_report_from_request():
    report = report_from_request({
        'url': 'https://app.example.com',
        'payload': {'issue': 'x'},
        'response': {'status': 500},
        'requestHeaders': {'Accept': '*/*', 'X-Retry': 3},
        'imageS3URL': 'https://img.example.com/a.png',
    })

    assert report.url == 'https://app.example.com'
    assert report.request_headers == {'Accept': '*/*', 'X-Retry': '3'}
    assert report.has_image


@pytest.mark.parametrize("body", [
    {'payload': {}, 'response': {}, 'requestHeaders': {}},
    {'url': '', 'payload': {}, 'response': {}, 'requestHeaders': {}},
    {'url': 'https://a', 'payload': [], 'response': {}, 'requestHeaders': {}},
    {'url': 'https://a', 'payload': {}, 'response': "ok", 'requestHeaders': {}},
    "not an object",
])
def test_report_from_request_rejects_malformed(body):
    with pytest.raises(ReportValidationError):
        report_from_request(body)


def test_form_requires_issue_and_description():
    with pytest.raises(ReportValidationError) as exc_info:
        ReportIntake().from_issue_form({'issue': 'x'})
    assert 'description' in str(exc_info.value)


def test_form_with_valid_network_calls():
    raw = json.dumps([network_call(0), network_call(1)])

    report = ReportIntake().from_issue_form({
        'issue': 'Broken save',
        'description': 'Nothing happens',
        'userEmail': 'u@example.com',
        'failedNetworkCalls': raw,
        'pageUrl': 'https://app.example.com/items',
    })

    assert report.url == 'https://app.example.com/items'
    assert report.response == {'status': 'reported'}
    assert report.request_headers == {'Content-Type': 'multipart/form-data'}
    assert report.payload['failedNetworkCalls'] == [network_call(0), network_call(1)]
    assert report.payload['rawNetworkCallsJSON'] == raw
    assert report.payload['userEmail'] == 'u@example.com'
    assert report.image_reference == ""


def test_form_with_generic_json_network_calls():
    raw = json.dumps({'not': 'a list'})

    report = ReportIntake().from_issue_form({'issue': 'x', 'description': 'y', 'failedNetworkCalls': raw})

    assert report.payload['failedNetworkCalls'] == {'not': 'a list'}
    assert report.payload['rawNetworkCallsJSON'] == raw


def test_form_with_garbage_network_calls():
    report = ReportIntake().from_issue_form({'issue': 'x', 'description': 'y', 'failedNetworkCalls': '[{oops'})

    assert report.payload['failedNetworkCalls'] == []
    assert report.payload['rawNetworkCallsJSON'] == '[{oops'


def test_form_without_network_calls():
    report = ReportIntake().from_issue_form({'issue': 'x', 'description': 'y'})

    assert report.payload['failedNetworkCalls'] == []
    assert report.payload['rawNetworkCallsJSON'] == ""


def test_screenshot_upload():
    uploader = FakeUploader()
    intake = ReportIntake(uploader=uploader)

    report = intake.from_issue_form({'issue': 'x', 'description': 'y'}, Screenshot(b"png-bytes", "image/png", "a.png"))

    assert report.image_reference == uploader.url
    assert uploader.uploads == [(b"png-bytes", "image/png", "a.png")]


def test_failed_upload_falls_back_to_form_reference():
    intake = ReportIntake(uploader=FakeUploader(error=UploadError("denied")))

    report = intake.from_issue_form(
        {'issue': 'x', 'description': 'y', 'imageS3URL': 'https://img.example.com/prev.png'},
        Screenshot(b"png-bytes"),
    )

    assert report.image_reference == 'https://img.example.com/prev.png'


def test_failed_upload_without_reference_drops_screenshot():
    intake = ReportIntake(uploader=FakeUploader(error=UploadError("denied")))

    report = intake.from_issue_form({'issue': 'x', 'description': 'y', 'imageS3URL': 'null'}, Screenshot(b"png"))

    assert report.image_reference == ""
    assert not report.has_image


def test_screenshot_without_uploader_is_dropped():
    assert ReportIntake().upload_screenshot(Screenshot(b"png")) == ""
    assert ReportIntake(uploader=FakeUploader()).upload_screenshot(Screenshot(b"")) == ""


def test_form_with_deeply_nested_network_calls_keeps_raw_field():
    raw = "[" * 100000

    report = ReportIntake().from_issue_form({'issue': 'x', 'description': 'y', 'failedNetworkCalls': raw})

    assert report.payload['failedNetworkCalls'] == []
    assert report.payload['rawNetworkCallsJSON'] == raw
