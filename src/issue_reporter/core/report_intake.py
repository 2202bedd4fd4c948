"""
Turning inbound requests into diagnostic reports.

Two request shapes are accepted: a JSON ticket request that already has
url/payload/response/requestHeaders, and the issue form posted by the
in-app reporting widget.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .exceptions import ReportValidationError, UploadError
from .network_calls import NetworkCallParser, parse_generic_json
from .report import DiagnosticReport
from ..config.format_functions import is_valid_image_reference, preview
from ..utils.logger import get_logger

REQUIRED_REQUEST_FIELDS = ['url', 'payload', 'response', 'requestHeaders']
REQUIRED_FORM_FIELDS = ['issue', 'description']


@dataclass
class Screenshot:
    data: bytes
    content_type: str = "image/png"
    filename: Optional[str] = None


def report_from_request(data: Dict[str, Any]) -> DiagnosticReport:
    """
    Validate a JSON ticket request and build the report.

    Args:
        data: Decoded request body

    Returns:
        DiagnosticReport

    Raises:
        ReportValidationError: if required fields are missing or mistyped
    """
    if not isinstance(data, dict):
        raise ReportValidationError("Request body must be a JSON object")

    missing_fields = [name for name in REQUIRED_REQUEST_FIELDS if data.get(name) is None]
    if missing_fields:
        raise ReportValidationError(f"Missing required fields: {missing_fields}")

    if not isinstance(data['url'], str) or not data['url']:
        raise ReportValidationError("Field 'url' must be a non-empty string")
    for name in ('payload', 'response', 'requestHeaders'):
        if not isinstance(data[name], dict):
            raise ReportValidationError(f"Field '{name}' must be an object")

    headers = {str(k): v if isinstance(v, str) else str(v) for k, v in data['requestHeaders'].items()}
    image_reference = data.get('imageS3URL')

    return DiagnosticReport(
        url=data['url'],
        payload=data['payload'],
        response=data['response'],
        request_headers=headers,
        image_reference=image_reference if isinstance(image_reference, str) else None,
    )


class ReportIntake:
    """
    Builds reports from the issue form, uploading the screenshot if given.
    """

    def __init__(self, uploader=None, parser: Optional[NetworkCallParser] = None):
        """
        Args:
            uploader: Object storage uploader with upload(data, content_type, filename) (optional)
            parser: Network call parser
        """
        self.uploader = uploader
        self.parser = parser or NetworkCallParser()
        self.logger = get_logger()

    def upload_screenshot(self, screenshot: Optional[Screenshot]) -> str:
        """Upload a screenshot; any failure yields an empty reference."""
        if screenshot is None or not screenshot.data:
            self.logger.info("No screenshot uploaded")
            return ""

        if self.uploader is None:
            self.logger.warning("Object storage not configured, screenshot dropped")
            return ""

        try:
            url = self.uploader.upload(screenshot.data, screenshot.content_type, screenshot.filename)
        except UploadError as e:
            self.logger.error(f"Failed to upload screenshot: {e}")
            return ""

        self.logger.success(f"Screenshot uploaded: {url}")
        return url

    def from_issue_form(self, form: Dict[str, Any], screenshot: Optional[Screenshot] = None) -> DiagnosticReport:
        """
        Build a report from issue form fields.

        Args:
            form: Form fields (issue, description, userEmail, leadId, product,
                failedNetworkCalls, pageUrl, imageS3URL)
            screenshot: Optional screenshot file

        Returns:
            DiagnosticReport

        Raises:
            ReportValidationError: if issue or description is missing
        """
        missing_fields = [name for name in REQUIRED_FORM_FIELDS if not _form_value(form, name)]
        if missing_fields:
            raise ReportValidationError(f"Missing required fields: {missing_fields}")

        image_url = self.upload_screenshot(screenshot)
        if not image_url and is_valid_image_reference(_form_value(form, 'imageS3URL')):
            image_url = _form_value(form, 'imageS3URL')

        raw_calls = _form_value(form, 'failedNetworkCalls')
        result = self.parser.parse(raw_calls)

        payload: Dict[str, Any] = {
            'issue': _form_value(form, 'issue'),
            'description': _form_value(form, 'description'),
            'userEmail': _form_value(form, 'userEmail'),
            'leadId': _form_value(form, 'leadId'),
            'product': _form_value(form, 'product'),
        }

        if result.ok:
            payload['failedNetworkCalls'] = [call.to_dict() for call in result.calls]
        else:
            self.logger.warning(
                f"Processing network calls with fallback approach: {result.error} "
                f"(sample: {preview(raw_calls)})"
            )
            is_json, generic = parse_generic_json(raw_calls)
            if is_json:
                self.logger.info("Parsed network calls as generic JSON")
                payload['failedNetworkCalls'] = generic
            else:
                payload['failedNetworkCalls'] = []
        # Always keep the raw field; the structured list may have lost detail
        payload['rawNetworkCallsJSON'] = raw_calls

        return DiagnosticReport(
            url=_form_value(form, 'pageUrl'),
            payload=payload,
            response={'status': 'reported'},
            request_headers={'Content-Type': 'multipart/form-data'},
            image_reference=image_url,
        )


def _form_value(form: Dict[str, Any], name: str) -> str:
    value = form.get(name)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
