"""
Canonical field extraction from loosely typed report payloads.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.format_functions import is_valid_image_reference


def get_string(mapping: Dict[str, Any], key: str) -> Optional[str]:
    """
    Typed lookup for a string field.

    Args:
        mapping: Arbitrary JSON object
        key: Field name

    Returns:
        The value if present and a string, else None
    """
    if not isinstance(mapping, dict):
        return None
    value = mapping.get(key)
    if isinstance(value, str):
        return value
    return None


def get_non_empty_string(mapping: Dict[str, Any], key: str) -> Optional[str]:
    value = get_string(mapping, key)
    return value if value else None


@dataclass(frozen=True)
class NormalizedFields:
    issue: str = ""
    description: str = ""
    user_email: str = ""
    lead_id: str = ""
    product: str = ""
    page_url: str = ""
    image_reference: str = ""


class FieldNormalizer:
    """
    Pulls the canonical ticket fields out of a report payload.

    Missing or mistyped fields never raise; they come back empty and the
    corresponding metadata line is simply left out of the ticket.
    """

    def normalize(self, payload: Dict[str, Any], url: str = "",
                  image_reference: Optional[str] = None) -> NormalizedFields:
        """
        Extract normalized fields.

        Args:
            payload: Report payload
            url: Top-level report URL, used when the payload has no page URL
            image_reference: Top-level screenshot reference

        Returns:
            NormalizedFields instance
        """
        page_url = get_non_empty_string(payload, 'url') or (url or "")

        image = image_reference if is_valid_image_reference(image_reference) else ""

        return NormalizedFields(
            issue=self.issue_title(payload),
            description=get_string(payload, 'description') or "",
            user_email=get_string(payload, 'userEmail') or "",
            lead_id=get_string(payload, 'leadId') or "",
            product=get_string(payload, 'product') or "",
            page_url=page_url,
            image_reference=image,
        )

    @staticmethod
    def issue_title(payload: Dict[str, Any]) -> str:
        # Titles that arrive as numbers or other scalars still identify the issue
        if not isinstance(payload, dict):
            return ""
        value = payload.get('issue')
        if value is None or isinstance(value, (dict, list)):
            return ""
        return str(value)
