"""
Environment-driven configuration for the issue reporter.
"""

import os
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _split_roster(value: Optional[str]) -> List[str]:
    """Split a comma-separated roster, dropping blank entries."""
    if not value:
        return []
    return [member.strip() for member in value.split(',') if member.strip()]


class ReporterConfig:
    """Issue reporter configuration class"""

    def __init__(self):
        # JIRA
        self.domain = os.getenv('JIRA_DOMAIN')
        self.email = os.getenv('JIRA_EMAIL')
        self.api_token = os.getenv('JIRA_API_TOKEN')
        self.project_key = os.getenv('JIRA_PROJECT_KEY', 'SUP')
        self.issue_type = os.getenv('JIRA_ISSUE_TYPE', 'Bug')
        self.fallback_issue_type_id = os.getenv('JIRA_FALLBACK_ISSUE_TYPE_ID', '10001')

        # Assignment
        self.support_team = _split_roster(os.getenv('SUPPORT_TEAM_MEMBERS'))

        # S3 screenshots
        self.s3_access_key = os.getenv('AWS_S3_ACCESS_KEY')
        self.s3_secret_key = os.getenv('AWS_S3_SECRET_KEY')
        self.s3_region = os.getenv('AWS_S3_REGION')
        self.s3_bucket = os.getenv('AWS_S3_BUCKET_NAME')

        # Persistence and logging
        self.ticket_store_file = os.getenv('TICKET_STORE_FILE', '')
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_file = os.getenv('LOG_FILE') or None

        # JIRA URL
        self.jira_url = f"https://{self.domain}"

    def validate(self):
        """Validate configuration"""
        required_fields = ['api_token', 'project_key', 'domain', 'email']
        missing_fields = [field for field in required_fields if not getattr(self, field)]

        if missing_fields:
            raise ValueError(f"Missing required configuration: {missing_fields}")

        if self.s3_access_key and not (self.s3_region and self.s3_bucket):
            raise ValueError("AWS_S3_REGION and AWS_S3_BUCKET_NAME are required when AWS_S3_ACCESS_KEY is set")

        return True

    @property
    def s3_enabled(self) -> bool:
        return bool(self.s3_bucket and self.s3_region)

    def get_jira_options(self):
        """Get JIRA options for python-jira library"""
        return {
            'server': self.jira_url,
            'verify': True
        }

    def get_auth(self) -> Tuple[str, str]:
        """Get authentication tuple for requests"""
        return (self.email, self.api_token)
