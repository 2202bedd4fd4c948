"""
JIRA client used to create tickets and post overflow comments.
"""

import threading
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

import requests
from jira import JIRA
from jira.exceptions import JIRAError

from ..core.exceptions import TicketSubmissionError
from ..utils.logger import get_logger

# How much of an error response body to keep
MAX_ERROR_BODY = 1024


class JiraTicketClient:
    """
    Thin wrapper over python-jira for the operations ticket creation needs.
    """

    def __init__(self, config, timeout: int = 30):
        """
        Initialize the JIRA client.

        Args:
            config: ReporterConfig (server options and credentials)
            timeout: Request timeout in seconds for REST calls
        """
        self.server = config.get_jira_options()['server']
        self.auth = config.get_auth()
        self.base_url = f"{self.server}/rest/api/3"
        self.timeout = timeout
        self.logger = get_logger()
        self._jira: Optional[JIRA] = None
        self._jira_lock = threading.Lock()

        host = urlparse(self.server).netloc or self.server
        self.browse_base = f"https://{host}/browse"

    @property
    def jira(self) -> JIRA:
        """Authenticated JIRA client, created on first use."""
        with self._jira_lock:
            if self._jira is None:
                self._jira = JIRA(server=self.server, basic_auth=self.auth, timeout=self.timeout)
            return self._jira

    def lookup_issue_type_id(self, project_key: str, issue_type_name: str) -> str:
        """
        Find the id of an issue type in a project.

        Args:
            project_key: JIRA project key
            issue_type_name: Issue type name, e.g. "Bug"

        Returns:
            Issue type id, or "" if the project has no such type

        Raises:
            requests.RequestException: on transport or HTTP errors
        """
        response = requests.get(
            f"{self.base_url}/issue/createmeta/{project_key}/issuetypes",
            auth=self.auth,
            headers={'Accept': 'application/json'},
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        issue_types = data.get('issueTypes') or data.get('values') or []
        for issue_type in issue_types:
            if issue_type.get('name') == issue_type_name:
                return str(issue_type.get('id', ''))
        return ""

    def create_issue(self, project_key: str, issue_type_id: str, summary: str,
                     description: str, assignee: str = "") -> Tuple[str, str]:
        """
        Create a JIRA issue.

        Returns:
            Tuple of (issue key, browse link)

        Raises:
            TicketSubmissionError: if JIRA rejects the issue or cannot be reached
        """
        fields: Dict[str, Any] = {
            'project': {'key': project_key},
            'issuetype': {'id': issue_type_id},
            'summary': summary,
            'description': description,
        }
        if assignee:
            fields['assignee'] = {'accountId': assignee}

        try:
            issue = self.jira.create_issue(fields=fields)
        except JIRAError as e:
            response_text = (e.text or "")[:MAX_ERROR_BODY]
            raise TicketSubmissionError(
                f"failed to create Jira ticket: status={e.status_code}, error={e.text}",
                status_code=e.status_code or 0,
                response_text=response_text,
            ) from e
        except requests.RequestException as e:
            raise TicketSubmissionError(f"failed to create Jira ticket: {e}") from e

        self.logger.success(f"Successfully created JIRA issue: {issue.key}")
        return issue.key, self.link_for(issue.key)

    def add_comment(self, issue_key: str, body: str):
        """Add a comment to an issue."""
        self.jira.add_comment(issue_key, body)

    def link_for(self, issue_key: str) -> str:
        return f"{self.browse_base}/{issue_key}"
