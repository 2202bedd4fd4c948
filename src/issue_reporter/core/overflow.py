"""
Overflow handling: content that could not fit in the ticket description.

Every section truncated while building the description leaves its full
content here. The composed overflow document is posted as a follow-up
comment on the ticket.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .budget import MAX_DESCRIPTION_LENGTH

OVERFLOW_INTRO = "Additional details that couldn't fit in the description:\n\n"
FULL_DESCRIPTION_HEADING = "Full Original Description"

# Hard cut of the whole description leaves room for the notice
FINAL_GUARD_MARGIN = 100
DESCRIPTION_TRUNCATED_NOTICE = (
    "\n\n[Content truncated due to Jira character limit. See comments for complete information.]"
)
COMMENT_TRUNCATED_NOTICE = "\n\n[Comment truncated due to Jira character limit]"


@dataclass(frozen=True)
class OverflowBlock:
    heading: str
    content: str
    code: bool = True

    def render(self) -> str:
        if self.code:
            return f"h3. {self.heading}\n{{code:json}}\n{self.content}\n{{code}}\n\n"
        return f"h3. {self.heading}\n{self.content}\n\n"


class OverflowDocument:
    """Ordered collection of full-content blocks for truncated sections."""

    def __init__(self):
        self.blocks: List[OverflowBlock] = []

    def add(self, heading: str, content: str, code: bool = True):
        self.blocks.append(OverflowBlock(heading, content, code))

    def block(self, heading: str) -> Optional[OverflowBlock]:
        for block in self.blocks:
            if block.heading == heading:
                return block
        return None

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    def __len__(self) -> int:
        return len(self.blocks)

    def compose(self, ceiling: int = MAX_DESCRIPTION_LENGTH) -> str:
        """
        Concatenate the blocks into the comment body.

        A body over the ceiling is cut and ends with a notice. There is no
        overflow of the overflow: whatever is cut here is lost.

        Args:
            ceiling: Maximum comment length

        Returns:
            Comment body, or "" when nothing overflowed
        """
        if self.is_empty:
            return ""

        body = OVERFLOW_INTRO + "".join(block.render() for block in self.blocks)
        if len(body) > ceiling:
            body = (body[:max(0, ceiling - FINAL_GUARD_MARGIN)] + COMMENT_TRUNCATED_NOTICE)[:ceiling]
        return body


def apply_final_guard(description: str, overflow: OverflowDocument,
                      ceiling: int = MAX_DESCRIPTION_LENGTH) -> Tuple[str, bool]:
    """
    Final check to ensure the description is under the ceiling.

    Section budgets rely on estimated markup overhead, so the assembled
    description can still run over. When it does, the complete description
    moves into the overflow document and the description is hard-cut.

    Args:
        description: Assembled description
        overflow: Overflow document for this report
        ceiling: Maximum description length

    Returns:
        Tuple of (description, guard_fired)
    """
    if len(description) <= ceiling:
        return description, False

    overflow.add(FULL_DESCRIPTION_HEADING, description, code=False)
    cut = max(0, ceiling - FINAL_GUARD_MARGIN)
    return (description[:cut] + DESCRIPTION_TRUNCATED_NOTICE)[:ceiling], True
