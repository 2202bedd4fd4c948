"""
Character budget for the variable sections of a ticket description.
"""

from dataclasses import dataclass

# Jira's description limit is 32,767 characters; keep some buffer
MAX_DESCRIPTION_LENGTH = 32000

# Section names, in rendering order
NETWORK_CALLS = "networkCalls"
HEADERS = "headers"
RESPONSE = "response"
PAYLOAD = "payload"


@dataclass(frozen=True)
class Budget:
    ceiling: int
    essential_length: int
    remaining: int
    network_calls: int
    headers: int
    response: int
    payload: int

    def allocation(self, section: str) -> int:
        """Allocation for a section by name."""
        return {
            NETWORK_CALLS: self.network_calls,
            HEADERS: self.headers,
            RESPONSE: self.response,
            PAYLOAD: self.payload,
        }[section]

    @property
    def total_allocated(self) -> int:
        return self.network_calls + self.headers + self.response + self.payload


def allocate_budget(essential_length: int, ceiling: int = MAX_DESCRIPTION_LENGTH) -> Budget:
    """
    Split the space left after essential content across the variable sections.

    Network calls get 50%, headers and response 20% each, and the payload
    takes whatever is left (nominally 10%, plus any rounding remainder), so
    the four allocations always add up to exactly the remaining space.

    Args:
        essential_length: Length of content that is never truncated
        ceiling: Maximum description length

    Returns:
        Budget
    """
    remaining = max(0, ceiling - essential_length)

    network_calls = remaining // 2
    headers = remaining // 5
    response = remaining // 5
    payload = remaining - network_calls - headers - response

    return Budget(
        ceiling=ceiling,
        essential_length=essential_length,
        remaining=remaining,
        network_calls=network_calls,
        headers=headers,
        response=response,
        payload=payload,
    )
