"""Reasoning oracle interface."""

from abc import ABC, abstractmethod

from impactscope.oracle.models import ImpactVerdict, OracleRequest


class ReasoningOracle(ABC):
    """Turns one change plus caller context into an impact verdict."""

    @abstractmethod
    async def analyze(self, request: OracleRequest) -> ImpactVerdict:
        """
        Render a verdict for one change.

        Args:
            request: Diff text, caller snippets and member name

        Returns:
            ImpactVerdict

        Raises:
            OracleInvocationFailure: On transport errors or malformed responses
        """
        ...
