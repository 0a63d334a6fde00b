"""Pytest configuration and fixtures for impactscope tests."""

import asyncio

import pytest

from impactscope.core.exceptions import OracleInvocationFailure
from impactscope.oracle.base import ReasoningOracle
from impactscope.oracle.models import ImpactedModule, ImpactType, ImpactVerdict, OracleRequest
from impactscope.sources.store import RepositoryStore

SERVICE_FQCN = "com.example.DataService"
CONSUMER_FQCN = "com.example.client.Consumer"
REPORTER_FQCN = "com.example.app.Reporter"
BROKEN_FQCN = "com.example.client.Broken"

ORIGINAL_SERVICE = """package com.example;

public class DataService {
    private String name = "svc";

    public String generateData() {
        return "data";
    }

    public int otherMethod(String input) {
        return input.length();
    }
}
"""

MODIFIED_SERVICE = """package com.example;

public class DataService {
    private String name = "svc";

    public Integer generateData() {
        return 42;
    }

    public long otherMethod(String input) {
        return input.length();
    }
}
"""

CONSUMER = """package com.example.client;

import com.example.DataService;

public class Consumer {
    public void consume(DataService service) {
        String value = service.generateData();
        System.out.println(value);
    }

    public void unrelated() {
        int x = 1;
    }
}
"""

REPORTER = """package com.example.app;

import com.example.DataService;

public class Reporter {
    private final DataService service = new DataService();

    public String report() {
        return "Report: " + service.generateData();
    }
}
"""

BROKEN = """package com.example.client;

public class Broken {
    public void run(DataService service) {
        service.generateData(
    }
"""


class FakeOracle(ReasoningOracle):
    """In-test oracle that records requests and tracks concurrency."""

    def __init__(
        self,
        fail_for: set[str] | None = None,
        delay: float = 0.0,
        risk_score: int = 5,
    ) -> None:
        self.fail_for = fail_for or set()
        self.delay = delay
        self.risk_score = risk_score
        self.requests: list[OracleRequest] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def analyze(self, request: OracleRequest) -> ImpactVerdict:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            member = request.target_member_name
            if member in self.fail_for:
                raise OracleInvocationFailure(member, "provider_error", "service unavailable")
            return ImpactVerdict(
                analysis_id=f"analysis-{member}",
                risk_score=self.risk_score,
                reasoning=f"Changing {member} affects its callers.",
                impacted_modules=[
                    ImpactedModule(
                        module_name=CONSUMER_FQCN,
                        impact_type=ImpactType.SYNTACTIC_BREAK,
                        description="Return type no longer assignable.",
                    )
                ],
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def store() -> RepositoryStore:
    """Store with a core repository and an app repository."""
    repo_store = RepositoryStore()
    repo_store.add_repository(
        "core",
        sources={SERVICE_FQCN: ORIGINAL_SERVICE, CONSUMER_FQCN: CONSUMER},
    )
    repo_store.add_repository("app", sources={REPORTER_FQCN: REPORTER})
    return repo_store


@pytest.fixture
def fake_oracle() -> FakeOracle:
    """Oracle that answers every request immediately."""
    return FakeOracle()


def write_java(root, rel_path: str, content: str):
    """Write a Java file below *root*, creating parent directories."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
