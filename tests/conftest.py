import json
from typing import Any, List, Optional

import httpx
import pytest
from openai import AsyncOpenAI

from carbwise.pipeline.transport import TransportClient


def completion(content: str, citations: Optional[List[str]] = None) -> httpx.Response:
    body = {
        "id": "cmpl-test",
        "object": "chat.completion",
        "model": "sonar-pro",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }
    if citations is not None:
        body["citations"] = citations
    return httpx.Response(200, json=body)


def status(code: int) -> httpx.Response:
    return httpx.Response(code, json={"error": {"message": f"status {code}"}})


class UpstreamStub:
    """
    httpx handler replaying canned responses and recording every request.

    Each entry is an httpx.Response or an exception class to raise
    (httpx.ConnectError, httpx.ReadTimeout...). The last entry repeats.
    """

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, type) and issubclass(response, Exception):
            raise response("simulated network failure", request=request)
        return response

    @property
    def bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


class SleepRecorder:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_client(stub: UpstreamStub, api_key: str = "test-key") -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=api_key,
        base_url="https://api.perplexity.test",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(stub)),
    )


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def make_transport(sleeper):
    def _make(stub: UpstreamStub, **kwargs) -> TransportClient:
        return TransportClient(client=make_client(stub), sleep=sleeper, **kwargs)

    return _make
