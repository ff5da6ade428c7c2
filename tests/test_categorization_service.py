# tests/test_categorization_service.py
import asyncio
import random

from helpdesk.core import LLMException
from helpdesk.config import Settings
from helpdesk.infrastructure.llm import ILLMClient, MockLLMClient, build_llm_client
from helpdesk.tickets.application import CategorizationService
from helpdesk.tickets.domain import KeywordCategorizer


class FailingLLMClient(ILLMClient):
    def __init__(self):
        self.calls = 0

    async def chat_completion(self, messages, temperature=0.3, max_tokens=200, operation="chat_completion"):
        self.calls += 1
        raise LLMException("connection reset")


def _service(llm_client=None):
    return CategorizationService(KeywordCategorizer(rng=random.Random(3)), llm_client)


def test_local_heuristic_without_client():
    result = asyncio.run(_service().categorize("Refund please", "Charged twice for my subscription."))
    assert result.category == "billing"
    assert result.source == "heuristic"


def test_remote_reply_is_used():
    result = asyncio.run(_service(MockLLMClient()).categorize("Refund please", "Charged twice."))
    assert (result.category, result.priority, result.confidence) == ("technical", "medium", 0.75)
    assert result.source == "llm"


def test_remote_failure_falls_back_once():
    client = FailingLLMClient()
    result = asyncio.run(_service(client).categorize("Server crash", "urgent, nobody can log in"))

    assert client.calls == 1
    assert result.category == "bug-report"
    assert result.priority == "urgent"
    assert result.source == "heuristic"


def test_malformed_remote_reply_falls_back():
    client = MockLLMClient(content="Sure! It's probably billing.")
    result = asyncio.run(_service(client).categorize("Refund please", "Charged twice."))
    assert result.category == "billing"
    assert result.source == "heuristic"


def test_client_is_built_only_when_enabled():
    assert build_llm_client(Settings(openai_api_key="", mock_llm=False)) is None
    assert isinstance(build_llm_client(Settings(openai_api_key="", mock_llm=True)), MockLLMClient)
