"""Shared test fixtures for the chat service.

Everything runs offline: the completion provider is an AsyncMock and the
knowledge base is either a small in-memory sample or the bundled seed.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config import Settings
from app.knowledge.models import FAQ, Package
from app.knowledge.store import DEFAULT_SEED_PATH, InMemoryKnowledgeBase, load_knowledge_base
from app.llm.completion import CompletionProvider


@pytest.fixture
def settings() -> Settings:
    """Minimal settings for unit tests; no real provider or GCP calls."""
    return Settings(
        llm_provider="groq",
        groq_api_key="test-key",
        openrouter_api_key="test-key",
        gcp_project="test-project",
        gcp_region="us-east1",
        chat_log_table="",
    )


@pytest.fixture
def sample_faqs() -> list[FAQ]:
    return [
        FAQ(
            id="installment-plans",
            question="Do you offer installment plans?",
            answer="**Yes!** We offer flexible installment plans through our partner banks.",
            keywords=("installment", "payment", "plan", "financing"),
        ),
        FAQ(
            id="night-operation",
            question="Will solar panels work at night?",
            answer="On-grid systems do not work at night unless paired with batteries.",
            keywords=("night", "dark", "evening"),
        ),
        FAQ(
            id="savings",
            question="How much money will I save with Solar?",
            answer="Typically, customers save 30-70% on their electricity bills. [Source: FAQ]",
            keywords=("save", "savings", "money", "bill"),
        ),
        FAQ(
            id="system-difference",
            question="What's the difference between On-Grid and Hybrid System?",
            answer="On-Grid systems use the utility at night, Hybrid systems use a battery.",
            keywords=("difference", "on-grid", "hybrid", "system", "compare", "battery"),
        ),
    ]


@pytest.fixture
def sample_packages() -> list[Package]:
    return [
        Package(
            code="ONG-2K-P1",
            name="OnGrid 2kW Package 1",
            description="Entry-level OnGrid system with 4 x 580W panels.",
            type="ongrid",
            wattage=2320,
            suitable_for="Monthly bill around ₱2,500",
            financing_price=131000,
            srp_price=117000,
            cash_price=104800,
        ),
        Package(
            code="ONG-6K-P4",
            name="OnGrid 6kW Package 4",
            description="OnGrid system with 10 x 580W panels.",
            type="ongrid",
            wattage=5800,
            suitable_for="Monthly bill around ₱6,000",
            financing_price=286000,
            srp_price=255000,
            cash_price=228800,
        ),
        Package(
            code="HYB-3K-P1",
            name="Hybrid 3kW Package 1",
            description="Hybrid system with 5.12kWh battery.",
            type="hybrid-small",
            wattage=3480,
            suitable_for="Monthly bill around ₱3,000",
            financing_price=340000,
            srp_price=303000,
            cash_price=272000,
        ),
    ]


@pytest.fixture
def knowledge_base(sample_faqs: list[FAQ], sample_packages: list[Package]) -> InMemoryKnowledgeBase:
    return InMemoryKnowledgeBase(sample_faqs, sample_packages)


@pytest.fixture(scope="session")
def seed_knowledge_base() -> InMemoryKnowledgeBase:
    return load_knowledge_base(DEFAULT_SEED_PATH)


@pytest.fixture(scope="session")
def seed_faqs(seed_knowledge_base: InMemoryKnowledgeBase) -> list[FAQ]:
    return list(asyncio.run(seed_knowledge_base.list_faqs()))


@pytest.fixture
def completion() -> MagicMock:
    """Completion provider double; set ``completion.complete.side_effect`` per test."""
    mock = MagicMock(spec=CompletionProvider)
    mock.complete = AsyncMock(return_value="Solar panels are a great investment for your home.")
    mock.model_name = "groq/test-model"
    return mock
