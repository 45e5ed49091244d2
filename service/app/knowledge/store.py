"""Read-only knowledge base access for the chat pipeline.

The chat router only ever reads FAQs and packages. The interface is
async so a database-backed store can slot in without touching callers;
the bundled implementation serves an in-memory snapshot loaded from a
JSON seed file.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from app.config import Settings
from app.errors import KnowledgeBaseError
from app.knowledge.models import FAQ, Package

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).with_name("data") / "seed.json"


class KnowledgeBase(ABC):
    """Interface that every knowledge base backend must implement."""

    @abstractmethod
    async def list_faqs(self) -> Sequence[FAQ]:
        """All FAQs, in stable storage order."""

    @abstractmethod
    async def list_packages(self) -> Sequence[Package]:
        """All packages, in stable storage order."""

    async def find_package_by_code(self, code: str) -> Package | None:
        for package in await self.list_packages():
            if package.code == code:
                return package
        return None

    async def find_package_by_pattern(self, pattern: str) -> Package | None:
        """First package whose code matches ``pattern`` (case-insensitive search)."""
        try:
            compiled = re.compile(pattern, re.IGNORECASE)
        except re.error:
            logger.warning("Ignoring invalid package code pattern %r", pattern)
            return None

        for package in await self.list_packages():
            if compiled.search(package.code):
                return package
        return None

    async def find_package_by_code_suffix(self, ordinal: str) -> Package | None:
        """Resolve a package ordinal like ``5`` to a code ending in ``-P5``.

        Falls back to ``P5`` appearing anywhere in the code.
        """
        number = re.escape(ordinal)
        package = await self.find_package_by_pattern(rf"-P{number}$")
        if package is None:
            package = await self.find_package_by_pattern(rf"P{number}")
        return package


class InMemoryKnowledgeBase(KnowledgeBase):
    """Immutable snapshot of FAQs and packages."""

    def __init__(self, faqs: Sequence[FAQ], packages: Sequence[Package]) -> None:
        _check_unique("FAQ id", [f.id for f in faqs])
        _check_unique("package code", [p.code for p in packages])
        self._faqs = tuple(faqs)
        self._packages = tuple(packages)

    async def list_faqs(self) -> Sequence[FAQ]:
        return self._faqs

    async def list_packages(self) -> Sequence[Package]:
        return self._packages


def _check_unique(label: str, values: list[str]) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise KnowledgeBaseError(f"Duplicate {label}: {value!r}")
        seen.add(value)


def load_knowledge_base(path: str | Path) -> InMemoryKnowledgeBase:
    """Load and validate a JSON seed file with ``faqs`` and ``packages`` lists."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise KnowledgeBaseError(f"Cannot read knowledge base {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise KnowledgeBaseError(f"Knowledge base {path} must be a JSON object")

    try:
        faqs = [FAQ.model_validate(item) for item in raw.get("faqs", [])]
        packages = [Package.model_validate(item) for item in raw.get("packages", [])]
    except ValidationError as exc:
        raise KnowledgeBaseError(f"Invalid knowledge base {path}: {exc}") from exc

    logger.info(
        "Loaded knowledge base from %s (faqs=%d, packages=%d)",
        path,
        len(faqs),
        len(packages),
    )
    return InMemoryKnowledgeBase(faqs, packages)


def create_knowledge_base(settings: Settings) -> KnowledgeBase:
    """Factory: the configured seed file, or the bundled one."""
    return load_knowledge_base(settings.knowledge_base_path or DEFAULT_SEED_PATH)
