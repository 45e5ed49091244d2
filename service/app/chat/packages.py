"""Package code extraction, lookup and formatting.

Customers ask about packages in three ways, tried in this order:

  1. an explicit code: "tell me about ONG-2K-P1"
  2. an ordinal: "package 5", "pkg #2", "P3"
  3. a loose code: "ONG 3K", "hyb-10k p2"

A reference that doesn't resolve to a stored package is a miss, never an
error; the router then carries on with FAQ matching.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from app.knowledge.models import Package
from app.knowledge.store import KnowledgeBase

logger = logging.getLogger(__name__)

PACKAGE_PREFIX = "🌞 "

_METRO_MANILA_NOTE = (
    "_Note: Prices are for Metro Manila installation only. Additional transport "
    "costs apply for areas outside Metro Manila._"
)

_CATALOGUE_REQUESTS = frozenset({"packages", "solar packages"})


@dataclass(frozen=True, slots=True)
class PackageCode:
    code: str


@dataclass(frozen=True, slots=True)
class PackageOrdinal:
    number: str


@dataclass(frozen=True, slots=True)
class GenericCode:
    prefix: str  # "ONG" or "HYB"
    suffix: str  # e.g. "3K", "10K-P2"


PackageReference = PackageCode | PackageOrdinal | GenericCode


def _squash(text: str) -> str:
    return re.sub(r"\s+", "", text).upper()


# (pattern, builder); first match wins.
_EXTRACTORS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], PackageReference]]] = [
    (
        re.compile(
            r"(?:tell me about|info about|details about|about)\s+"
            r"([A-Z]+-\d+K\d*-P\d+|[A-Z]+-\d+PK)",
            re.I,
        ),
        lambda m: PackageCode(_squash(m.group(1))),
    ),
    (
        # The lookbehind keeps the "-P1" tail of a full code, and words ending in
        # "p" such as "top 1", from reading as an ordinal.
        re.compile(r"(?<![-\w])(?:package|pkg|p)\s*#?\s*(\d+)\b", re.I),
        lambda m: PackageOrdinal(m.group(1)),
    ),
    (
        re.compile(r"\b(ONG|HYB)[-\s]*([0-9]+K?[0-9]*[-\s]*P?[0-9]*)\b", re.I),
        lambda m: GenericCode(m.group(1).upper(), _squash(m.group(2))),
    ),
]


def extract_package_reference(message: str) -> PackageReference | None:
    for pattern, build in _EXTRACTORS:
        match = pattern.search(message)
        if match:
            return build(match)
    return None


async def resolve_package(
    reference: PackageReference, knowledge_base: KnowledgeBase
) -> Package | None:
    """Look up the stored package a reference points at."""
    if isinstance(reference, PackageCode):
        return await knowledge_base.find_package_by_code(reference.code)

    if isinstance(reference, PackageOrdinal):
        return await knowledge_base.find_package_by_code_suffix(reference.number)

    prefix, suffix = reference.prefix, reference.suffix
    for candidate in (f"{prefix}-{suffix}", f"{prefix}-{suffix}-P", f"{prefix}{suffix}"):
        package = await knowledge_base.find_package_by_pattern(f"^{re.escape(candidate)}")
        if package is not None:
            return package

    fuzzy_suffix = ".*".join(re.escape(part) for part in re.split(r"\W", suffix))
    return await knowledge_base.find_package_by_pattern(f"{prefix}.*{fuzzy_suffix}")


async def find_package(message: str, knowledge_base: KnowledgeBase) -> Package | None:
    """Extract and resolve a package mentioned in ``message``, if any."""
    reference = extract_package_reference(message)
    if reference is None:
        return None

    package = await resolve_package(reference, knowledge_base)
    if package is None:
        logger.info("Package reference %r did not match any stored package", reference)
    return package


def _peso(amount: int) -> str:
    return f"₱{amount:,}"


def format_package(package: Package) -> str:
    """Markdown description of one package with all three price points."""
    return (
        f"**{package.name} ({package.wattage:,} Watts)**\n"
        f"- {package.suitable_for}\n"
        f"- **Financing (VAT-Inc):** {_peso(package.financing_price)}.00\n"
        f"- **SRP (VAT-Ex):** {_peso(package.srp_price)}.00\n"
        f"- **Cash (VAT-Ex):** {_peso(package.cash_price)}.00\n"
        f"\n"
        f"{package.description}\n"
        f"\n"
        f"{_METRO_MANILA_NOTE}"
    )


def is_catalogue_request(message: str) -> bool:
    return message.strip().lower() in _CATALOGUE_REQUESTS


def _catalogue_section(title: str, packages: Sequence[Package]) -> str:
    lines = [title, ""]
    for index, package in enumerate(packages, start=1):
        lines.append(f"{index}. **{package.code}** ({package.wattage:,}W)")
        lines.append(f"   - 🏠 {package.suitable_for}")
        lines.append(f"   - 💵 Cash: {_peso(package.cash_price)}")
        lines.append("")
    return "\n".join(lines) + "\n"


def format_package_catalogue(packages: Sequence[Package]) -> str:
    """All packages grouped by OnGrid / small-battery / large-battery hybrid."""
    if not packages:
        return (
            "No package information available at the moment. "
            "Please contact us for more information."
        )

    ordered = sorted(packages, key=lambda p: (p.type, p.wattage))
    ongrid = [p for p in ordered if p.type == "ongrid"]
    hybrid_small = [
        p for p in ordered
        if p.type == "hybrid-small" or (p.type == "hybrid" and "5.12kWh" in p.description)
    ]
    hybrid_large = [
        p for p in ordered
        if p.type == "hybrid-large" or (p.type == "hybrid" and "10.24kWh" in p.description)
    ]

    text = "💰 **Our Solar Package Pricing** 💰\n\n"
    if ongrid:
        text += _catalogue_section("🔌 **OnGrid Systems (Grid-Tied, No Battery):**", ongrid)
    if hybrid_small:
        text += _catalogue_section("🔋 **Hybrid Systems with 5.12kWh Battery:**", hybrid_small)
    if hybrid_large:
        text += _catalogue_section("🔋🔋 **Hybrid Systems with 10.24kWh Battery:**", hybrid_large)
    text += (
        "📍 _Prices above are for Metro Manila installation. For more details on any "
        "package or to get a personalized quote, ask about a specific package code or "
        "contact us at +63960-471-6968._"
    )
    return text
