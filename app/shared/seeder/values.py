"""Synthetic value generator.

Wraps a ``random.Random`` for numeric/categorical draws and a ``Faker``
instance for realistic text (names, addresses, sentences). Passing a seed
makes every draw reproducible; without one, output differs on each run.
"""

from __future__ import annotations

import hashlib
import math
import random
import string as _string
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any, TypeVar

from faker import Faker

from app.shared.seeder.errors import InvalidConstraint

T = TypeVar("T")

ALPHABETS = {
    "alnum": _string.ascii_lowercase + _string.digits,
    "alpha": _string.ascii_lowercase,
    "numeric": _string.digits,
    "hex": "0123456789abcdef",
}


def _derive_seed(seed: int, label: str) -> int:
    digest = hashlib.sha256(f"{seed}:{label}".encode()).digest()
    return int.from_bytes(digest[:8], "big")


class ValueGenerator:
    """Produces pseudo-random realistic values under explicit constraints."""

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "en_US",
        now: datetime | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            seed: Random seed; None draws from OS entropy.
            locale: Faker locale for realistic text.
            now: Reference instant for relative dates (defaults to current UTC time).
        """
        self.seed = seed
        self.locale = locale
        self.now = now or datetime.now(UTC)
        self.rng = random.Random(seed)
        self.faker = Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)

    def derive(self, label: str) -> ValueGenerator:
        """Child generator whose stream depends only on this seed and ``label``."""
        child_seed = None if self.seed is None else _derive_seed(self.seed, label)
        return ValueGenerator(child_seed, locale=self.locale, now=self.now)

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    @staticmethod
    def _check_bounds(minimum: float, maximum: float, what: str) -> None:
        if minimum > maximum:
            raise InvalidConstraint(
                f"{what}: minimum {minimum} is greater than maximum {maximum}",
                details={"minimum": minimum, "maximum": maximum},
            )

    def string(self, length: int, alphabet: str = "alnum", upper: bool = True) -> str:
        """Random string of ``length`` characters drawn from a named alphabet."""
        if length < 0:
            raise InvalidConstraint(f"string length must be >= 0, got {length}")
        chars = ALPHABETS.get(alphabet)
        if chars is None:
            raise InvalidConstraint(
                f"Unknown alphabet '{alphabet}'", details={"available": sorted(ALPHABETS)}
            )
        value = "".join(self.rng.choice(chars) for _ in range(length))
        return value.upper() if upper else value

    def integer(self, minimum: int, maximum: int) -> int:
        """Uniform integer in ``[minimum, maximum]``."""
        self._check_bounds(minimum, maximum, "integer")
        return self.rng.randint(int(minimum), int(maximum))

    def decimal(self, minimum: float, maximum: float, precision: int = 2) -> Decimal:
        """Uniform decimal in ``[minimum, maximum]`` with ``precision`` fractional digits."""
        if precision < 0:
            raise InvalidConstraint(f"precision must be >= 0, got {precision}")
        self._check_bounds(minimum, maximum, "decimal")
        scale = 10**precision
        low = math.ceil(Decimal(str(minimum)) * scale)
        high = math.floor(Decimal(str(maximum)) * scale)
        if low > high:
            raise InvalidConstraint(
                f"No value with {precision} decimal places lies in [{minimum}, {maximum}]"
            )
        return Decimal(self.rng.randint(low, high)).scaleb(-precision)

    def number(self, minimum: float, maximum: float, precision: int = 2) -> float:
        """Float counterpart of :meth:`decimal`."""
        return float(self.decimal(minimum, maximum, precision))

    def boolean(self, probability: float = 0.5) -> bool:
        """True with the given probability."""
        if not 0.0 <= probability <= 1.0:
            raise InvalidConstraint(
                f"probability must be within [0, 1], got {probability}",
                details={"probability": probability},
            )
        return self.rng.random() < probability

    # ------------------------------------------------------------------
    # Enumerations
    # ------------------------------------------------------------------

    def choice(self, options: Sequence[T]) -> T:
        """Pick one element."""
        if not options:
            raise InvalidConstraint("Cannot choose from an empty option list")
        return self.rng.choice(list(options))

    def weighted(self, options: Sequence[T], weights: Sequence[float]) -> T:
        """Pick one element with relative weights."""
        if not options:
            raise InvalidConstraint("Cannot choose from an empty option list")
        if len(weights) != len(options) or any(w < 0 for w in weights) or sum(weights) <= 0:
            raise InvalidConstraint(
                "weights must be non-negative, non-zero in total and match the options"
            )
        return self.rng.choices(list(options), weights=list(weights), k=1)[0]

    def sample(self, options: Sequence[T], minimum: int, maximum: int) -> list[T]:
        """Distinct subset of ``minimum``..``maximum`` elements, in source order."""
        self._check_bounds(minimum, maximum, "sample")
        if minimum < 0 or maximum > len(options):
            raise InvalidConstraint(
                f"sample bounds [{minimum}, {maximum}] exceed {len(options)} options"
            )
        k = self.rng.randint(minimum, maximum)
        picked = sorted(self.rng.sample(range(len(options)), k))
        return [options[i] for i in picked]

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def date_between(self, start: datetime, end: datetime) -> datetime:
        """Uniform instant in ``[start, end]`` (second resolution)."""
        if start > end:
            raise InvalidConstraint(f"date range start {start} is after end {end}")
        span = int((end - start).total_seconds())
        return start + timedelta(seconds=self.rng.randint(0, span))

    def recent(self, days: int) -> datetime:
        """Instant within the last ``days`` days."""
        return self.date_between(self.now - timedelta(days=days), self.now)

    def future(self, days: int, start: datetime | None = None) -> datetime:
        """Instant within ``days`` days after ``start`` (default: now)."""
        origin = start or self.now
        return self.date_between(origin, origin + timedelta(days=days))

    # ------------------------------------------------------------------
    # Realistic text (Faker)
    # ------------------------------------------------------------------

    def first_name(self) -> str:
        return self.faker.first_name()

    def last_name(self) -> str:
        return self.faker.last_name()

    def full_name(self) -> str:
        return self.faker.name()

    def email(self, first: str, last: str, domain: str | None = None) -> str:
        local = f"{first}.{last}".lower().replace(" ", "").replace("'", "")
        return f"{local}@{domain or self.faker.free_email_domain()}"

    def phone(self) -> str:
        return self.faker.phone_number()

    def company(self) -> str:
        return self.faker.company()

    def word(self) -> str:
        return self.faker.word()

    def sentence(self) -> str:
        return self.faker.sentence()

    def paragraph(self) -> str:
        return self.faker.paragraph(nb_sentences=3)

    def color(self) -> str:
        return self.faker.color_name()

    def image_url(self) -> str:
        return self.faker.image_url()

    def semver(self) -> str:
        return f"{self.integer(0, 9)}.{self.integer(0, 20)}.{self.integer(0, 50)}"

    def address(self) -> dict[str, Any]:
        return {
            "street": self.faker.street_address(),
            "city": self.faker.city(),
            "state": self.faker.state(),
            "zipCode": self.faker.postcode(),
            "country": self.faker.country(),
        }
