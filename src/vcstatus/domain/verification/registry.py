"""Registry of supported verification categories.

Each category is described by one ``CategorySpec``: the marker tag that
identifies its records, the text and tags written at issuance, its
expiration policy, and the presentation request sent to the verifier.
The registry order is the classification priority.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from vcstatus.domain.model import VerificationCategory, format_timestamp

from .errors import UnsupportedCategoryError
from .extract import extract_expiry_date, extract_screen_name
from .proof_requests import account_proof_request, age_proof_request

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

log = getLogger(__name__)

type ExpirationPolicy = Callable[[object, datetime], str | None]
type AttributeExtractor = Callable[[object], str | None]
type ProofRequestBuilder = Callable[[str, str, date], dict[str, object]]


def one_year_after(moment: datetime) -> datetime:
    """Return the same wall-clock moment one calendar year later (Feb 29 rolls to Mar 1)."""

    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, month=3, day=1)


def one_year_expiration(_proof: object, now: datetime) -> str | None:
    return format_timestamp(one_year_after(now))


def credential_expiration(proof: object, now: datetime) -> str | None:
    """Use the expiry revealed by the credential, falling back to one year."""

    extracted = extract_expiry_date(proof)
    if extracted is not None:
        return extracted
    log.warning("Could not extract expiry date from credential, using fallback of 1 year")
    return one_year_expiration(proof, now)


def _no_attribute(_proof: object) -> str | None:
    return None


def _age_request(connection_id: str, cred_def_id: str, today: date) -> dict[str, object]:
    return age_proof_request(connection_id, cred_def_id, today=today)


def _account_request(connection_id: str, cred_def_id: str, _today: date) -> dict[str, object]:
    return account_proof_request(connection_id, cred_def_id)


@dataclass(frozen=True, slots=True, kw_only=True)
class CategorySpec:
    category: VerificationCategory
    marker: str
    assertion: str
    types: tuple[str, ...]
    purposes: tuple[str, ...]
    expiration: ExpirationPolicy = one_year_expiration
    screen_name: AttributeExtractor = _no_attribute
    proof_request: ProofRequestBuilder | None = None

    def __post_init__(self) -> None:
        if self.marker not in self.types:
            raise ValueError(f"Marker {self.marker!r} must be one of the category types")


@dataclass(slots=True)
class CategoryRegistry:
    """Ordered collection of category specifications."""

    _specs: dict[VerificationCategory, CategorySpec] = field(
        default_factory=dict["VerificationCategory", "CategorySpec"]
    )

    @classmethod
    def of(cls, specs: Sequence[CategorySpec]) -> CategoryRegistry:
        registry = cls()
        for spec in specs:
            registry.register(spec)
        return registry

    def register(self, spec: CategorySpec) -> None:
        if spec.category in self._specs:
            raise ValueError(f"Category {spec.category} is already registered")
        self._specs[spec.category] = spec

    def get(self, category: VerificationCategory | str) -> CategorySpec:
        try:
            return self._specs[VerificationCategory(category)]
        except (KeyError, ValueError):
            raise UnsupportedCategoryError(category) from None

    @property
    def categories(self) -> tuple[VerificationCategory, ...]:
        return tuple(self._specs)

    def classify(self, tags: Sequence[str]) -> VerificationCategory | None:
        """Return the first category, in registry order, whose marker is in ``tags``."""

        for spec in self._specs.values():
            if spec.marker in tags:
                return spec.category
        return None

    def __iter__(self) -> Iterator[CategorySpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


AGE_VERIFICATION = CategorySpec(
    category=VerificationCategory.AGE,
    marker="AgeVerification",
    assertion="I assert that I am over 21 years of age",
    types=("VerifiableCredential", "AnonCred", "AgeVerification"),
    purposes=("ProofOfMajorityAge",),
    expiration=credential_expiration,
    proof_request=_age_request,
)

ACCOUNT_VERIFICATION = CategorySpec(
    category=VerificationCategory.ACCOUNT,
    marker="AccountVerification",
    assertion="I assert that this is my verified account",
    types=("VerifiableCredential", "AnonCred", "AccountVerification"),
    purposes=("AccountOwnership",),
    screen_name=extract_screen_name,
    proof_request=_account_request,
)

DEFAULT_REGISTRY = CategoryRegistry.of((AGE_VERIFICATION, ACCOUNT_VERIFICATION))
