"""Domain models for the stripemock core.

Records themselves are plain dicts of attributes, exactly as the real API
serialises them. The types here describe the closed value sets and the
shapes the handlers return around those records.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeAlias

Record: TypeAlias = dict[str, Any]


class Interval(Enum):
    """Billing intervals accepted for a plan."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


INTERVALS: tuple[str, ...] = tuple(i.value for i in Interval)

# Lowercase ISO codes; incoming values are compared case-insensitively.
SUPPORTED_CURRENCIES: tuple[str, ...] = (
    "usd", "aed", "afn", "all", "amd", "ang", "aoa", "ars", "aud", "awg",
    "azn", "bam", "bbd", "bdt", "bgn", "bif", "bmd", "bnd", "bob", "brl",
    "bsd", "bwp", "bzd", "cad", "cdf", "chf", "clp", "cny", "cop", "crc",
    "cve", "czk", "djf", "dkk", "dop", "dzd", "egp", "etb", "eur", "fjd",
    "fkp", "gbp", "gel", "gip", "gmd", "gnf", "gtq", "gyd", "hkd", "hnl",
    "hrk", "htg", "huf", "idr", "ils", "inr", "isk", "jmd", "jpy", "kes",
    "kgs", "khr", "kmf", "krw", "kyd", "kzt", "lak", "lbp", "lkr", "lrd",
    "lsl", "mad", "mdl", "mga", "mkd", "mmk", "mnt", "mop", "mro", "mur",
    "mvr", "mwk", "mxn", "myr", "mzn", "nad", "ngn", "nio", "nok", "npr",
    "nzd", "pab", "pen", "pgk", "php", "pkr", "pln", "pyg", "qar", "ron",
    "rsd", "rub", "rwf", "sar", "sbd", "scr", "sek", "sgd", "shp", "sll",
    "sos", "srd", "std", "szl", "thb", "tjs", "top", "try", "ttd", "twd",
    "tzs", "uah", "ugx", "uyu", "uzs", "vnd", "vuv", "wst", "xaf", "xcd",
    "xof", "xpf", "yer", "zar", "zmw",
)


@dataclass(frozen=True)
class ListResult:
    """A page of records as returned by the list handler.

    data holds detached snapshots, earliest-inserted first.
    """

    data: tuple[Record, ...]
    has_more: bool
    url: str
    object: str = "list"

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "object": self.object,
            "data": list(self.data),
            "has_more": self.has_more,
            "url": self.url,
        }


@dataclass(frozen=True)
class DeletedRecord:
    """Confirmation returned by the delete handler."""

    id: str
    object: str
    deleted: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "object": self.object, "deleted": self.deleted}


@dataclass(frozen=True)
class ResourceSchema:
    """Validation rules for one resource type.

    This is data, not logic: the generic Validator interprets it.

    Attributes:
        name: Singular resource type, e.g. "plan".
        plural: Collection name used in URLs, e.g. "plans".
        required: Fields that must be present and non-null on create,
            checked in this order.
        foreign_keys: Field name -> resource type the value must reference.
        integer_fields: Fields whose value must be a whole number.
        non_negative_fields: Fields whose numeric value must be >= 0.
        mapping_fields: Fields whose value must be a mapping.
        choices: Field name -> allowed values (a closed set).
        case_insensitive_choices: Fields in `choices` compared lowercased.
    """

    name: str
    plural: str
    required: tuple[str, ...] = ()
    foreign_keys: Mapping[str, str] = field(default_factory=dict)
    integer_fields: tuple[str, ...] = ()
    non_negative_fields: tuple[str, ...] = ()
    mapping_fields: tuple[str, ...] = ()
    choices: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    case_insensitive_choices: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate schema invariants and freeze the mapping fields."""
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if not self.plural or not self.plural.strip():
            raise ValueError("plural must be a non-empty string")
        unknown = self.case_insensitive_choices - set(self.choices)
        if unknown:
            raise ValueError(
                f"case_insensitive_choices names fields without choices: {sorted(unknown)}"
            )
        object.__setattr__(self, "foreign_keys", MappingProxyType(dict(self.foreign_keys)))
        object.__setattr__(
            self,
            "choices",
            MappingProxyType({k: tuple(v) for k, v in self.choices.items()}),
        )

    def __hash__(self) -> int:
        return hash((self.name, self.plural))


__all__ = [
    "DeletedRecord",
    "INTERVALS",
    "Interval",
    "ListResult",
    "Record",
    "ResourceSchema",
    "SUPPORTED_CURRENCIES",
]
