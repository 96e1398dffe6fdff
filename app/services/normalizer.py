"""Normalization of upstream payloads into the proxy's stable schema.

Upstream records use several names for the same field depending on the
endpoint and API version. Each output field is resolved through an ordered
fallback chain; the first value accepted by the chain's presence predicate
wins. Normalized records always carry every key, absent values being None.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

SOURCE_LABEL = "Hub'Eau"

Accessor = Callable[[Mapping[str, Any]], Any]
Predicate = Callable[[Any], bool]


def is_present(value: Any) -> bool:
    """Presence check that keeps falsy measurements such as ``0`` or ``False``."""
    return value is not None


def is_non_empty(value: Any) -> bool:
    """Presence check that also rejects empty strings and other falsy values."""
    return bool(value)


def field(name: str) -> Accessor:
    """Accessor reading ``name`` from a record."""
    return lambda record: record.get(name)


def constant(value: Any) -> Accessor:
    """Accessor returning ``value`` regardless of the record."""
    return lambda record: value


def first_of(
    record: Mapping[str, Any],
    accessors: Sequence[Accessor],
    *,
    present: Predicate = is_present,
    default: Any = None,
) -> Any:
    """Evaluate ``accessors`` in order and return the first present value.

    Args:
        record: Raw upstream record.
        accessors: Ordered accessor chain.
        present: Predicate deciding whether a value counts as present.
        default: Value returned when no accessor yields a present value.

    Examples:
        >>> first_of({"a": 0, "b": 2}, [field("a"), field("b")])
        0
        >>> first_of({"a": "", "b": "x"}, [field("a"), field("b")], present=is_non_empty)
        'x'
    """
    for accessor in accessors:
        value = accessor(record)
        if present(value):
            return value
    return default


def _as_text(value: Any) -> str | None:
    # Codes and labels are sometimes reported as numbers.
    if value is None or isinstance(value, str):
        return value
    return str(value)


def extract_records(payload: Any) -> list[Mapping[str, Any]]:
    """Unwrap the record list from an upstream payload.

    ``{"data": [...]}`` envelopes are unwrapped, bare lists are used as-is,
    anything else yields no records. Non-object items are skipped.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, Mapping)]


COMMUNE_NOM: tuple[Accessor, ...] = (
    field("nom"),
    field("libelle_commune"),
    field("commune"),
    constant("Commune"),
)
COMMUNE_CODE_INSEE: tuple[Accessor, ...] = (
    field("code_insee"),
    field("insee"),
    field("code_commune"),
)

RESULT_PARAMETRE_ID: tuple[Accessor, ...] = (
    field("code_parametre"),
    field("parametre"),
    field("id_parametre"),
)
RESULT_PARAMETRE_LIBELLE: tuple[Accessor, ...] = (
    field("libelle_parametre"),
    field("parametre_libelle"),
)
RESULT_VALEUR: tuple[Accessor, ...] = (
    field("resultat"),
    field("valeur"),
    field("value"),
)
RESULT_UNITE: tuple[Accessor, ...] = (
    field("unite"),
    field("unite_resultat"),
    field("unit"),
)
RESULT_DATE_PRELEVEMENT: tuple[Accessor, ...] = (
    field("date_prelevement"),
    field("prelevement_date"),
    field("date"),
)


def normalize_commune(record: Mapping[str, Any], postal: str) -> dict[str, str]:
    return {
        "nom": _as_text(first_of(record, COMMUNE_NOM, present=is_non_empty)),
        "code_insee": _as_text(
            first_of(record, COMMUNE_CODE_INSEE, present=is_non_empty, default="")
        ),
        "code_postal": _as_text(
            first_of(record, (field("code_postal"), constant(postal)), present=is_non_empty)
        ),
    }


def normalize_result(record: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "parametre_id": _as_text(first_of(record, RESULT_PARAMETRE_ID)),
        "parametre_libelle": _as_text(first_of(record, RESULT_PARAMETRE_LIBELLE)),
        "valeur": first_of(record, RESULT_VALEUR),
        "unite": _as_text(first_of(record, RESULT_UNITE)),
        "date_prelevement": _as_text(first_of(record, RESULT_DATE_PRELEVEMENT)),
        "source": SOURCE_LABEL,
    }


def normalize_communes(payload: Any, postal: str) -> list[dict[str, str]]:
    """Normalize a commune lookup payload.

    Args:
        payload: Decoded upstream body (envelope or bare list).
        postal: Postal code of the request, used when a record lacks one.

    Returns:
        List of ``{nom, code_insee, code_postal}`` records.
    """
    return [normalize_commune(record, postal) for record in extract_records(payload)]


def normalize_resultats(payload: Any) -> list[dict[str, Any]]:
    """Normalize an analysis results payload.

    Args:
        payload: Decoded upstream body (envelope or bare list).

    Returns:
        List of result records with a fixed set of keys.
    """
    return [normalize_result(record) for record in extract_records(payload)]
