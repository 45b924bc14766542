"""Duty eligibility: qualifications, rank and section filters, rank range.

Pure functions of a person, a duty type, and the rank vocabulary.
No logging, no lookups, no hidden state: the services layer reports
configuration diagnostics separately via :func:`duty_type_diagnostics`.

Filter semantics:
- absent filter: everyone passes;
- ``include``: pass iff the value is in the set (empty set: nobody passes);
- ``exclude``: pass iff the value is not in the set (empty set: everyone passes).

A duty type's ``required_qualifications`` must all be held by the person;
an empty requirement set lets anyone through.

The section filter compares the person's own unit id only; members of
descendant units are not matched by an ancestor's id.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence

from dutyctl.domain.diagnostics import ConfigurationError, ConfigurationErrorKind
from dutyctl.domain.models import DutyType, MembershipFilter, Personnel
from dutyctl.domain.ranks import DEFAULT_RANKS, rank_in_range, rank_index
from dutyctl.domain.types import FilterMode


def matches_filter(flt: MembershipFilter | None, value: str) -> bool:
    """Whether *value* passes *flt*."""
    if flt is None:
        return True
    member = value in flt.values
    if flt.mode is FilterMode.INCLUDE:
        return member
    return not member


def meets_requirements(person: Personnel, duty_type: DutyType) -> bool:
    return duty_type.required_qualifications <= person.qualifications


def passes_rank_filter(person: Personnel, duty_type: DutyType) -> bool:
    return matches_filter(duty_type.rank_filter, person.rank)


def passes_section_filter(person: Personnel, duty_type: DutyType) -> bool:
    return matches_filter(duty_type.section_filter, person.unit_id)


def passes_rank_range(
    person: Personnel,
    duty_type: DutyType,
    vocabulary: Sequence[str] = DEFAULT_RANKS,
) -> bool:
    bounds = duty_type.rank_range
    if bounds is None:
        return True
    return rank_in_range(person.rank, bounds.min, bounds.max, vocabulary)


def is_eligible(
    person: Personnel,
    duty_type: DutyType,
    vocabulary: Sequence[str] = DEFAULT_RANKS,
) -> bool:
    """Whether *person* may stand *duty_type*. Every configured check must pass."""
    return (
        meets_requirements(person, duty_type)
        and passes_rank_filter(person, duty_type)
        and passes_section_filter(person, duty_type)
        and passes_rank_range(person, duty_type, vocabulary)
    )


def eligible_personnel(
    people: Iterable[Personnel],
    duty_type: DutyType,
    *,
    unit_ids: Collection[str] | None = None,
    vocabulary: Sequence[str] = DEFAULT_RANKS,
) -> list[Personnel]:
    """Eligible people ordered for assignment: lowest duty score first.

    *unit_ids* restricts candidates to those units (normally the duty
    type's unit subtree). Ties on score are broken by personnel id.
    Inactive duty types have no eligible personnel.
    """
    if not duty_type.is_active:
        return []
    candidates = [
        p
        for p in people
        if (unit_ids is None or p.unit_id in unit_ids) and is_eligible(p, duty_type, vocabulary)
    ]
    return sorted(candidates, key=lambda p: (p.duty_score, p.id))


def duty_type_diagnostics(
    duty_type: DutyType,
    vocabulary: Sequence[str] = DEFAULT_RANKS,
) -> list[ConfigurationError]:
    """Report filter settings that are legal but almost certainly mistakes."""
    issues: list[ConfigurationError] = []
    filters = (
        ("rank_filter", duty_type.rank_filter),
        ("section_filter", duty_type.section_filter),
    )
    for name, flt in filters:
        if flt is None or flt.values:
            continue
        outcome = "nobody is eligible" if flt.mode is FilterMode.INCLUDE else "nobody is excluded"
        issues.append(
            ConfigurationError(
                kind=ConfigurationErrorKind.EMPTY_FILTER_VALUES,
                duty_type_id=duty_type.id,
                setting=name,
                message=f"{name} in {flt.mode} mode has no values; {outcome}",
            )
        )

    bounds = duty_type.rank_range
    if bounds is not None:
        low = rank_index(bounds.min, vocabulary) if bounds.min is not None else None
        high = rank_index(bounds.max, vocabulary) if bounds.max is not None else None
        if (bounds.min is not None and low is None) or (bounds.max is not None and high is None):
            issues.append(
                ConfigurationError(
                    kind=ConfigurationErrorKind.INVALID_RANK_RANGE,
                    duty_type_id=duty_type.id,
                    setting="rank_range",
                    message=f"rank_range bound not in vocabulary: {bounds.min}..{bounds.max}",
                )
            )
        elif low is not None and high is not None and low > high:
            issues.append(
                ConfigurationError(
                    kind=ConfigurationErrorKind.INVALID_RANK_RANGE,
                    duty_type_id=duty_type.id,
                    setting="rank_range",
                    message=f"rank_range minimum {bounds.min} is above maximum {bounds.max}",
                )
            )
    return issues
