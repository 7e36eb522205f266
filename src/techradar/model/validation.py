"""
Config Validation
=================
Checks a ``RadarConfig`` against the data-model invariants.

Validation is strict and never repairs anything: every problem is collected
and reported through a single ``ConfigValidationError``.
"""
from __future__ import annotations

import logging
import math
from typing import List, Sequence

from techradar.model.errors import ConfigValidationError, ValidationProblem
from techradar.model.options import resolve_display_options
from techradar.model.radar import QUADRANT_COUNT, RadarConfig

logger = logging.getLogger(__name__)


def _check_permutation(
    orders: Sequence[int], expected: int, field: str, problems: List[ValidationProblem]
) -> None:
    if sorted(orders) != list(range(expected)):
        problems.append(ValidationProblem(
            field,
            f"display orders must be a permutation of 0..{expected - 1} (found: {list(orders)})",
            list(orders),
        ))


def collect_problems(config: RadarConfig) -> List[ValidationProblem]:
    """Return every invariant violation in ``config`` (empty when valid)."""
    problems: List[ValidationProblem] = []

    if len(config.quadrants) != QUADRANT_COUNT:
        problems.append(ValidationProblem(
            "quadrants",
            f"exactly {QUADRANT_COUNT} quadrants are required (found: {len(config.quadrants)})",
            len(config.quadrants),
        ))
    else:
        _check_permutation(
            [q.display_order for q in config.quadrants], QUADRANT_COUNT, "quadrants", problems
        )

    _check_permutation([r.display_order for r in config.rings], len(config.rings), "rings", problems)
    for index, ring in enumerate(config.rings):
        if not (math.isfinite(ring.width) and ring.width > 0):
            problems.append(ValidationProblem(
                f"rings[{index}].width", f"ring '{ring.name}' must have a positive, finite width", ring.width
            ))

    seen: set[str] = set()
    for index, entry in enumerate(config.entries):
        if not 0 <= entry.quadrant < len(config.quadrants):
            problems.append(ValidationProblem(
                f"entries[{index}].quadrantIndex",
                f"entry '{entry.label}' has invalid quadrant: {entry.quadrant} "
                f"(must be 0-{len(config.quadrants) - 1})",
                entry.quadrant,
            ))
        if not 0 <= entry.ring < len(config.rings):
            problems.append(ValidationProblem(
                f"entries[{index}].ringIndex",
                f"entry '{entry.label}' has invalid ring: {entry.ring} "
                f"(must be 0-{len(config.rings) - 1})",
                entry.ring,
            ))
        if entry.key in seen:
            problems.append(ValidationProblem(
                f"entries[{index}].id", f"duplicate entry id {entry.id!r}", entry.id
            ))
        seen.add(entry.key)

    try:
        resolve_display_options(config.display_options)
    except ConfigValidationError as e:
        problems.extend(e.problems)

    return problems


def validate_config(config: RadarConfig) -> RadarConfig:
    """
    Validate ``config`` and return it unchanged.

    Raises:
        ConfigValidationError: listing every problem found.
    """
    problems = collect_problems(config)
    if problems:
        logger.debug(f"Config '{config.title}' failed validation with {len(problems)} problem(s).")
        raise ConfigValidationError.from_problems(problems)
    return config
