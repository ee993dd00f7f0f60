"""Batch decoding over many index records.

One bad record never aborts a batch: every input yields an
``IndexLineResult`` holding either a descriptor or the error that rejected
it. Records are independent, so ``decode_records`` can shard them across a
thread pool without coordination.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled

from .decoder import IndexEntryDecoder
from .errors import DecodeError, DependencyErrors, RecordSyntaxError
from .models import PackageVersionDescriptor
from .options import DecodeOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexLineResult:
    """Outcome of decoding one record."""
    line: int
    descriptor: Optional[PackageVersionDescriptor] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchSummary:
    """Counts for a finished batch."""
    total: int = 0
    decoded: int = 0
    failed: int = 0
    errors_by_kind: Dict[str, int] = field(default_factory=dict)
    dependency_errors_by_kind: Dict[str, int] = field(default_factory=dict)


def _decode_one(decoder: IndexEntryDecoder, line: int, raw: Any) -> IndexLineResult:
    try:
        return IndexLineResult(line=line, descriptor=decoder.decode(raw))
    except DecodeError as e:
        logger.warning(
            "Line %d rejected: %s",
            line,
            e,
            extra=extra_context(
                event="decode_error",
                component="batch",
                action="decode",
                outcome=e.kind,
                line=line,
                record=e.record,
            ),
        )
        return IndexLineResult(line=line, error=e)


def _parse_line(line: int, text: str) -> Tuple[Optional[Any], Optional[IndexLineResult]]:
    try:
        return json.loads(text), None
    except ValueError as e:
        error = RecordSyntaxError(f"Invalid JSON: {e}", value=text[:80])
        logger.warning("Line %d is not valid JSON: %s", line, e)
        return None, IndexLineResult(line=line, error=error)


def decode_records(
    records: Iterable[Any],
    options: Optional[DecodeOptions] = None,
    max_workers: Optional[int] = None,
) -> List[IndexLineResult]:
    """Decode parsed records, optionally in parallel.

    Args:
        records: Raw record mappings.
        options: Decoder options.
        max_workers: Thread count; ``1`` decodes inline. Defaults to
            ``options.max_workers``.

    Returns:
        One result per record, in input order, numbered from 1.
    """
    options = options or DecodeOptions()
    decoder = IndexEntryDecoder(options)
    items = list(enumerate(records, start=1))
    workers = max_workers or options.max_workers

    with Timer() as t:
        if workers <= 1 or len(items) <= 1:
            results = [_decode_one(decoder, n, raw) for n, raw in items]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(lambda item: _decode_one(decoder, *item), items))

    if is_debug_enabled(logger):
        logger.debug(
            "Batch decoded",
            extra=extra_context(
                event="batch_complete",
                component="batch",
                action="decode_records",
                count=len(results),
                workers=workers,
                duration_ms=t.duration_ms(),
            ),
        )
    return results


def decode_lines(
    lines: Iterable[str],
    options: Optional[DecodeOptions] = None,
    max_workers: Optional[int] = None,
) -> List[IndexLineResult]:
    """Decode raw index lines (one JSON object per line).

    Blank lines are skipped but still counted for line numbering. Lines
    that are not valid JSON yield ``RecordSyntaxError`` results.
    """
    parsed: List[Tuple[int, Any]] = []
    failures: List[IndexLineResult] = []
    for number, text in enumerate(lines, start=1):
        if not text.strip():
            continue
        raw, failure = _parse_line(number, text)
        if failure is not None:
            failures.append(failure)
        else:
            parsed.append((number, raw))

    decoded = decode_records((raw for _, raw in parsed), options, max_workers)
    # decode_records numbers from 1; map back to physical line numbers
    renumbered = [
        IndexLineResult(line=number, descriptor=r.descriptor, error=r.error)
        for (number, _), r in zip(parsed, decoded)
    ]
    return sorted(renumbered + failures, key=lambda r: r.line)


def summarize(results: Iterable[IndexLineResult]) -> BatchSummary:
    """Count decoded and failed records, grouping failures by error kind.

    Aggregated dependency failures count once under ``dependency_errors`` in
    ``errors_by_kind``; each inner error is also counted by its own kind in
    ``dependency_errors_by_kind``.
    """
    summary = BatchSummary()
    kinds: Counter = Counter()
    dependency_kinds: Counter = Counter()
    for result in results:
        summary.total += 1
        if result.ok:
            summary.decoded += 1
        else:
            summary.failed += 1
            kinds[result.error.kind] += 1
            if isinstance(result.error, DependencyErrors):
                dependency_kinds.update(e.kind for e in result.error.errors)
    summary.errors_by_kind = dict(kinds)
    summary.dependency_errors_by_kind = dict(dependency_kinds)
    return summary
