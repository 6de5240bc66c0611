# src/plugopts/engine/external.py
"""Concurrent execution of external (asynchronous) field checks.

External checks only run once every synchronous check has passed. They
run concurrently, and the caller gets back their failures in schema
declaration order regardless of completion order.

Each check receives its own read-only deep copy of the resolved record,
so checks cannot observe each other's mutations. Values that cannot be
deep-copied (clients, locks) are shared as-is.

An external check may be a coroutine function or a plain function (run in
a worker thread). It reports:
- success: return None or True
- failure: return False (default message), return a str (used verbatim),
  or raise ExternalCheckError(message)

Any other exception, and an overrun of the engine's own deadline, is
reported as that field's error. It never aborts validation.

Plain functions run on a thread pool owned by one run_external_checks()
call. The pool is shut down without waiting, so a timed-out sync check
never holds up the caller.
"""

from __future__ import annotations

import asyncio
import contextlib
import contextvars
import copy
import functools
import inspect
import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType
from typing import Any

from plugopts.contracts import ErrorKind, ExternalCheckError
from plugopts.core.logging import get_logger
from plugopts.core.schema import ExternalCheck, FieldRule, ObjectSchema

logger = get_logger(__name__)


async def _invoke(
    check: ExternalCheck,
    value: Any,
    record: Mapping[str, Any],
    executor: ThreadPoolExecutor,
) -> Any:
    """Call a check, awaiting it if async and threading it if not."""
    if inspect.iscoroutinefunction(check):
        return await check(value, record)
    loop = asyncio.get_running_loop()
    context = contextvars.copy_context()
    result = await loop.run_in_executor(
        executor, functools.partial(context.run, check, value, record)
    )
    if inspect.isawaitable(result):
        result = await result
    return result


def _snapshot(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """Read-only deep copy of the record for one check."""
    copied: dict[str, Any] = {}
    for key, value in record.items():
        try:
            copied[key] = copy.deepcopy(value)
        except Exception as e:
            logger.debug(
                "Sharing value that cannot be deep-copied",
                key=key,
                value_type=type(value).__name__,
                error=str(e),
            )
            copied[key] = value
    return MappingProxyType(copied)


def _interpret(name: str, rule: FieldRule, result: Any) -> str | None:
    """Turn a check's return value into an error message (or None on success)."""
    if result is None or result is True:
        return None
    if result is False:
        return rule.message(ErrorKind.EXTERNAL, name, error="")
    if isinstance(result, str):
        if not result:
            return rule.message(ErrorKind.EXTERNAL, name, error="")
        return result
    logger.warning(
        "External check returned an unsupported value",
        field=name,
        result_type=type(result).__name__,
    )
    return rule.message(
        ErrorKind.EXTERNAL,
        name,
        error=f"unexpected check result {result!r}",
    )


async def _run_check(
    name: str,
    rule: FieldRule,
    record: Mapping[str, Any],
    *,
    timeout: float | None,
    semaphore: asyncio.Semaphore | None,
    executor: ThreadPoolExecutor,
) -> str | None:
    """Run one field's external check and return its error, if any."""
    assert rule.external is not None

    snapshot = _snapshot(record)
    # Waiting on the semaphore does not count against the deadline
    slot = semaphore if semaphore is not None else contextlib.nullcontext()
    deadline = asyncio.timeout(timeout)
    start = time.perf_counter()
    try:
        async with slot:
            async with deadline:
                result = await _invoke(
                    rule.external, snapshot.get(name), snapshot, executor
                )
    except ExternalCheckError as e:
        return e.message or rule.message(ErrorKind.EXTERNAL, name, error="")
    except TimeoutError as e:
        if deadline.expired():
            logger.warning("External check timed out", field=name, timeout=timeout)
            return rule.message(ErrorKind.TIMEOUT, name, timeout=timeout)
        # The check's own timeout (e.g. a socket connect), not the engine's
        logger.warning(
            "External check raised",
            field=name,
            error_type=type(e).__name__,
            error=str(e),
        )
        return rule.message(ErrorKind.EXTERNAL, name, error=str(e))
    except Exception as e:
        # Unreachable services etc. are the field's failure, not the caller's crash
        logger.warning(
            "External check raised",
            field=name,
            error_type=type(e).__name__,
            error=str(e),
        )
        return rule.message(ErrorKind.EXTERNAL, name, error=str(e))
    finally:
        logger.debug(
            "External check finished",
            field=name,
            duration_ms=round((time.perf_counter() - start) * 1000, 3),
        )

    return _interpret(name, rule, result)


async def run_external_checks(
    schema: ObjectSchema,
    record: Mapping[str, Any],
    *,
    timeout: float | None = None,
    max_concurrency: int | None = None,
) -> list[str]:
    """Run every declared external check concurrently.

    Args:
        schema: Schema whose rules carry the checks
        record: Fully resolved record (defaults applied, unknown keys handled)
        timeout: Per-check time limit in seconds (None = no limit)
        max_concurrency: Max checks in flight (None = all at once)

    Returns:
        Error messages of failed checks, in schema declaration order
    """
    checks = [(name, rule) for name, rule in schema if rule.external is not None]
    if not checks:
        return []

    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None
    logger.debug("Running external checks", fields=[name for name, _ in checks])

    executor = ThreadPoolExecutor(
        max_workers=max_concurrency or len(checks),
        thread_name_prefix="plugopts-check",
    )
    try:
        outcomes = await asyncio.gather(
            *(
                _run_check(
                    name,
                    rule,
                    record,
                    timeout=timeout,
                    semaphore=semaphore,
                    executor=executor,
                )
                for name, rule in checks
            )
        )
    finally:
        # Timed-out sync checks keep their thread until they return
        executor.shutdown(wait=False, cancel_futures=True)

    # gather() preserves argument order, which is schema order
    return [error for error in outcomes if error is not None]
