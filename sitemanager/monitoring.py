"""Call performance monitoring for the DynamoDB client.

botocore emits ``before-call`` and ``after-call`` events around every API
operation. Hooking them gives the same slow-call visibility the API previously
had for SQL statements, without wrapping each store method by hand.
"""

import logging
import time
from typing import Any

logger = logging.getLogger(__name__)

_START_KEY = "sitemanager_call_started_at"


def setup_call_monitoring(client: Any, slow_call_threshold: float = 0.5) -> None:
    """Log DynamoDB operations slower than ``slow_call_threshold`` seconds.

    Args:
        client: boto3 low-level client whose event system is instrumented
        slow_call_threshold: Log calls slower than this many seconds (default: 0.5s)
    """
    events = getattr(getattr(client, "meta", None), "events", None)
    if events is None:
        logger.warning("Client exposes no event system, skipping call monitoring")
        return

    def _before_call(context: dict[str, Any], **_: Any) -> None:
        context[_START_KEY] = time.perf_counter()

    def _after_call(
        context: dict[str, Any],
        model: Any,
        parsed: dict[str, Any] | None = None,
        **_: Any,
    ) -> None:
        started = context.pop(_START_KEY, None)
        if started is None:
            return
        total = time.perf_counter() - started
        operation = getattr(model, "name", "unknown")
        if total > slow_call_threshold:
            logger.warning(
                "Slow DynamoDB call detected (%.3fs): %s",
                total,
                operation,
                extra={
                    "duration_seconds": total,
                    "operation": operation,
                    "threshold_seconds": slow_call_threshold,
                },
            )
        else:
            logger.debug("DynamoDB %s completed in %.3fs", operation, total)

    events.register("before-call.dynamodb.*", _before_call)
    events.register("after-call.dynamodb.*", _after_call)

    logger.info(
        "DynamoDB call monitoring enabled (slow call threshold: %ss)",
        slow_call_threshold,
    )
