"""
Performance monitoring utilities for feed fetches and evaluations
"""

import time
import logging
import functools
import threading
from typing import Dict, Any
from collections import defaultdict

logger = logging.getLogger(__name__)

# Performance metrics storage
_performance_metrics = defaultdict(list)
_metrics_lock = threading.Lock()


def monitor_performance(operation_name: str = None):
    """
    Decorator to time a function and collect metrics

    A call counts as failed when it raises, or when it returns an object
    whose ``ok`` attribute is False (a failed FetchResult).

    Args:
        operation_name: Name of the operation for logging purposes
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            # Determine operation name
            op_name = operation_name or f"{func.__module__}.{func.__name__}"

            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.time() - start_time
                _record(
                    op_name,
                    {
                        "execution_time": execution_time,
                        "timestamp": start_time,
                        "success": False,
                        "error": str(e),
                    },
                )
                logger.error(f"PERF ERROR: {op_name} - {execution_time:.3f}s, Error: {e}")
                raise

            execution_time = time.time() - start_time
            success = getattr(result, "ok", True) is not False
            entry = {
                "execution_time": execution_time,
                "timestamp": start_time,
                "success": success,
            }
            if not success:
                entry["error"] = str(getattr(result, "error", ""))
            _record(op_name, entry)

            logger.info(f"PERF: {op_name} - {execution_time:.3f}s, success={success}")
            return result

        return wrapper

    return decorator


def _record(op_name: str, entry: Dict[str, Any]):
    with _metrics_lock:
        _performance_metrics[op_name].append(entry)


def get_performance_summary() -> Dict[str, Any]:
    """Get performance metrics summary"""
    summary = {}

    with _metrics_lock:
        snapshot = {name: list(metrics) for name, metrics in _performance_metrics.items()}

    for op_name, metrics in snapshot.items():
        if not metrics:
            continue

        successful = [m for m in metrics if m.get("success", False)]
        failed = [m for m in metrics if not m.get("success", False)]

        if successful:
            avg_time = sum(m["execution_time"] for m in successful) / len(successful)
            max_time = max(m["execution_time"] for m in successful)
            min_time = min(m["execution_time"] for m in successful)
        else:
            avg_time = max_time = min_time = 0

        summary[op_name] = {
            "total_calls": len(metrics),
            "successful_calls": len(successful),
            "failed_calls": len(failed),
            "success_rate": len(successful) / len(metrics) * 100 if metrics else 0,
            "avg_execution_time": avg_time,
            "max_execution_time": max_time,
            "min_execution_time": min_time,
        }

    return summary


def clear_performance_metrics():
    """Clear all performance metrics"""
    with _metrics_lock:
        _performance_metrics.clear()
    logger.info("Performance metrics cleared")
