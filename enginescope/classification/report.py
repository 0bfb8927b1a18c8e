"""Report Assembler - External report shape.

Turns a classification result (or the absence of one) into the report
dictionary consumed by the command line and any transport layer.
"""

from typing import Any

from enginescope.core.models import ClassificationResult


def assemble_report(
    result: ClassificationResult | None,
    source: str | None = None,
) -> dict[str, Any]:
    """Assemble the report for a classification call.

    Args:
        result: Classification result, or None when no engine was detected.
        source: Optional description of the inspected document (e.g. a path).

    Returns:
        Report dictionary with ``detected``, ``name``, ``confidence``,
        ``features``, ``recommendations`` and ``warnings`` keys.
    """
    if result is None:
        report: dict[str, Any] = {
            "detected": False,
            "name": None,
            "confidence": 0.0,
            "features": [],
            "recommendations": [],
            "warnings": [],
        }
    else:
        report = {"detected": True, **result.to_dict()}

    if source:
        report["source"] = source

    return report
