"""Text and JSON printing for cp750-shell."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from .context import ShellContext


def _print_json(status: str, **body: Any) -> None:
    payload = {"status": status}
    payload.update({key: value for key, value in body.items() if value is not None})
    print(json.dumps(payload, indent=2, sort_keys=True))


def emit_result(ctx: ShellContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Print ``message``, or ``data`` (falling back to ``message``) in JSON mode."""
    if not ctx.json_output:
        print(message)
    elif data is None:
        _print_json("ok", message=message)
    else:
        _print_json("ok", result=dict(data))


def emit_error(ctx: ShellContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    if not ctx.json_output:
        print(f"error: {message}")
        return
    _print_json("error", error=message, details=dict(data) if data else None)


def emit_values(ctx: ShellContext, values: Mapping[str, Optional[str]]) -> None:
    """Print field values as ``key : value`` lines, the device's status layout."""
    if ctx.json_output:
        _print_json("ok", result=dict(values))
        return
    for key, value in values.items():
        print(f"{key} : {value if value is not None else '(unknown)'}")


__all__ = ["emit_error", "emit_result", "emit_values"]
