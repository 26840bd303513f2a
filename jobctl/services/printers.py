import json
from typing import Any, Dict, TextIO

import yaml

from ..core.exceptions import UnsupportedOutputError

STRUCTURED_FORMATS = ("json", "yaml")
ALLOWED_FORMATS = ("json", "name", "yaml")


def resource_name(obj: Dict[str, Any]) -> str:
    """`job/test-job` style reference for an object."""
    kind = (obj.get("kind") or "").lower()
    name = (obj.get("metadata") or {}).get("name", "")
    return f"{kind}/{name}" if kind else name


def print_success(short: bool, out: TextIO, obj: Dict[str, Any], dry_run: bool, operation: str) -> None:
    if short:
        out.write(f"{resource_name(obj)}\n")
        return
    dry_run_msg = " (dry run)" if dry_run else ""
    out.write(f"{resource_name(obj)} {operation}{dry_run_msg}\n")


def print_object(obj: Dict[str, Any], output_format: str, out: TextIO) -> None:
    if output_format == "json":
        out.write(json.dumps(obj, indent=2))
        out.write("\n")
    elif output_format == "yaml":
        yaml.safe_dump(obj, out, default_flow_style=False, sort_keys=False)
    else:
        raise UnsupportedOutputError(
            f'unable to match a printer suitable for the output format "{output_format}", '
            f"allowed formats are: {','.join(ALLOWED_FORMATS)}"
        )
