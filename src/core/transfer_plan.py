"""Typed transfer-plan parsing for batch copier runs.

This module loads and validates YAML transfer plans: an ordered list of
export, import, and dependency-listing steps that share defaults for the
transfer root and dependency depth.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Sequence, cast

from core.constants import TRANSFER_PLAN_VERSION
from core.errors import CopierDependencyError, CopierPlanError, CopierValidationError
from core.paths import canonical_path, validate_depth

PlanCommand = Literal["export", "import", "dependencies"]
SUPPORTED_PLAN_COMMANDS: tuple[PlanCommand, ...] = ("export", "import", "dependencies")

_ROOT_KEYS = {"version", "defaults", "steps"}
_DEFAULTS_KEYS = {"transfer_root", "depth"}
_STEP_KEYS = {"command", "path", "depth", "transfer_root"}


@dataclass(frozen=True)
class TransferPlanDefaults:
    """Default values applied to plan steps."""

    transfer_root: str | None = None
    depth: int | None = None


@dataclass(frozen=True)
class TransferPlanStep:
    """One export, import, or dependency-listing step."""

    command: PlanCommand
    path: str
    depth: int | None = None
    transfer_root: str | None = None


@dataclass(frozen=True)
class TransferPlan:
    """Validated transfer-plan root object."""

    version: int
    defaults: TransferPlanDefaults
    steps: tuple[TransferPlanStep, ...]


def load_transfer_plan(plan_path: str) -> TransferPlan:
    """Load and validate a YAML transfer plan from disk.

    Args:
        plan_path: File path to YAML plan.

    Returns:
        Fully validated plan.

    Raises:
        CopierDependencyError: If PyYAML is unavailable.
        CopierPlanError: If the file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(plan_path)
    return parse_transfer_plan(payload)


def parse_transfer_plan(payload: object) -> TransferPlan:
    """Validate an already-decoded plan payload.

    Raises:
        CopierPlanError: If schema checks fail.
    """
    root_mapping = _expect_mapping(payload, "transfer plan root")
    _validate_keys(root_mapping, _ROOT_KEYS, "transfer plan root")
    version = _parse_version(root_mapping)
    defaults = _parse_defaults(root_mapping)
    steps = _parse_steps(root_mapping)
    return TransferPlan(version=version, defaults=defaults, steps=steps)


def _load_yaml_payload(plan_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise CopierDependencyError(
            "YAML transfer plans require PyYAML. Install with 'pip install pyyaml'."
        ) from error
    plan_file = Path(plan_path).expanduser().resolve()
    if not plan_file.exists():
        raise CopierPlanError(
            f"Transfer plan does not exist at {plan_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(plan_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise CopierPlanError(
            f"Failed to read transfer plan at {plan_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise CopierPlanError(
            f"Failed to parse YAML transfer plan at {plan_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise CopierPlanError(
            f"Transfer plan at {plan_file} is empty. Define 'version' and 'steps'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise CopierPlanError(
            f"Invalid {context}: expected object mapping, got {type(value).__name__}."
        )
    for key in value:
        if not isinstance(key, str):
            raise CopierPlanError(
                f"Invalid {context}: expected string keys, got {type(key).__name__}."
            )
    return cast(Mapping[str, object], value)


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise CopierPlanError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise CopierPlanError(f"Unknown fields in {context}: {', '.join(unknown_keys)}.")


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if isinstance(raw_version, bool) or not isinstance(raw_version, int):
        raise CopierPlanError(
            f"Transfer plan field 'version' must be an integer. Set version: {TRANSFER_PLAN_VERSION}."
        )
    if raw_version != TRANSFER_PLAN_VERSION:
        raise CopierPlanError(
            f"Unsupported transfer plan version {raw_version}. Use version: {TRANSFER_PLAN_VERSION}."
        )
    return raw_version


def _parse_defaults(root_mapping: Mapping[str, object]) -> TransferPlanDefaults:
    raw_defaults = root_mapping.get("defaults")
    if raw_defaults is None:
        return TransferPlanDefaults()
    context = "transfer plan defaults"
    defaults_mapping = _expect_mapping(raw_defaults, context)
    _validate_keys(defaults_mapping, _DEFAULTS_KEYS, context)
    return TransferPlanDefaults(
        transfer_root=_optional_string(defaults_mapping, "transfer_root", context),
        depth=_optional_depth(defaults_mapping, context),
    )


def _parse_steps(root_mapping: Mapping[str, object]) -> tuple[TransferPlanStep, ...]:
    raw_steps = root_mapping.get("steps")
    if raw_steps is None:
        raise CopierPlanError(
            "Transfer plan missing required field 'steps'. Add a non-empty list of steps."
        )
    step_rows = _expect_sequence(raw_steps, "transfer plan steps")
    if len(step_rows) == 0:
        raise CopierPlanError("Transfer plan field 'steps' must include at least one step.")
    return tuple(_parse_step(step_value, index) for index, step_value in enumerate(step_rows))


def _parse_step(step_value: object, step_index: int) -> TransferPlanStep:
    context = f"transfer plan step #{step_index + 1}"
    step_mapping = _expect_mapping(step_value, context)
    _validate_keys(step_mapping, _STEP_KEYS, context)
    raw_command = step_mapping.get("command")
    if raw_command not in SUPPORTED_PLAN_COMMANDS:
        supported_rows = ", ".join(SUPPORTED_PLAN_COMMANDS)
        raise CopierPlanError(
            f"Unsupported command {raw_command!r} in {context}. Use one of: {supported_rows}."
        )
    raw_path = _optional_string(step_mapping, "path", context)
    if raw_path is None:
        raise CopierPlanError(f"Invalid {context}: field 'path' is required.")
    try:
        path = canonical_path(raw_path)
    except CopierValidationError as error:
        raise CopierPlanError(f"Invalid {context}: {error}") from error
    return TransferPlanStep(
        command=cast(PlanCommand, raw_command),
        path=path,
        depth=_optional_depth(step_mapping, context),
        transfer_root=_optional_string(step_mapping, "transfer_root", context),
    )


def _optional_string(mapping: Mapping[str, object], field_name: str, context: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        normalized_value = raw_value.strip()
        return normalized_value if normalized_value else None
    raise CopierPlanError(f"Invalid {context}: field '{field_name}' must be a string.")


def _optional_depth(mapping: Mapping[str, object], context: str) -> int | None:
    raw_value = mapping.get("depth")
    if raw_value is None:
        return None
    try:
        return validate_depth(raw_value)
    except CopierValidationError as error:
        raise CopierPlanError(f"Invalid {context}: {error}") from error
