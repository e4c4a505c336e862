"""
Habit-State Engine Configuration Schema - Self-Validating Config Loader

Loads SimConfig from JSON/YAML files and validates it against a JSON Schema
before the frozen dataclass is built.

Consumed by:
- proof.py (CLI)
- tests

Design Principles:
- Self-validating: Can't create invalid config
- Self-healing: Out-of-range input -> clamped values + warnings
- Strict mode: Any finding raises ValueError
- Immutable: Returns frozen SimConfig, no runtime mutation
"""

from __future__ import annotations

import hashlib
import json
import warnings
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml
from jsonschema import Draft202012Validator

from habitsim.types_config import SimConfig, SCENARIOS


__all__ = [
    'load',
    'from_dict',
    'to_dict',
    'save',
    'config_hash',
    'validate',
]


# =============================================================================
# JSON Schema Definition (Draft 2020-12)
# =============================================================================

_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "SimConfig",
    "description": "Habit-state engine configuration",
    "type": "object",
    "properties": {
        "n_qubits": {"type": "integer", "minimum": 1, "maximum": 64,
                     "description": "State vector capacity Q"},
        "n_particles": {"type": "integer", "minimum": 0, "maximum": 10000},
        "entanglement_threshold": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "superposition_factor": {"type": "number", "minimum": 0.0, "maximum": 3.14159},
        "interference_factor": {"type": "number", "minimum": 0.0, "maximum": 3.14159},
        "visualization_scale": {"type": "number", "minimum": 1.0, "maximum": 10000.0},
        "time_step": {"type": "number", "minimum": 0.001, "maximum": 1.0},
        "max_energy_level": {"type": "integer", "minimum": 0, "maximum": 100},
        "fluctuation_probability": {"type": "number", "minimum": 0.0, "maximum": 1.0},
        "hadamard_index": {"type": "integer"},
        "phase_index": {"type": "integer"},
        "perturb_energy_levels": {"type": "boolean"},
        "emit_tick_receipts": {"type": "boolean"},
        "n_ticks": {"type": "integer", "minimum": 0, "maximum": 1000000},
        "random_seed": {"type": "integer"},
        "scenario_name": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False
}

_INT_FIELDS = frozenset({
    "n_qubits", "n_particles", "max_energy_level", "hadamard_index",
    "phase_index", "n_ticks", "random_seed",
})


# =============================================================================
# Compiled Validator
# =============================================================================

Draft202012Validator.check_schema(_JSON_SCHEMA)
_COMPILED_VALIDATOR = Draft202012Validator(_JSON_SCHEMA)


def config_hash(config: SimConfig) -> str:
    """SHA3-256 of the canonical JSON form, truncated to 16 hex chars."""
    canonical = json.dumps(to_dict(config), sort_keys=True, separators=(',', ':'))
    return hashlib.sha3_256(canonical.encode()).hexdigest()[:16]


# =============================================================================
# Public API
# =============================================================================

def validate(data: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
    """
    Validate config data.

    Returns: (is_valid, errors, warnings)

    Rules:
    - Wrong types are errors
    - Out-of-range values are warnings (healable by clamping)
    - Unknown fields are warnings (healable by dropping)
    """
    errors: List[str] = []
    warns: List[str] = []

    if not isinstance(data, dict):
        return False, [f"config must be a mapping, got {type(data).__name__}"], []

    for err in _COMPILED_VALIDATOR.iter_errors(data):
        if err.validator in ('minimum', 'maximum', 'additionalProperties'):
            warns.append(f"Schema: {err.message}")
        else:
            errors.append(f"Schema: {err.message}")

    return len(errors) == 0, errors, warns


def from_dict(
    data: Dict[str, Any],
    validate_data: bool = True,
    strict: bool = False
) -> SimConfig:
    """
    Build a SimConfig from plain data.

    A `scenario_name` matching a preset starts from that preset; other
    fields override it.

    Args:
        data: Config fields
        validate_data: Whether to validate (default True)
        strict: If True, raise on any finding; if False, self-heal with warnings

    Returns:
        Frozen SimConfig

    Raises:
        ValueError: If validation fails (strict) or fails after self-healing
    """
    all_warnings: List[str] = []

    if validate_data:
        is_valid, errors, warns = validate(data)
        all_warnings.extend(warns)

        if strict and (errors or warns):
            raise ValueError("Config validation failed:\n" +
                             "\n".join(f"  - {e}" for e in errors + warns))
        if not is_valid:
            raise ValueError("Config validation failed:\n" +
                             "\n".join(f"  - {e}" for e in errors))

        data = _self_heal(data, all_warnings)

    for w in all_warnings:
        warnings.warn(f"SimConfig: {w}", UserWarning, stacklevel=3)

    base = SCENARIOS.get(data.get("scenario_name", ""), SimConfig())
    known = {f.name for f in fields(SimConfig)}
    overrides = {}
    for key, value in data.items():
        if key not in known:
            continue
        overrides[key] = int(value) if key in _INT_FIELDS else value

    return replace(base, **overrides)


def load(path: str, validate_data: bool = True, strict: bool = False) -> SimConfig:
    """
    Load config from JSON/YAML file.

    Args:
        path: Path to config file
        validate_data: Whether to validate (default True)
        strict: If True, raise on any finding; if False, self-heal with warnings

    Returns:
        Validated, frozen SimConfig

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If validation fails
    """
    path_obj = Path(path)

    if not path_obj.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    content = path_obj.read_text()

    if path_obj.suffix in ('.yaml', '.yml'):
        data = yaml.safe_load(content) or {}
    else:
        data = json.loads(content)

    return from_dict(data, validate_data, strict)


def to_dict(config: SimConfig) -> Dict[str, Any]:
    return asdict(config)


def save(config: SimConfig, path: str) -> None:
    """
    Write config to file.

    Args:
        config: SimConfig to write
        path: File path to write to (.json or .yaml)
    """
    data = to_dict(config)
    path_obj = Path(path)

    if path_obj.suffix in ('.yaml', '.yml'):
        content = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
    else:
        content = json.dumps(data, indent=2, sort_keys=True)

    path_obj.write_text(content)


# =============================================================================
# Internal Functions
# =============================================================================

def _self_heal(data: Dict[str, Any], warns: List[str]) -> Dict[str, Any]:
    """
    Apply self-healing to config data.

    Self-healing behavior:
    - Out-of-range value -> clamp to schema bounds, add warning
    - Unknown field -> ignore, add warning
    """
    healed = dict(data)
    properties = _JSON_SCHEMA["properties"]

    for key in list(healed):
        if key not in properties:
            del healed[key]
            warns.append(f"Ignoring unknown field: {key}")
            continue

        bounds = properties[key]
        val = healed[key]
        if isinstance(val, bool) or not isinstance(val, (int, float)):
            continue
        if "minimum" in bounds and val < bounds["minimum"]:
            healed[key] = bounds["minimum"]
            warns.append(f"Clamped {key} from {val} to {bounds['minimum']}")
        elif "maximum" in bounds and val > bounds["maximum"]:
            healed[key] = bounds["maximum"]
            warns.append(f"Clamped {key} from {val} to {bounds['maximum']}")

    return healed
