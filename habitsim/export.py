"""
habitsim/export.py - Export Functions

JSON snapshots of a session for the rendering layer and text reports of a
finished run.
"""

import json
from dataclasses import asdict
from typing import Optional

from receipts import dual_hash, emit_receipt

from .constants import RECEIPT_SCHEMA, TENANT_ID
from .types_result import SimResult
from .types_state import SessionHandle


def session_to_dict(session: SessionHandle) -> dict:
    """Plain-data view of a session (qubits, particles, links, energy levels)."""
    return {
        "scenario": session.config.scenario_name,
        "tick": session.tick,
        "simulation_time": session.simulation_time,
        "habit_ids": list(session.state.habit_ids),
        "qubits": [[q.real, q.imag] for q in session.state],
        "total_probability": session.state.total_probability(),
        "particles": [asdict(p) for p in session.particles],
        "entanglements": [asdict(link) for link in session.entanglements],
        "energy_levels": dict(session.energy_levels),
        "receipt_schemas": list(RECEIPT_SCHEMA),
    }


def export_session(session: SessionHandle, output_path: Optional[str] = None) -> str:
    """
    Serialize a session snapshot to JSON, stamped with its dual_hash.

    Args:
        session: SessionHandle to export
        output_path: Optional file path to write the JSON to

    Returns:
        str: JSON formatted output
    """
    data = session_to_dict(session)
    data["dual_hash"] = dual_hash(json.dumps(data, sort_keys=True))
    text = json.dumps(data, indent=2)

    if output_path:
        with open(output_path, "w") as f:
            f.write(text)

    session.receipt_ledger.append(emit_receipt("session_export", {
        "tenant_id": TENANT_ID,
        "tick": session.tick,
        "dual_hash": data["dual_hash"],
        "output_path": output_path
    }))

    return text


def export_result(result: SimResult) -> str:
    """Format SimResult as JSON."""
    export_data = {
        "config": asdict(result.config),
        "statistics": result.statistics,
        "traces": result.all_traces,
        "violations": result.violations,
        "final_state": session_to_dict(result.final_state)
    }
    return json.dumps(export_data, indent=2)


def generate_report(result: SimResult) -> str:
    """
    Generate human-readable summary.

    Args:
        result: SimResult to summarize

    Returns:
        str: Report text
    """
    stats = result.statistics
    lines = [
        "=== HABIT STATE REPORT ===",
        f"Scenario: {result.config.scenario_name}",
        f"Ticks: {stats['ticks']}",
        f"Fluctuations: {stats['fluctuations']}",
        f"Particles: {stats['particle_count']}",
        f"Entanglements: {stats['entanglement_count']}",
        f"Final Total Probability: {stats['final_total_probability']:.6f}",
        f"Max Normalization Error: {stats['max_normalization_error']:.2e}",
        f"Violations: {len(result.violations)}",
        "",
        "Pass/Fail: " + ("PASS" if len(result.violations) == 0 else "FAIL")
    ]

    return "\n".join(lines)
