"""
metrics.py
- Outcome counters for the shift loop, rendered in Prometheus text format.
- Single writer (the shift loop); the HTTP thread only reads.
"""

from node_pool_shifter.core.models import CycleOutcome

# --- Prometheus Metrics ---
node_totals = {outcome: 0 for outcome in CycleOutcome}
cycle_last_duration_seconds = 0.0


def record_outcome(outcome, duration=None):
    global cycle_last_duration_seconds

    node_totals[CycleOutcome(outcome)] += 1
    if duration is not None:
        cycle_last_duration_seconds = duration


def reset():
    global cycle_last_duration_seconds

    for outcome in node_totals:
        node_totals[outcome] = 0
    cycle_last_duration_seconds = 0.0


def render_metrics():
    lines = [
        "# HELP node_pool_shifter_node_totals Number of processed nodes.",
        "# TYPE node_pool_shifter_node_totals counter",
    ]
    for outcome, count in node_totals.items():
        lines.append(f'node_pool_shifter_node_totals{{status="{outcome.value}"}} {count}')
    lines += [
        "# HELP node_pool_shifter_cycle_last_duration_seconds Duration of the last shift cycle in seconds",
        "# TYPE node_pool_shifter_cycle_last_duration_seconds gauge",
        f"node_pool_shifter_cycle_last_duration_seconds {cycle_last_duration_seconds}",
    ]
    return "\n".join(lines) + "\n"
