"""
Visualization and reporting utilities.
"""

from .core.engine import KnuthBendix


def print_state(kb: KnuthBendix):
    """Print a summary of the rule set of kb."""
    print(f"\n{'='*60}")
    print(f"Alphabet: {kb.alphabet!r}  Relations: {len(kb.relations)}  "
          f"Rules defined: {kb.total_rules}")
    print(f"Active rules ({kb.number_of_active_rules()}):")
    for lhs, rhs in kb.active_rules():
        print(f"  {lhs or '1'} -> {rhs or '1'}")
    print(f"Pending: {kb.number_of_pending_rules()} | Inactive: {kb.number_of_inactive_rules()}")
    if kb.confluent_known():
        print(f"Confluent: {kb.confluent()}")
    else:
        print("Confluent: unknown")
    print(f"{'='*60}")


def print_history(kb: KnuthBendix):
    """Print one line per run."""
    print(f"\n{'='*60}")
    print("Run history:")
    print(f"{'='*60}")
    for entry in kb.history:
        print(f"  Run {entry['run']}: {entry['active_rules']} active, "
              f"{entry['pending_rules']} pending, {entry['total_rules']} defined "
              f"in {entry['elapsed']:.3f}s -> {entry['halt_reason']}")


def export_dot(kb: KnuthBendix, path="gilman.dot"):
    """Export the Gilman digraph of kb as a DOT file for Graphviz."""
    digraph = kb.gilman_digraph()
    with open(path, "w") as f:
        f.write("digraph gilman {\n")
        f.write("  rankdir=LR;\n")
        f.write("  node [shape=circle];\n")
        for node, prefix in digraph.nodes(data="prefix"):
            label = (prefix or "1").replace('"', '\\"')
            f.write(f'  {node} [label="{label}"];\n')
        for source, target, letter in digraph.edges(data="letter"):
            label = letter.replace('"', '\\"')
            f.write(f'  {source} -> {target} [label="{label}"];\n')
        f.write("}\n")
    print(f"Graph exported to {path}")
