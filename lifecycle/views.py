"""
Package views

Plain-text projections of package records for terminal output.
"""

from __future__ import annotations

from core.schemas import Package


def _table(rows: list[list[str]], padding: int = 1) -> str:
    """Left-aligned columns, each as wide as its widest cell plus padding."""
    if not rows:
        return ""
    widths = [0] * max(len(r) for r in rows)
    for row in rows:
        for i, cell in enumerate(row[:-1]):
            widths[i] = max(widths[i], len(cell))
    lines = []
    for row in rows:
        cells = [cell.ljust(widths[i] + padding) for i, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)


def render_package_table(packages: list[Package]) -> str:
    """One summary row per package: name, build status, environment, description."""
    rows = [["NAME", "STATUS", "ENV", "DESCRIPTION"]]
    for pkg in packages:
        rows.append([
            pkg.name,
            pkg.build_status.value,
            pkg.spec.environment.name,
            pkg.spec.description,
        ])
    return _table(rows)


def render_package_info(pkg: Package) -> str:
    """Full detail view of one package, build log included."""
    head = _table([
        ["Name:", pkg.name],
        ["Status:", pkg.build_status.value],
        ["Environment:", pkg.spec.environment.name],
        ["Description:", pkg.spec.description],
    ])
    return f"{head}\nBuild Logs:\n{pkg.spec.status.build_log}"
