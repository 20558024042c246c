"""
Reporte en texto plano de una corrida (log y cuerpo de notificación).
"""
from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from inventory_sync.domain.entities.sync_models import ReconciliationResult


def _fmt(value: Any) -> str:
    return "(vacío)" if value in (None, "") else repr(value)


def format_report(
    title: str,
    sections: Sequence[Tuple[str, ReconciliationResult]],
    *,
    preview: bool = False,
) -> str:
    """
    Renderiza conteos, diffs y errores de cada sección.

    Args:
        title: Título del job
        sections: pares (nombre de la pasada, resultado)
        preview: marca el reporte como dry run
    """
    lines: List[str] = [title + (" [PREVIEW - sin cambios persistidos]" if preview else "")]
    lines.append("=" * len(lines[0]))

    for name, result in sections:
        lines.append("")
        lines.append(f"{name}:")
        lines.append(
            f"  creados={result.created_count} actualizados={result.updated_count} "
            f"limpiados={result.cleared_count} total={result.total}"
        )
        for diff in result.diffs:
            changes = ", ".join(
                f"{field} {_fmt(old)} -> {_fmt(new)}" for field, (old, new) in diff.changes.items()
            )
            lines.append(f"  [{diff.action}] {diff.key}: {changes}")
        if result.errors:
            lines.append("  Errores:")
            for error in result.errors:
                lines.append(f"  - {error.key or '?'} ({error.error_code}): {error.message}")

    return "\n".join(lines)
