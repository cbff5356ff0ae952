"""Permission catalog and default implication hierarchy.

Provides:
- ``Permissions`` — permission string constants (``{domain}.{action}`` format)
  plus builders for arbitrary domains.
- ``resource_hierarchy()`` — the standard implication edges of a CRUD resource.
- ``DEFAULT_HIERARCHY`` — ``HierarchyGraph`` for the administration application.

Ownership-qualified actions end in ``Own`` (``note.editOwn``): holding them
only counts when the subject owns, or is the target of, the resource.
"""

from __future__ import annotations

from .hierarchy import HierarchyGraph
from .tokens import OWN_SUFFIX, WILDCARD


class Permissions:
    """Canonical permission constants.

    Format: ``{domain}.{action}``, with ``{action}Own`` for the
    ownership-qualified variant.

    Two modes of use:

    1. **Static constants**::

        gate.check(user_id, Leaf(Permissions.USER_EDIT), effective)

    2. **Dynamic builders**::

        Permissions.action("candidate", "list")   → "candidate.list"
        Permissions.own("note", "edit")           → "note.editOwn"
    """

    ALL = WILDCARD

    # ── Users ───────────────────────────────────────────
    USER_LIST = "user.list"
    USER_SEARCH = "user.search"
    USER_VIEW = "user.view"
    USER_CREATE = "user.create"
    USER_EDIT = "user.edit"
    USER_DELETE = "user.delete"
    USER_EXPORT = "user.export"
    USER_ARCHIVE = "user.archive"
    USER_VIEW_OWN = "user.viewOwn"
    USER_EDIT_OWN = "user.editOwn"
    USER_DELETE_OWN = "user.deleteOwn"
    USER_USE_EDIT_INTENT = "user.useEditIntent"
    USER_USE_EDIT_INTENT_OWN = "user.useEditIntentOwn"
    USER_VIEW_STATUS = "user.viewStatus"

    # ── Access rights ───────────────────────────────────
    ACCESS_LIST = "access.list"
    ACCESS_VIEW = "access.view"
    ACCESS_EDIT = "access.edit"

    # ── Attendance ──────────────────────────────────────
    ATTENDANCE_CHECK_IN = "attendance.checkIn"
    ATTENDANCE_CHECK_OUT = "attendance.checkOut"
    ATTENDANCE_VIEW_HISTORY = "attendance.viewHistory"
    ATTENDANCE_VIEW_METRIC = "attendance.viewMetric"
    ATTENDANCE_FILTER_HISTORY = "attendance.filterHistory"

    # ── Notes & observations ────────────────────────────
    NOTE_VIEW = "note.view"
    NOTE_EDIT = "note.edit"
    NOTE_VIEW_OWN = "note.viewOwn"
    NOTE_EDIT_OWN = "note.editOwn"
    OBSERVATION_VIEW = "observation.view"
    OBSERVATION_VIEW_OWN = "observation.viewOwn"

    # ── Tasks ───────────────────────────────────────────
    TASK_VIEW = "task.view"
    TASK_VIEW_OWN = "task.viewOwn"
    TASK_TOGGLE_DONE_OWN = "task.toggleDoneOwn"

    # ── Documents ───────────────────────────────────────
    DOCUMENT_UPLOAD = "document.upload"
    DOCUMENT_VIEW = "document.view"
    DOCUMENT_VIEW_OWN = "document.viewOwn"

    # ── System configuration ────────────────────────────
    SYSTEM_CONFIG_VIEW = "systemConfig.view"
    SYSTEM_CONFIG_EDIT = "systemConfig.edit"
    SYSTEM_CONFIG_RESET = "systemConfig.reset"

    # ── Builders ────────────────────────────────────────

    @staticmethod
    def action(domain: str, action: str) -> str:
        """Build a permission string from domain and action.

        Returns:
            Permission string like ``"candidate.list"``
        """
        return f"{domain}.{action}"

    @staticmethod
    def own(domain: str, action: str) -> str:
        """Build the ownership-qualified variant of an action.

        Example::

            Permissions.own("expenseReport", "edit")  # "expenseReport.editOwn"
        """
        return f"{domain}.{action}{OWN_SUFFIX}"


def resource_hierarchy(domain: str, *, own_scope: bool = False) -> dict[str, tuple[str, ...]]:
    """Standard implication edges for a CRUD resource.

    create/edit/delete → view, export → list, archive → delete,
    list → search. With ``own_scope`` the global view also implies
    ``viewOwn``, and ``editOwn`` / ``deleteOwn`` imply ``viewOwn``.
    """
    p = Permissions.action
    edges: dict[str, tuple[str, ...]] = {
        p(domain, "create"): (p(domain, "view"),),
        p(domain, "edit"): (p(domain, "view"),),
        p(domain, "delete"): (p(domain, "view"),),
        p(domain, "export"): (p(domain, "list"),),
        p(domain, "archive"): (p(domain, "delete"),),
        p(domain, "list"): (p(domain, "search"),),
    }
    if own_scope:
        view_own = Permissions.own(domain, "view")
        edges[p(domain, "view")] = (view_own,)
        edges[Permissions.own(domain, "edit")] = (view_own,)
        edges[Permissions.own(domain, "delete")] = (view_own,)
    return edges


def _default_edges() -> dict[str, tuple[str, ...]]:
    edges: dict[str, tuple[str, ...]] = {}

    for domain in ("access", "candidate", "department", "team", "kpiForm", "news", "patrimoine", "guardTour"):
        edges.update(resource_hierarchy(domain))
    for domain in ("observation", "note", "task", "expenseReport", "collaboratorVideo", "document", "leave"):
        edges.update(resource_hierarchy(domain, own_scope=True))

    # Users: global view unlocks the profile insights and the own-profile view.
    edges.update(resource_hierarchy("user", own_scope=True))
    edges[Permissions.USER_VIEW] = (Permissions.USER_VIEW_OWN, Permissions.USER_VIEW_STATUS)
    edges[Permissions.USER_USE_EDIT_INTENT] = (Permissions.USER_EDIT,)
    edges[Permissions.USER_USE_EDIT_INTENT_OWN] = (Permissions.USER_EDIT_OWN,)

    edges["news.publish"] = ("news.edit",)
    edges[Permissions.TASK_TOGGLE_DONE_OWN] = (Permissions.TASK_VIEW_OWN,)
    edges["document.inFormUpload"] = (Permissions.DOCUMENT_VIEW,)
    edges[Permissions.DOCUMENT_UPLOAD] = (Permissions.DOCUMENT_VIEW,)
    edges["leave.treat"] = ("leave.view",)
    edges["expenseReport.treat"] = ("expenseReport.view",)

    edges[Permissions.ATTENDANCE_VIEW_HISTORY] = (Permissions.ATTENDANCE_VIEW_METRIC,)
    edges[Permissions.ATTENDANCE_FILTER_HISTORY] = (Permissions.ATTENDANCE_VIEW_HISTORY,)

    edges[Permissions.SYSTEM_CONFIG_EDIT] = (Permissions.SYSTEM_CONFIG_VIEW,)
    edges[Permissions.SYSTEM_CONFIG_RESET] = (Permissions.SYSTEM_CONFIG_EDIT,)
    return edges


DEFAULT_HIERARCHY: HierarchyGraph = HierarchyGraph.from_mapping(_default_edges())


__all__ = [
    "DEFAULT_HIERARCHY",
    "Permissions",
    "resource_hierarchy",
]
