"""Domain layer for finestra.

The derivation engine lives in ``installments``, ``recurrence``, ``status``,
``metrics`` and ``deviation``; the services wire it to the store.
"""

_SERVICES = {
    "ProjectService": "finestra.domain.project",
    "CostService": "finestra.domain.cost",
    "RevenueService": "finestra.domain.revenue",
    "FixedCostService": "finestra.domain.fixed_cost",
    "CategoryService": "finestra.domain.category",
    "DeviationService": "finestra.domain.deviation",
    "DashboardService": "finestra.domain.dashboard",
    "UserService": "finestra.domain.user",
}

__all__ = list(_SERVICES)


# Services import the store, which imports the entities, so load them lazily
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
