"""Dashboard state and the chart handles it owns."""

import logging

logger = logging.getLogger(__name__)

LIVE = "live"
CACHED = "cached"
OFFLINE = "offline"
DATA_MODES = (LIVE, CACHED, OFFLINE)


class DashboardState:
    """
    Everything the dashboard renders from.

    employees is the dataset last loaded (from the server, a cache or the
    synthetic generator); filtered is the subset currently displayed. mode
    says where the data came from and notice carries the message shown to the
    user, which is always set when mode is not live.
    """

    def __init__(self, employees=None, stats=None, mode=LIVE, notice=None, filters=None, filtered=None):
        if mode not in DATA_MODES:
            raise ValueError(f"mode must be one of: {', '.join(DATA_MODES)}")
        self.employees = list(employees or [])
        self.filtered = list(filtered) if filtered is not None else list(self.employees)
        self.stats = stats
        self.mode = mode
        self.notice = notice
        self.filters = dict(filters or {})

    @property
    def is_degraded(self):
        return self.mode != LIVE

    def replace(self, **changes):
        """Copy of this state with some attributes changed"""
        values = {
            "employees": self.employees,
            "stats": self.stats,
            "mode": self.mode,
            "notice": self.notice,
            "filters": self.filters,
            "filtered": self.filtered,
        }
        values.update(changes)
        if "employees" in changes and "filtered" not in changes:
            values["filtered"] = None
        return DashboardState(**values)

    def department_names(self):
        """Sorted department names present in the dataset, for the filter dropdown"""
        names = {emp.get("department_name") or emp.get("department") for emp in self.employees}
        return sorted(name for name in names if name)

    def __repr__(self):
        return f"<DashboardState {self.mode} {len(self.filtered)}/{len(self.employees)} employees>"


class ChartHandle:
    """A drawn chart; destroy() releases it."""

    def __init__(self, name, config):
        self.name = name
        self.config = config
        self.destroyed = False

    def destroy(self):
        self.destroyed = True


class ChartRegistry:
    """
    Owns every chart handle. Rendering a chart always destroys the handle
    previously drawn under the same name first.
    """

    def __init__(self, factory=ChartHandle):
        self._factory = factory
        self._charts = {}

    def render(self, name, config):
        previous = self._charts.pop(name, None)
        if previous is not None:
            previous.destroy()
        if config is None:
            # Nothing to draw; the view shows its "no data" placeholder
            return None
        handle = self._factory(name, config)
        self._charts[name] = handle
        return handle

    def render_all(self, configs):
        return {name: self.render(name, config) for name, config in configs.items()}

    def get(self, name):
        return self._charts.get(name)

    def names(self):
        return sorted(self._charts)

    def clear(self):
        for handle in self._charts.values():
            handle.destroy()
        self._charts.clear()
