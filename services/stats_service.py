import logging

logger = logging.getLogger(__name__)


def get_employee_stats(repository, today=None, parallel=False):
    """
    Aggregate statistics for the dashboard.

    Four independent reads (active totals, trailing-year turnover, active
    employees per department, active employees per education level) combined
    into one object. With parallel=True they run concurrently; the result is
    the same either way. A failing read fails the whole call.
    """
    stats = repository.run_aggregates(today=today, parallel=parallel)
    logger.debug(
        "Computed stats: %s active, %s/%s turnover",
        stats["active"]["total_active"],
        stats["turnover"]["left_employees"],
        stats["turnover"]["total_employees"],
    )
    return stats
