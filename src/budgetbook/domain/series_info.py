"""Series summaries for confirmation prompts before batch operations."""

from typing import Sequence

from budgetbook.domain.entities import LineItem, SeriesInfo, SeriesScope


def standalone_info(item: LineItem) -> SeriesInfo:
    """Summary for an item outside any series: every scope means just it."""
    return SeriesInfo(
        series_id=None,
        total=1,
        completed=1 if item.completed else 0,
        pending=0 if item.completed else 1,
        first_period=item.period,
        last_period=item.period,
        anchor_period=item.period,
        scope_counts={scope: 1 for scope in SeriesScope},
    )


def build_series_info(anchor: LineItem, members: Sequence[LineItem]) -> SeriesInfo:
    """Summarize a series relative to the anchor item.

    Args:
        anchor: The item the user acted on
        members: Every item sharing the anchor's series ID

    Returns:
        SeriesInfo with completion counts, period bounds and per-scope counts
    """
    if anchor.series_id is None or not members:
        return standalone_info(anchor)

    ordered = sorted(members, key=lambda m: (m.period, m.id))
    completed = sum(1 for m in ordered if m.completed)
    following = sum(1 for m in ordered if m.period >= anchor.period)

    return SeriesInfo(
        series_id=anchor.series_id,
        total=len(ordered),
        completed=completed,
        pending=len(ordered) - completed,
        first_period=ordered[0].period,
        last_period=ordered[-1].period,
        anchor_period=anchor.period,
        scope_counts={
            SeriesScope.THIS_ONLY: 1,
            SeriesScope.THIS_AND_FOLLOWING: following,
            SeriesScope.ALL: len(ordered),
        },
    )
