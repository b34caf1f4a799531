"""
Analytics aggregation over the completed-session log.

Every view is a pure reduction over already persisted, typed sessions (or
records) and never mutates them. Display names and muscle tags come from
the template snapshot embedded in each session, not from live catalog data.

Time windows are resolved against a caller-supplied `now`; a missing start
falls back to the view's default lookback. Missing numeric values are
excluded from averages rather than counted as zero.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from application.exceptions import AnalyticsQueryError
from backend.core.volume import mean, total_volume
from domain.models import (
    DEFAULT_LOOKBACK_DAYS,
    UNWINDOWED_VIEWS,
    AnalyticsOverview,
    AnalyticsReport,
    AnalyticsView,
    AnalyticsWindow,
    ExerciseFrequencyRow,
    MuscleGroupTotalRow,
    MuscleGroupVolumeRow,
    PersonalRecord,
    ProgressionPoint,
    RecentSessionRow,
    Session,
    TemplatePerformanceRow,
    TemplateSummary,
    WeekdayFrequencyRow,
    WeeklyTrendRow,
    WorkoutFrequency,
)

logger = logging.getLogger(__name__)

OVERVIEW_RECENT_SESSIONS = 10
OVERVIEW_TOP_EXERCISES = 10

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _iso_week(d: date) -> str:
    """ISO week label, e.g. 2026-W06."""
    iso = d.isocalendar()
    return f"{iso[0]}-W{iso[1]:02d}"


def _in_window(
    sessions: Iterable[Session],
    window: Optional[AnalyticsWindow],
    now: datetime,
    default_days: Optional[int],
) -> List[Session]:
    """Completed sessions inside the window, oldest first."""
    window = window or AnalyticsWindow()
    selected = [
        s
        for s in sessions
        if s.is_completed and window.contains(s.completed_at, now, default_days)
    ]
    return sorted(selected, key=lambda s: s.completed_at)


def _completed_rpes(sets) -> List[Optional[float]]:
    return [s.actual_rpe for s in sets if s.completed]


def _session_volume(session: Session) -> float:
    if session.metrics is not None:
        return session.metrics.total_volume
    return sum(total_volume(p.sets) for p in session.performance.values())


# =============================================================================
# Views
# =============================================================================


def exercise_frequency(
    sessions: Iterable[Session],
    *,
    now: datetime,
    window: Optional[AnalyticsWindow] = None,
    default_days: Optional[int] = DEFAULT_LOOKBACK_DAYS[AnalyticsView.EXERCISE_FREQUENCY],
    limit: Optional[int] = None,
) -> List[ExerciseFrequencyRow]:
    """
    Count sessions per exercise.

    The display name comes from the newest session's snapshot. Rows are
    sorted by session count, then volume, descending.
    """
    session_ids: Dict[str, Set[int]] = defaultdict(set)
    volumes: Dict[str, float] = defaultdict(float)
    rpes: Dict[str, List[Optional[float]]] = defaultdict(list)
    names: Dict[str, str] = {}

    for index, session in enumerate(_in_window(sessions, window, now, default_days)):
        for exercise_id, exercise_perf in session.performance.items():
            if not exercise_perf.attempted:
                continue
            key = exercise_perf.exercise_key
            session_ids[key].add(index)
            volumes[key] += total_volume(exercise_perf.sets)
            rpes[key].extend(_completed_rpes(exercise_perf.sets))
            # Sessions are oldest first so the newest snapshot name wins
            names[key] = session.exercise_name(exercise_id)

    rows = [
        ExerciseFrequencyRow(
            exercise_key=key,
            exercise_name=names[key],
            session_count=len(ids),
            total_volume=volumes[key],
            average_rpe=mean(rpes[key]),
        )
        for key, ids in session_ids.items()
    ]
    rows.sort(key=lambda r: (-r.session_count, -r.total_volume, r.exercise_name))
    if limit is not None:
        rows = rows[:limit]
    return rows


def muscle_group_volume(
    sessions: Iterable[Session],
    *,
    now: datetime,
    window: Optional[AnalyticsWindow] = None,
    default_days: Optional[int] = DEFAULT_LOOKBACK_DAYS[AnalyticsView.MUSCLE_GROUP_VOLUME],
    muscle_group: Optional[str] = None,
) -> List[MuscleGroupVolumeRow]:
    """
    Volume per muscle group per day.

    An exercise tagged with several muscles credits its full volume to each
    of them; volume is never split.
    """
    volumes: Dict[Tuple[date, str], float] = defaultdict(float)
    counts: Dict[Tuple[date, str], int] = defaultdict(int)
    wanted = muscle_group.lower() if muscle_group else None

    for session in _in_window(sessions, window, now, default_days):
        day = session.completed_at.date()
        for exercise_id, exercise_perf in session.performance.items():
            if not exercise_perf.completed_sets:
                continue
            volume = total_volume(exercise_perf.sets)
            for muscle in session.template_snapshot.muscles_for(exercise_id):
                tag = muscle.lower()
                if wanted and tag != wanted:
                    continue
                volumes[(day, tag)] += volume
                counts[(day, tag)] += 1

    return [
        MuscleGroupVolumeRow(day=day, muscle_group=tag, volume=volumes[(day, tag)], exercise_count=counts[(day, tag)])
        for day, tag in sorted(volumes)
    ]


def exercise_progression(
    sessions: Iterable[Session],
    exercise_key: Optional[str],
    *,
    now: datetime,
    window: Optional[AnalyticsWindow] = None,
    default_days: Optional[int] = DEFAULT_LOOKBACK_DAYS[AnalyticsView.EXERCISE_PROGRESSION],
) -> List[ProgressionPoint]:
    """
    Daily progression series for one exercise.

    Raises:
        AnalyticsQueryError: If no exercise key is given
    """
    if not exercise_key:
        raise AnalyticsQueryError("exercise_progression requires an exercise_key")

    days: Dict[date, Dict[str, Any]] = {}
    for session in _in_window(sessions, window, now, default_days):
        completed = [
            s
            for p in session.performance.values()
            if p.exercise_key == exercise_key
            for s in p.completed_sets
        ]
        if not completed:
            continue

        bucket = days.setdefault(
            session.completed_at.date(),
            {"weights": [], "reps": [], "rpes": [], "volume": 0.0, "sets": 0, "sessions": 0},
        )
        bucket["weights"].extend(s.actual_weight for s in completed if s.actual_weight is not None)
        bucket["reps"].extend(s.actual_reps for s in completed if s.actual_reps is not None)
        bucket["rpes"].extend(s.actual_rpe for s in completed)
        bucket["volume"] += total_volume(completed)
        bucket["sets"] += len(completed)
        bucket["sessions"] += 1

    return [
        ProgressionPoint(
            day=day,
            max_weight=max(b["weights"]) if b["weights"] else None,
            max_reps=max(b["reps"]) if b["reps"] else None,
            total_volume=b["volume"],
            average_rpe=mean(b["rpes"]),
            set_count=b["sets"],
            session_count=b["sessions"],
        )
        for day, b in sorted(days.items())
    ]


def workout_frequency(
    sessions: Iterable[Session],
    *,
    now: datetime,
    window: Optional[AnalyticsWindow] = None,
    default_days: Optional[int] = DEFAULT_LOOKBACK_DAYS[AnalyticsView.WORKOUT_FREQUENCY],
) -> WorkoutFrequency:
    """Workout counts with average volume and duration by weekday and ISO week."""
    weekdays: Dict[int, List[Session]] = defaultdict(list)
    weeks: Dict[date, List[Session]] = defaultdict(list)

    for session in _in_window(sessions, window, now, default_days):
        day = session.completed_at.date()
        weekdays[day.weekday()].append(session)
        weeks[day - timedelta(days=day.weekday())].append(session)

    by_weekday = [
        WeekdayFrequencyRow(
            day_of_week=weekday,
            day_name=DAY_NAMES[weekday],
            workout_count=len(group),
            average_volume=mean(_session_volume(s) for s in group),
            average_duration=mean(s.duration_seconds for s in group),
        )
        for weekday, group in sorted(weekdays.items())
    ]
    by_week = [
        WeeklyTrendRow(
            iso_week=_iso_week(week_start),
            week_start=week_start,
            workout_count=len(group),
            total_volume=sum(_session_volume(s) for s in group),
            average_duration=mean(s.duration_seconds for s in group),
        )
        for week_start, group in sorted(weeks.items())
    ]
    return WorkoutFrequency(by_weekday=by_weekday, by_week=by_week)


def personal_records(
    records: Iterable[PersonalRecord],
    *,
    exercise_key: Optional[str] = None,
) -> List[PersonalRecord]:
    """
    Current record per (exercise, kind, qualifier), newest first.

    Records only ever supersede with a strictly greater value, so the
    current record is the most recent one; value breaks a timestamp tie.
    """
    current: Dict[Any, PersonalRecord] = {}
    for record in records:
        if exercise_key and record.exercise_key != exercise_key:
            continue
        held = current.get(record.key)
        if held is None or (record.achieved_at, record.value) > (held.achieved_at, held.value):
            current[record.key] = record
    return sorted(current.values(), key=lambda r: r.achieved_at, reverse=True)


def template_performance(
    sessions: Iterable[Session],
    templates: Iterable[TemplateSummary],
) -> List[TemplatePerformanceRow]:
    """
    Usage statistics per template.

    Outer join of templates with completed sessions: templates that were
    never used appear with a usage count of 0.
    """
    by_template: Dict[str, List[Session]] = defaultdict(list)
    for session in sessions:
        if session.is_completed and session.template_id:
            by_template[session.template_id].append(session)

    rows = []
    for template in templates:
        used = by_template.get(template.template_id, [])
        rows.append(
            TemplatePerformanceRow(
                template_id=template.template_id,
                template_name=template.name,
                workout_type=template.workout_type,
                difficulty=template.difficulty,
                usage_count=len(used),
                average_volume=mean(_session_volume(s) for s in used),
                average_duration=mean(s.duration_seconds for s in used),
                last_used_at=max((s.completed_at for s in used), default=None),
            )
        )

    rows.sort(
        key=lambda r: (
            -r.usage_count,
            -(r.average_volume if r.average_volume is not None else -1.0),
            r.template_name,
        )
    )
    return rows


def overview(
    sessions: Iterable[Session],
    *,
    now: datetime,
    window: Optional[AnalyticsWindow] = None,
    default_days: Optional[int] = DEFAULT_LOOKBACK_DAYS[AnalyticsView.OVERVIEW],
) -> AnalyticsOverview:
    """
    Dashboard summary over the window.

    Combines the newest sessions, the top exercises by frequency and the
    volume credited to each muscle group. A muscle group counts a session
    once however many of its exercises hit it.
    """
    selected = _in_window(sessions, window, now, default_days)

    recent = [
        RecentSessionRow(
            session_id=s.id,
            template_name=s.template_snapshot.name,
            completed_at=s.completed_at,
            total_volume=_session_volume(s),
            total_sets=s.metrics.total_sets if s.metrics else 0,
            duration_seconds=s.duration_seconds,
        )
        for s in reversed(selected[-OVERVIEW_RECENT_SESSIONS:])
    ]

    muscle_volumes: Dict[str, float] = defaultdict(float)
    muscle_sessions: Dict[str, int] = defaultdict(int)
    for session in selected:
        touched: Set[str] = set()
        for exercise_id, exercise_perf in session.performance.items():
            if not exercise_perf.completed_sets:
                continue
            volume = total_volume(exercise_perf.sets)
            for muscle in session.template_snapshot.muscles_for(exercise_id):
                tag = muscle.lower()
                muscle_volumes[tag] += volume
                touched.add(tag)
        for tag in touched:
            muscle_sessions[tag] += 1

    muscle_groups = [
        MuscleGroupTotalRow(
            muscle_group=tag,
            total_volume=muscle_volumes[tag],
            session_count=muscle_sessions[tag],
        )
        for tag in muscle_sessions
    ]
    muscle_groups.sort(key=lambda r: (-r.total_volume, r.muscle_group))

    return AnalyticsOverview(
        recent_sessions=recent,
        exercise_frequency=exercise_frequency(
            selected,
            now=now,
            window=AnalyticsWindow(),
            default_days=None,
            limit=OVERVIEW_TOP_EXERCISES,
        ),
        muscle_groups=muscle_groups,
    )


# =============================================================================
# Dispatch
# =============================================================================


def parse_view(view: Any) -> AnalyticsView:
    """Coerce a view name into an AnalyticsView."""
    if isinstance(view, AnalyticsView):
        return view
    try:
        return AnalyticsView(view)
    except ValueError:
        valid = ", ".join(v.value for v in AnalyticsView)
        raise AnalyticsQueryError(f"Unknown analytics view '{view}'. Must be one of: {valid}")


def aggregate(
    user_id: str,
    view: Any,
    *,
    now: datetime,
    sessions: Iterable[Session] = (),
    records: Iterable[PersonalRecord] = (),
    templates: Iterable[TemplateSummary] = (),
    window: Optional[AnalyticsWindow] = None,
    exercise_key: Optional[str] = None,
    muscle_group: Optional[str] = None,
    limit: Optional[int] = None,
    lookback_days: Optional[Mapping[AnalyticsView, Optional[int]]] = None,
) -> AnalyticsReport:
    """
    Compute one analytics view for a user.

    Args:
        user_id: Owner of the log being aggregated
        view: AnalyticsView or its string value
        now: Reference time for default lookbacks
        sessions: The user's sessions
        records: The user's record log (personal_records view)
        templates: The user's live templates (template_performance view)
        window: Optional explicit time window
        exercise_key: Required for exercise_progression, optional filter for
            personal_records
        muscle_group: Optional filter for muscle_group_volume
        limit: Optional row limit for exercise_frequency
        lookback_days: Per-view default lookback overrides

    Returns:
        AnalyticsReport with the view's rows and the resolved period;
        the period is empty for views that read the whole log

    Raises:
        AnalyticsQueryError: If the view is unknown or a required parameter
            is missing
    """
    view = parse_view(view)
    if now.tzinfo is None:
        raise AnalyticsQueryError("now must be timezone-aware")

    lookbacks = dict(DEFAULT_LOOKBACK_DAYS)
    if lookback_days:
        lookbacks.update(lookback_days)
    days = lookbacks.get(view)
    window = window or AnalyticsWindow()
    sessions = list(sessions)

    if view == AnalyticsView.EXERCISE_FREQUENCY:
        data = exercise_frequency(sessions, now=now, window=window, default_days=days, limit=limit)
    elif view == AnalyticsView.MUSCLE_GROUP_VOLUME:
        data = muscle_group_volume(
            sessions, now=now, window=window, default_days=days, muscle_group=muscle_group
        )
    elif view == AnalyticsView.EXERCISE_PROGRESSION:
        data = exercise_progression(
            sessions, exercise_key, now=now, window=window, default_days=days
        )
    elif view == AnalyticsView.WORKOUT_FREQUENCY:
        data = workout_frequency(sessions, now=now, window=window, default_days=days)
    elif view == AnalyticsView.PERSONAL_RECORDS:
        data = personal_records(records, exercise_key=exercise_key)
    elif view == AnalyticsView.TEMPLATE_PERFORMANCE:
        data = template_performance(sessions, templates)
    else:
        data = overview(sessions, now=now, window=window, default_days=days)

    if view in UNWINDOWED_VIEWS:
        # These views read the whole log; no period was applied
        start, end = None, None
    else:
        start, end = window.resolve(now, days)
    logger.debug("Aggregated %s for user %s", view.value, user_id)
    return AnalyticsReport(
        user_id=user_id,
        view=view,
        period_start=start,
        period_end=end,
        data=data,
    )
