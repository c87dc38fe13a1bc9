"""Magic Training: Streamlit pages over the training services.

Run with:
    streamlit run streamlit_app/app.py

Data lives in ``$TRAINING_DATA_DIR`` (default ``data/``); seed plans with
``python -m training_store.seed sample_plans``.
"""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from pace_engine.math.reference_tables import DEFAULT_TIMES

from pace_engine.models import ActivityType
from training_api.errors import ServiceError
from training_api.services import calculator as calculator_service
from training_api.services import paces as pace_service
from training_api.services import plans as plan_service
from training_api.services import profile as profile_service
from training_api.services import strava as strava_service
from training_api.services import user_plans as user_plan_service
from training_api.services import workouts as workout_service
from training_api.services.context import Caller, ServiceContext

from helpers import (
    ACTIVITY_COLORS,
    DISTANCE_OPTIONS,
    LEVEL_LABELS,
    describe_activity,
    format_distance,
    format_duration,
    format_pace,
    intensity_frame,
    pace_form_defaults,
    prediction_rows,
    pace_settings_body,
    week_rows,
    workouts_frame,
    zone_hint,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Magic Training",
    page_icon="🏃",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Cached context
# ---------------------------------------------------------------------------


@st.cache_resource
def get_context() -> ServiceContext:
    return ServiceContext.from_config()


ctx = get_context()

# ---------------------------------------------------------------------------
# Sidebar: user and plan
# ---------------------------------------------------------------------------

st.sidebar.title("Runner")
user_id = st.sidebar.text_input("User id", value=st.session_state.get("user_id", "demo"))
st.session_state["user_id"] = user_id
caller = Caller(user_id=user_id) if user_id else None

summaries = plan_service.list_plan_summaries(ctx)
plan_paths = [s["path"] for s in summaries]
plan_names = {s["path"]: s["name"] for s in summaries}

active_plan = None
if caller is not None:
    active_plan = ctx.profiles.get_or_new(caller.user_id).active_plan

if plan_paths:
    default_index = plan_paths.index(active_plan) if active_plan in plan_paths else 0
    selected_path = st.sidebar.selectbox(
        "Plan",
        plan_paths,
        index=default_index,
        format_func=lambda p: plan_names.get(p, p),
    )
else:
    selected_path = None
    st.sidebar.warning("No plans loaded. Run `python -m training_store.seed sample_plans`.")

if caller is not None and selected_path:
    act_col, save_col = st.sidebar.columns(2)
    if act_col.button("Activate"):
        user_plan_service.activate_plan(ctx, caller, selected_path)
        st.sidebar.success("Plan activated")
    if save_col.button("Save"):
        user_plan_service.save_plan(ctx, caller, selected_path)
        st.sidebar.success("Plan saved")

# ---------------------------------------------------------------------------
# Sidebar: pace settings
# ---------------------------------------------------------------------------

if caller is not None and selected_path:
    with st.sidebar.expander("Pace settings", expanded=False):
        profile = ctx.profiles.get_or_new(caller.user_id)
        defaults = pace_form_defaults(profile.settings_for(selected_path))
        base_distance = st.selectbox(
            "Reference distance",
            DISTANCE_OPTIONS,
            index=DISTANCE_OPTIONS.index(defaults["baseDistance"])
            if defaults["baseDistance"] in DISTANCE_OPTIONS
            else 0,
        )
        base_time = st.text_input("Reference time (HH:MM:SS)", value=defaults["baseTime"])
        start = st.date_input(
            "Plan start date",
            value=date.fromisoformat(defaults["startDate"]) if defaults["startDate"] else date.today(),
        )
        factor = st.number_input(
            "Adjustment (%)",
            min_value=50.0,
            max_value=150.0,
            value=float(defaults["adjustmentFactor"]),
            step=1.0,
        )
        overrides = {
            zone: st.text_input(f"{zone} override", value=current, help=zone_hint(zone))
            for zone, current in defaults["overrides"].items()
        }
        if st.button("Save paces"):
            body = pace_settings_body(base_distance, base_time, start.isoformat(), factor, overrides)
            try:
                pace_service.update_custom_paces(ctx, caller, selected_path, body)
                st.success("Pace settings saved")
            except ServiceError as e:
                st.error(e.message)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _render_week(week: dict) -> None:
    """7-column grid of one week followed by its volume."""
    cols = st.columns(7)
    for col, day in zip(cols, week["days"]):
        activities = day["activities"]
        first_type = ActivityType.parse(activities[0]["type"]) if activities else ActivityType.OFFDAY
        color = ACTIVITY_COLORS.get(first_type, "#CCCCCC")
        border = "3px solid #222" if day["isToday"] else "none"
        lines = "<br>".join(
            f"{a.get('activity') or a['type']} {a.get('distance') or ''} "
            f"<small>{format_pace(a.get('pace', ''))}</small>"
            for a in activities
        ) or "Rest"
        with col:
            st.markdown(
                f'<div style="background:{color};padding:8px;border-radius:8px;'
                f'min-height:110px;border:{border};">'
                f"<strong>{day['displayDate']}</strong><br>{lines}<br>"
                f"<small>{format_duration(day['volume']['minutes'])}</small>"
                f"</div>",
                unsafe_allow_html=True,
            )
    volume = week["weeklyVolume"]
    st.caption(
        f"Week volume: {format_distance(volume['km'])} · {volume['duration']} · "
        f"{week['totalWorkouts']} workouts"
    )


tab_plans, tab_schedule, tab_dashboard, tab_log, tab_strava, tab_calc = st.tabs(
    ["Plans", "Schedule", "Dashboard", "Workout Log", "Strava", "Calculator"]
)

# ---------------------------------------------------------------------------
# Tab 1: Plan catalogue
# ---------------------------------------------------------------------------

with tab_plans:
    f1, f2, f3 = st.columns(3)
    level = f1.selectbox("Level", ["(any)"] + list(LEVEL_LABELS), format_func=lambda v: LEVEL_LABELS.get(v, v))
    distance = f2.selectbox("Distance", ["(any)"] + list(DISTANCE_OPTIONS))
    search = f3.text_input("Search")
    filtered = plan_service.list_plan_summaries(
        ctx,
        nivel=None if level == "(any)" else level,
        distance=None if distance == "(any)" else distance,
        search=search or None,
    )
    if filtered:
        st.dataframe(
            pd.DataFrame(filtered)[["name", "coach", "nivel", "duration", "volume", "days"]],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No plans match these filters.")

    if caller is not None:
        mine = user_plan_service.get_user_plans(ctx, caller)
        st.subheader("Recommended for you")
        for rec in mine["recommendedPlans"]:
            st.markdown(f"**{rec['name']}** · {rec['coach']} · {LEVEL_LABELS.get(rec['nivel'], rec['nivel'])}")

# ---------------------------------------------------------------------------
# Tab 2: Schedule with paces and volume
# ---------------------------------------------------------------------------

with tab_schedule:
    if selected_path:
        try:
            view = plan_service.get_plan_view(
                ctx, selected_path, user_id=caller.user_id if caller else None
            ).to_dict()
        except ServiceError as e:
            st.error(e.message)
            view = None

        if view is not None:
            mc1, mc2, mc3, mc4 = st.columns(4)
            mc1.metric("Parameter", str(view["parameter"]))
            mc2.metric("Start", view["startDate"])
            mc3.metric("End", view["endDate"])
            mc4.metric("Weeks", str(len(view["weeks"])))

            with st.expander("Training paces"):
                st.table(pd.DataFrame({"Pace": view["paces"]}))
            with st.expander("Race predictions"):
                st.table(pd.DataFrame({"Time": view["predictions"]}))

            for number, week in enumerate(view["weeks"], start=1):
                st.subheader(f"Week {number}")
                _render_week(week)
                with st.expander("Details"):
                    st.dataframe(pd.DataFrame(week_rows(week)), hide_index=True, use_container_width=True)
    else:
        st.info("Select a plan in the sidebar.")

# ---------------------------------------------------------------------------
# Tab 3: Dashboard
# ---------------------------------------------------------------------------

with tab_dashboard:
    if caller is None:
        st.info("Enter a user id in the sidebar.")
    else:
        summary = profile_service.get_user_summary(ctx, caller)
        d1, d2, d3, d4 = st.columns(4)
        d1.metric("Total distance", format_distance(summary["totalDistance"]))
        d2.metric("Workouts", str(summary["totalWorkouts"]))
        d3.metric("Streak", f"{summary['streakDays']} days")
        d4.metric("Level", summary["currentMilestone"])
        nxt = summary["nextMilestone"]
        if nxt:
            st.progress(
                min(1.0, summary["totalDistance"] / nxt["target"]),
                text=f"{nxt['remaining']} km to {nxt['name']}",
            )

        today_workout = summary["todaysWorkout"]
        st.subheader("Today's workout")
        if today_workout and today_workout["activities"]:
            plan = ctx.plans.get(today_workout["planPath"])
            day = plan.daily_workouts[today_workout["index"]] if plan else None
            for activity in day.activities if day else ():
                st.markdown(f"- {describe_activity(activity)}")
        else:
            st.caption("Nothing planned today.")

        history = profile_service.get_distance_history(ctx, caller, weeks=12)
        st.subheader("Weekly distance")
        st.bar_chart(pd.DataFrame(history).set_index("weekStart")["distance"])

# ---------------------------------------------------------------------------
# Tab 4: Workout log
# ---------------------------------------------------------------------------

with tab_log:
    if caller is None:
        st.info("Enter a user id in the sidebar.")
    else:
        with st.form("log_workout"):
            lc1, lc2 = st.columns(2)
            w_date = lc1.date_input("Date", value=date.today())
            w_title = lc2.text_input("Title", value="Run")
            lc3, lc4, lc5 = st.columns(3)
            w_distance = lc3.number_input("Distance (km)", min_value=0.0, value=5.0, step=0.1)
            w_duration = lc4.number_input("Duration (min)", min_value=0.0, value=30.0, step=1.0)
            w_type = lc5.selectbox("Type", [t.value for t in ActivityType if t != ActivityType.OFFDAY])
            w_notes = st.text_area("Notes")
            if st.form_submit_button("Log workout"):
                body = {
                    "date": w_date.isoformat(),
                    "title": w_title,
                    "distance": w_distance,
                    "duration": w_duration,
                    "activityType": w_type,
                    "notes": w_notes,
                }
                if active_plan:
                    body["planPath"] = active_plan
                try:
                    log = workout_service.log_workout(ctx, caller, body)
                    st.success(f"Logged {format_distance(log.distance)} at {format_pace(log.pace)}")
                except ServiceError as e:
                    st.error(e.message)

        logs = workout_service.list_workouts(ctx, caller)
        st.dataframe(workouts_frame(logs), hide_index=True, use_container_width=True)
        if logs:
            to_delete = st.selectbox(
                "Delete workout",
                ["(none)"] + [log.id for log in logs],
                format_func=lambda i: i if i == "(none)" else next(
                    f"{log.date} {log.title}" for log in logs if log.id == i
                ),
            )
            if st.button("Delete") and to_delete != "(none)":
                workout_service.delete_workout(ctx, caller, to_delete)
                st.success("Workout deleted")

# ---------------------------------------------------------------------------
# Tab 5: Strava
# ---------------------------------------------------------------------------

with tab_strava:
    if caller is None:
        st.info("Enter a user id in the sidebar.")
    else:
        status = strava_service.strava_status(ctx, caller)
        if status["connected"]:
            st.success(f"Connected (athlete {status['athleteId']})")
            if status["lastImport"]:
                st.caption(f"Last import: {status['lastImport']}")
            days = st.slider("Import the last N days", min_value=1, max_value=90, value=30)
            if st.button("Import activities", type="primary"):
                try:
                    result = strava_service.import_strava_activities(ctx, caller, days=days)
                    st.success(
                        f"Imported {result['imported']} activities "
                        f"({result['linkedToPlan']} linked to your plan, {result['skipped']} skipped)"
                    )
                except ServiceError as e:
                    st.error(e.message)
        else:
            st.info("Paste the tokens returned by Strava's authorization to link your account.")
            access = st.text_input("Access token", type="password")
            refresh = st.text_input("Refresh token", type="password")
            expires = st.number_input("Expires at (Unix time)", min_value=0, value=0, step=1)
            athlete = st.text_input("Athlete id")
            if st.button("Link account"):
                try:
                    strava_service.link_strava_account(
                        ctx,
                        caller,
                        {
                            "accessToken": access,
                            "refreshToken": refresh,
                            "expiresAt": int(expires),
                            "athleteId": athlete or None,
                        },
                    )
                    st.success("Strava linked")
                except ServiceError as e:
                    st.error(e.message)

# ---------------------------------------------------------------------------
# Tab 6: Calculator
# ---------------------------------------------------------------------------

with tab_calc:
    cc1, cc2 = st.columns(2)
    calc_distance = cc1.selectbox("Race distance", DISTANCE_OPTIONS, index=DISTANCE_OPTIONS.index("5km"))
    calc_time = cc2.text_input("Race time (HH:MM:SS)", value=DEFAULT_TIMES[calc_distance])
    try:
        result = calculator_service.calculate(ctx, calc_time, calc_distance)
    except ServiceError as e:
        st.error(e.message)
        result = None

    if result is not None:
        rc1, rc2, rc3 = st.columns(3)
        rc1.metric("Parameter", str(result["parameter"]))
        rc2.metric("Average pace", format_pace(result["averagePace"]))
        rc3.metric("Level", f"{result['percentage']}%")
        st.subheader("Training zones")
        st.dataframe(intensity_frame(result), hide_index=True, use_container_width=True)
        st.subheader("Equivalent race times")
        st.dataframe(pd.DataFrame(prediction_rows(result)), hide_index=True, use_container_width=True)
