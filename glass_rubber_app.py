"""Glass & Rubber Streamlit UI.

One full-screen view per step of the day:
- Dump: get everything out of your head
- Select: pick the glass balls
- Explain: one-time glass/rubber explainer
- Balance: energy check, prioritise glass, name the smallest action
- Locked: today's checklist

All planning logic lives in `glassrubber.day`; this module only renders the
current state and forwards clicks to the DayStateMachine.
"""

from __future__ import annotations

import html
from typing import Optional

import streamlit as st

from glassrubber.config import get_settings
from glassrubber.database import PlanStorage, build_store
from glassrubber.day import DayStateMachine, Step, glass_slots, locked_checklist, too_much_glass
from glassrubber.day.views import handled_count
from glassrubber.models import Energy
from glassrubber.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


# Page config
st.set_page_config(
    page_title="Glass & Rubber",
    page_icon="🔮",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# Custom CSS for clean aesthetics
st.markdown(
    """<style>
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    header {visibility: hidden;}

    .main-header {
        font-size: 2.2rem;
        font-weight: 600;
        text-align: center;
        margin: 0.25rem 0 0.25rem 0;
    }
    .subheader {
        opacity: 0.7;
        text-align: center;
        margin-bottom: 1.25rem;
    }
    .thought-cloud {
        position: relative;
        height: 260px;
        margin-bottom: 1rem;
        overflow: hidden;
    }
    .thought {
        position: absolute;
        white-space: nowrap;
        font-size: 1.15rem;
        opacity: 0.45;
        transform: translate(-50%, -50%);
    }
    .pill {
        display: inline-block;
        padding: 0.2rem 0.65rem;
        border-radius: 999px;
        font-size: 0.8rem;
        font-weight: 600;
        margin-right: 0.4rem;
        border: 1px solid rgba(96, 165, 250, 0.25);
        background: rgba(96, 165, 250, 0.10);
    }
    .pill-muted {
        border-color: rgba(161, 161, 170, 0.25);
        background: rgba(161, 161, 170, 0.08);
        opacity: 0.7;
    }
    .glass-card {
        border: 1px solid rgba(96, 165, 250, 0.30);
        padding: 0.9rem 1rem;
        border-radius: 1rem;
        margin: 0.55rem 0 0.2rem 0;
    }
    .glass-card.postponed {
        border-color: rgba(63, 63, 70, 0.9);
        opacity: 0.6;
    }
    .muted { opacity: 0.6; font-size: 0.9rem; }
    </style>""",
    unsafe_allow_html=True,
)

ENERGY_LABELS = {
    Energy.LOW: "Low",
    Energy.MEDIUM: "Medium",
    Energy.HIGH: "High",
}


@st.cache_resource
def get_storage() -> PlanStorage:
    """Build the plan storage for the configured backend (cached)."""
    return PlanStorage(build_store(get_settings()))


def get_machine() -> DayStateMachine:
    """One state machine per browser session."""
    if "machine" not in st.session_state:
        st.session_state.machine = DayStateMachine.resume(get_storage())
    return st.session_state.machine


def render_header(title: str, subtitle: Optional[str] = None):
    st.markdown(f'<div class="main-header">{html.escape(title)}</div>', unsafe_allow_html=True)
    if subtitle:
        st.markdown(f'<div class="subheader">{html.escape(subtitle)}</div>', unsafe_allow_html=True)


def render_thought_cloud(machine: DayStateMachine):
    spans = []
    for item in machine.items:
        if item.pos is None:
            continue
        spans.append(
            '<span class="thought" style="top: {top}%; left: {left}%; '
            'transform: translate(-50%, -50%) rotate({rot}deg);">{text}</span>'.format(
                top=item.pos.top,
                left=item.pos.left,
                rot=item.pos.rotation,
                text=html.escape(item.text),
            )
        )
    st.markdown(f'<div class="thought-cloud">{"".join(spans)}</div>', unsafe_allow_html=True)


def page_dump(machine: DayStateMachine):
    render_thought_cloud(machine)
    render_header("What’s on your mind?")

    with st.form("dump", clear_on_submit=True, border=False):
        text = st.text_input("Thought", placeholder="Type here...", label_visibility="collapsed")
        if st.form_submit_button("Add") and text.strip():
            machine.add_item(text)
            st.rerun()

    recents = machine.recents()
    if recents:
        st.caption("YESTERDAY YOU HELD:")
        cols = st.columns(min(len(recents), 3))
        for idx, text in enumerate(recents):
            with cols[idx % len(cols)]:
                if st.button(text, key=f"recent-{idx}"):
                    machine.add_recent(text)
                    st.rerun()

    if machine.items:
        st.divider()
        if st.button("Done", type="primary"):
            machine.finish_dump()
            st.rerun()


def page_select(machine: DayStateMachine, threshold: int):
    render_header("Which are glass balls?", "Click to select. Unselected items will bounce.")

    cols = st.columns(3)
    for idx, item in enumerate(machine.items):
        with cols[idx % 3]:
            label = f"● {item.text}" if item.is_glass else item.text
            if st.button(label, key=f"type-{item.id}", type="primary" if item.is_glass else "secondary"):
                machine.toggle_type(item.id)
                st.rerun()

    st.divider()
    if too_much_glass(machine.items, threshold):
        st.warning("That's a lot of glass. Consider dropping some.")
    if st.button("Continue", type="primary"):
        machine.finish_selection()
        st.rerun()


def page_explain(machine: DayStateMachine):
    render_header("Glass Balls", "These must not be dropped. If they fall, they shatter.")
    st.markdown("<div style='text-align:center; opacity:0.3;'>│</div>", unsafe_allow_html=True)
    render_header("Rubber Balls", "These can bounce. You can pick them up later.")

    if st.button("Tap anywhere to continue"):
        machine.dismiss_explanation()
        st.rerun()


def _on_action_change(machine: DayStateMachine, item_id: str, key: str):
    machine.set_action(item_id, st.session_state.get(key, ""))


def render_glass_zone(machine: DayStateMachine):
    st.markdown('<span class="pill">2. Glass Zone</span> <span class="muted">Move to prioritize</span>', unsafe_allow_html=True)

    slots = glass_slots(machine.items, machine.energy)
    if not slots:
        st.info("No glass balls today.")
    for slot in slots:
        item = slot.item
        css = "glass-card" if slot.active else "glass-card postponed"
        badge = "" if slot.active else ' <span class="pill pill-muted">Postponed</span>'
        st.markdown(f'<div class="{css}"><b>{html.escape(item.text)}</b>{badge}</div>', unsafe_allow_html=True)

        left, up, down = st.columns([6, 1, 1])
        with left:
            if slot.active:
                key = f"action-{item.id}"
                st.text_input(
                    "Smallest action to keep safe:",
                    value=item.action or "",
                    key=key,
                    placeholder="e.g. Send one email",
                    on_change=_on_action_change,
                    args=(machine, item.id, key),
                )
            else:
                st.caption("To enable this item, move it higher in the list.")
        with up:
            if st.button("↑", key=f"up-{item.id}", disabled=slot.rank == 0):
                machine.move_glass(item.id, -1)
                st.rerun()
        with down:
            if st.button("↓", key=f"down-{item.id}", disabled=slot.rank == len(slots) - 1):
                machine.move_glass(item.id, 1)
                st.rerun()


def page_balance(machine: DayStateMachine):
    st.caption("1. ENERGY CHECK")
    render_header("How much do you realistically have today?")

    cols = st.columns(len(ENERGY_LABELS))
    for col, (energy, label) in zip(cols, ENERGY_LABELS.items()):
        with col:
            chosen = machine.energy is energy
            if st.button(label, key=f"energy-{energy.value}", type="primary" if chosen else "secondary"):
                machine.select_energy(energy)
                st.rerun()

    if machine.energy is not None:
        render_glass_zone(machine)

    st.divider()
    rubber = machine.rubber
    with st.expander(f"The Rubber Container ({len(rubber)})", expanded=False):
        for item in rubber:
            st.markdown(f"- {html.escape(item.text)}")

    if st.button("Lock Today", type="primary", disabled=machine.energy is None):
        machine.lock()
        st.rerun()


def _on_handled_change(machine: DayStateMachine, item_id: str):
    machine.toggle_handled(item_id)


def page_locked(machine: DayStateMachine):
    render_header("Today is Locked", "Focus only on what matters.")

    checklist = locked_checklist(machine.items)
    for item in checklist:
        st.checkbox(
            item.action,
            value=item.is_handled,
            key=f"handled-{item.id}",
            help=item.text,
            on_change=_on_handled_change,
            args=(machine, item.id),
        )
        st.caption(item.text)

    if not checklist:
        st.markdown("<p class='muted' style='text-align:center;'><i>No glass balls actively carried today. Rest well.</i></p>", unsafe_allow_html=True)
    else:
        st.caption(f"{handled_count(machine.items)} of {len(checklist)} handled")

    st.divider()
    if not st.session_state.get("confirm_reset"):
        if st.button("Reset Day"):
            st.session_state.confirm_reset = True
            st.rerun()
    else:
        st.warning("Are you sure? This will clear today's plan.")
        yes, no = st.columns(2)
        with yes:
            if st.button("Yes, reset", type="primary"):
                st.session_state.confirm_reset = False
                machine.reset(confirm=True)
                st.rerun()
        with no:
            if st.button("Cancel"):
                st.session_state.confirm_reset = False
                machine.reset(confirm=False)
                st.rerun()

    st.markdown("<p class='muted' style='text-align:center;'>Come back tomorrow.</p>", unsafe_allow_html=True)


def main():
    """Main Streamlit application."""

    settings = get_settings()
    setup_logging(settings.effective_log_level)

    machine = get_machine()

    with st.sidebar:
        with st.expander("Diagnostics", expanded=False):
            st.write({"step": machine.step.value, **settings.describe()})

    if machine.step is Step.DUMP:
        page_dump(machine)
    elif machine.step is Step.SELECT:
        page_select(machine, settings.glass_warning_threshold)
    elif machine.step is Step.EXPLAIN:
        page_explain(machine)
    elif machine.step is Step.BALANCE:
        page_balance(machine)
    else:
        page_locked(machine)


def _running_in_streamlit() -> bool:
    """Best-effort detection for whether we're running under `streamlit run`."""

    try:
        from streamlit.runtime.scriptrunner import get_script_run_ctx

        return get_script_run_ctx() is not None
    except Exception:
        return False


if __name__ == "__main__":
    if not _running_in_streamlit():
        import sys

        print(
            "This is a Streamlit app. Run it with:\n\n  streamlit run glass_rubber_app.py\n",
            file=sys.stderr,
        )
        raise SystemExit(1)

    main()
