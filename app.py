"""
Poker Rush Simulator Web App
Streamlit interface for running simulations.
"""

import pandas as pd
import streamlit as st

from poker_rush.simulator import Simulator
from poker_rush.presets import StrategyType, get_preset_info, list_presets

# Page config
st.set_page_config(
    page_title="Poker Rush Simulator",
    page_icon="🃏",
    layout="wide"
)

st.title("🃏 Poker Rush Simulator")
st.markdown("*Monte Carlo simulation of Poker Rush runs*")


@st.cache_resource
def get_simulator():
    return Simulator()


sim = get_simulator()

# Sidebar for settings
st.sidebar.header("Settings")

preset_options = list_presets()
selected_preset = st.sidebar.selectbox(
    "Preset",
    options=preset_options,
    format_func=lambda x: get_preset_info(x)["name"]
)

preset_info = get_preset_info(selected_preset)
st.sidebar.markdown(f"*{preset_info['description']}*")
st.sidebar.markdown(f"**Mode:** {preset_info['mode']}")
st.sidebar.markdown(f"**Bot:** sees {preset_info['visible_cards']} cards, "
                    f"{preset_info['seconds_per_hand']}s per hand")

strategy_choice = st.sidebar.selectbox(
    "Strategy",
    options=[s.value for s in StrategyType],
    index=[s.value for s in StrategyType].index(preset_info["strategy"]),
)
strategy_override = StrategyType(strategy_choice)

seed_text = st.sidebar.text_input("Seed (optional)", value="")
seed = int(seed_text) if seed_text.strip().isdigit() else None

run_mode = st.sidebar.radio("Run", ["Single Run", "Batch Runs"])
if run_mode == "Batch Runs":
    num_runs = st.sidebar.slider("Number of Runs", min_value=10, max_value=500, value=100, step=10)

st.divider()

if st.button("🎲 Run Simulation", type="primary", use_container_width=True):

    if run_mode == "Single Run":
        with st.spinner("Running simulation..."):
            result = sim.run(selected_preset, seed=seed, strategy_override=strategy_override)

        if result.victory:
            st.success("🏆 VICTORY!")
        else:
            st.error("💀 GAME OVER")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Final Score", f"{result.final_score:,}")
        with col2:
            st.metric("Hands Played", result.hands_played)
        with col3:
            st.metric("Best Hand", result.best_hand or "-")
        with col4:
            if preset_info["is_ssc"]:
                st.metric("Levels Cleared", result.levels_cleared)
            else:
                st.metric("Mode", result.mode)

        if result.level_history:
            st.subheader("📜 Level Timeline")
            for level in result.level_history:
                icon = "✅" if level.success else "❌"
                stars = "⭐" * level.stars
                margin = f"{level.margin_pct:+.0f}%"
                with st.expander(f"{icon} Level {level.level} ({level.phase}) "
                                 f"{level.score:,} / {level.goal:,} {margin} {stars}"):
                    st.write(f"**Hands Used:** {level.hands_used}")
                    st.write(f"**Best Hand:** {level.best_hand or '-'}")

            col1, col2 = st.columns(2)
            with col1:
                st.metric("Bonus Rounds", result.bonus_rounds)
            with col2:
                st.metric("Power-ups Used", result.power_ups_used)

        if result.hand_counts:
            st.subheader("Hands Played")
            hands = pd.DataFrame({
                "Hand": list(result.hand_counts.keys()),
                "Count": list(result.hand_counts.values()),
            }).sort_values("Count", ascending=False)
            st.bar_chart(hands.set_index("Hand"))

    else:
        progress_bar = st.progress(0)
        status_text = st.empty()

        def on_progress(done, total):
            progress_bar.progress(done / total)
            status_text.text(f"Run {done}/{total}...")

        result = sim.run_batch(selected_preset, runs=num_runs, seed=seed,
                               strategy_override=strategy_override, on_progress=on_progress)
        progress_bar.empty()
        status_text.empty()

        st.subheader(f"Results ({num_runs} runs)")

        if result.win_rate > 50:
            st.success(f"🏆 Win Rate: {result.victories}/{result.runs} ({result.win_rate:.1f}%)")
        elif result.win_rate > 0:
            st.warning(f"Win Rate: {result.victories}/{result.runs} ({result.win_rate:.1f}%)")
        else:
            st.error(f"Win Rate: {result.victories}/{result.runs} ({result.win_rate:.1f}%)")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Avg Score", f"{result.avg_score:,.0f}")
        with col2:
            st.metric("Max Score", f"{result.max_score:,}")
        with col3:
            st.metric("Avg Hands", f"{result.avg_hands:.1f}")
        with col4:
            st.metric("Max Level", result.max_level)

        st.subheader("Score Distribution")
        scores = pd.DataFrame({"Score": result.scores})
        bins = pd.cut(scores["Score"], bins=min(20, max(1, scores["Score"].nunique())))
        histogram = bins.value_counts().sort_index()
        histogram.index = histogram.index.astype(str)
        st.bar_chart(histogram)

        if preset_info["is_ssc"]:
            st.subheader("Level Reached")
            chart_data = pd.DataFrame({
                "Level": list(result.level_distribution.keys()),
                "Runs": list(result.level_distribution.values())
            }).sort_values("Level")
            st.bar_chart(chart_data.set_index("Level"))

st.divider()
st.markdown("*Built with the Poker Rush engine*")
