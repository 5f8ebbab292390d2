"""
Streamlit web interface for the fixed-point options engine.

Interactive UI with tabs for:
- Option pricing calculator
- Volatility sensitivity
- Implied volatility solver
- Normal distribution table
"""

import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go
from fixed_options.core.black_scholes import BlackScholes
from fixed_options.core.fixed_point import from_fixed, to_fixed
from fixed_options.diagnostics.arbitrage import OptionData, check_strike_monotonicity, check_target_price
from fixed_options.solvers.implied_vol import VolatilitySolver
from fixed_options.utils.exceptions import EngineError, NonConvergence
from fixed_options.utils.logging_config import configure_logging
from fixed_options.utils.types import ConvergenceConfig

configure_logging()

st.set_page_config(page_title="Fixed-Point Options Engine", layout="wide")

st.title("Fixed-Point Options Engine")
st.markdown("Deterministic Black-Scholes pricing in 18-decimal integer arithmetic")


@st.cache_resource
def get_pricer() -> BlackScholes:
    return BlackScholes()


bs = get_pricer()

# Sidebar parameters
st.sidebar.header("Option Parameters")
S = st.sidebar.number_input("Spot Price (S)", value=10500.0, min_value=0.01)
K = st.sidebar.number_input("Strike Price (K)", value=11000.0, min_value=0.01)
days = st.sidebar.slider("Time to Expiry (days)", 1, 730, 14)
r = st.sidebar.slider("Risk-Free Rate (%)", -5.0, 20.0, 0.0) / 100
sigma = st.sidebar.slider("Volatility (%)", 1.0, 400.0, 120.0) / 100
option_type = st.sidebar.selectbox("Option Type", ["call", "put"])

spot_raw = to_fixed(S)
strike_raw = to_fixed(K)
time_raw = to_fixed(days) // 365
rate_raw = to_fixed(r)
sigma_raw = to_fixed(sigma)

# Main tabs
tab1, tab2, tab3, tab4 = st.tabs(["Pricing", "Volatility Sensitivity", "Implied Volatility", "Normal Table"])

with tab1:
    st.header("Option Valuation")

    col1, col2 = st.columns(2)

    with col1:
        price_raw = bs.get_price(option_type, spot_raw, strike_raw, sigma_raw, rate_raw, time_raw)
        st.metric(label=f"{option_type.capitalize()} Price", value=f"${from_fixed(price_raw):.6f}")
        st.caption(f"Raw value: {price_raw}")

    with col2:
        st.subheader("Strike Ladder")
        strikes = np.linspace(K * 0.8, K * 1.2, 9)
        ladder = [
            OptionData(
                strike=to_fixed(float(k)),
                price=bs.get_price(option_type, spot_raw, to_fixed(float(k)), sigma_raw, rate_raw, time_raw),
                option_type=option_type,
            )
            for k in strikes
        ]
        ladder_df = pd.DataFrame({
            "Strike": [f"{from_fixed(o.strike):.2f}" for o in ladder],
            "Price": [f"{from_fixed(o.price):.6f}" for o in ladder],
        })
        st.table(ladder_df)

        check = check_strike_monotonicity(ladder)
        if check.is_valid:
            st.success("Prices are monotone in strike")
        else:
            for violation in check.violations:
                st.warning(violation)

with tab2:
    st.header("Price vs Volatility")

    # Vega is positive, so this curve is what the IV solver inverts
    sigma_range = np.linspace(0.05, 4.0, 60)
    prices = [
        float(from_fixed(bs.get_price(option_type, spot_raw, strike_raw, to_fixed(float(v)), rate_raw, time_raw)))
        for v in sigma_range
    ]

    fig_price = go.Figure()
    fig_price.add_trace(go.Scatter(x=sigma_range, y=prices, name="Price"))
    fig_price.update_layout(title="Option Price vs Volatility", xaxis_title="Volatility", yaxis_title="Price")
    st.plotly_chart(fig_price, use_container_width=True)

with tab3:
    st.header("Implied Volatility Solver")

    market_price = st.number_input("Market Price", value=float(from_fixed(price_raw)), min_value=0.000001)
    guess = st.number_input("Initial Guess", value=1.0, min_value=0.0001)
    range_bps = st.slider("Acceptable Range (bps)", 10, 500, 10)

    if st.button("Solve for Implied Volatility"):
        target_raw = to_fixed(market_price)
        bounds = check_target_price(target_raw, option_type, spot_raw, strike_raw, time_raw, rate_raw)
        for violation in bounds.violations:
            st.warning(violation)
        try:
            solver = VolatilitySolver(bs, ConvergenceConfig(acceptable_range_bps=range_bps))
            result = solver.get_iv(option_type, target_raw, to_fixed(guess), spot_raw, strike_raw, time_raw, rate_raw)
            iv = from_fixed(result.volatility)
            st.success(f"Implied Volatility: {iv:.6f} ({iv * 100:.2f}%)")
            st.info(f"Price at IV: {from_fixed(result.price):.6f} | Iterations: {result.iterations}")
        except NonConvergence as e:
            st.error(f"Solver failed after {e.iterations} iterations: {e}")
        except EngineError as e:
            st.error(f"Error: {e}")

with tab4:
    st.header("Standard Normal CDF Table")

    table = bs.normal_distribution.table
    table_df = pd.DataFrame(
        [(bucket / 100, float(from_fixed(p, table.decimals))) for bucket, p in table],
        columns=["z", "P(Z <= z)"],
    )
    st.caption(f"{len(table)} entries, version {table.version}")

    fig_cdf = go.Figure()
    fig_cdf.add_trace(go.Scatter(x=table_df["z"], y=table_df["P(Z <= z)"], name="CDF", line=dict(color="orange")))
    fig_cdf.update_layout(title="Table Probabilities", xaxis_title="z", yaxis_title="P(Z <= z)")
    st.plotly_chart(fig_cdf, use_container_width=True)
