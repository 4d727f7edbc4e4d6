from __future__ import annotations

import streamlit as st

from config import THEME


APP_TITLE = "Athletic Meet Admin"


def apply_theme() -> None:
    st.set_page_config(
        page_title=APP_TITLE,
        page_icon="🏅",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    # Centralized theme tokens (config.py) -> CSS variables
    radius = int(THEME["radius_px"])
    css = """
<style>
@import url('https://fonts.googleapis.com/css2?family=DM+Sans:wght@400;500;600;700&display=swap');

:root{
  --accent: __ACCENT__;
  --accent-soft: __ACCENT_SOFT__;
  --navy-900: __NAVY_900__;
  --navy-800: __NAVY_800__;

  --bg-primary: __BG_PRIMARY__;
  --bg-secondary: __BG_SECONDARY__;
  --card-bg: __CARD_BG__;
  --card-border: __CARD_BORDER__;

  --text-primary: __TEXT_PRIMARY__;
  --text-secondary: __TEXT_SECONDARY__;
  --shadow: __SHADOW__;
  --radius: __RADIUS_PX__px;

  --gold: __GOLD__;
  --silver: __SILVER__;
  --bronze: __BRONZE__;
}

#MainMenu { visibility: hidden; }
footer { visibility: hidden; }

html, body, [data-testid="stAppViewContainer"]{
  background: var(--bg-primary) !important;
  font-family: "DM Sans", system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif !important;
  color: var(--text-primary) !important;
}

[data-testid="stSidebar"]{
  background: var(--bg-secondary) !important;
  border-right: 1px solid var(--card-border) !important;
}

/* Sidebar nav as stacked buttons */
[data-testid="stSidebar"] div[role="radiogroup"] > label{
  background: var(--card-bg) !important;
  border: 1px solid var(--card-border) !important;
  border-radius: 12px !important;
  padding: 8px 12px !important;
  margin: 0 0 8px 0 !important;
}

/* Header */
.meet-header{
  display:flex;
  justify-content: space-between;
  align-items:center;
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 10px 14px;
  margin-bottom: 14px;
}
.meet-header-left{
  display:flex;
  align-items:center;
  gap: 10px;
}
.meet-logo{
  height: 40px;
  width: auto;
}
.meet-title{
  font-size: 20px;
  font-weight: 700;
  color: var(--navy-900);
  line-height: 1.1;
}
.meet-subtitle{
  font-size: 14px;
  font-weight: 500;
  color: var(--text-secondary);
}
.pill{
  display:inline-flex;
  align-items:center;
  gap:6px;
  background: white;
  border: 1px solid var(--card-border);
  border-radius: 999px;
  padding: 6px 10px;
  font-size: 13px;
  font-weight: 600;
  color: var(--navy-800);
}
.pill .dot{
  width:8px;
  height:8px;
  border-radius:999px;
  background: var(--accent);
  display:inline-block;
}

/* Metric cards */
.metric-card{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 12px 14px;
}
.metric-label{
  font-size: 14px;
  font-weight: 500;
  color: var(--text-secondary);
  margin-bottom: 6px;
}
.metric-value{
  font-size: 26px;
  font-weight: 700;
  color: var(--text-primary);
  line-height: 1.2;
}
.metric-delta{
  margin-top: 6px;
  font-size: 13px;
  font-weight: 600;
  color: var(--text-secondary);
}

/* Medal badges (standings, verification) */
.medal{
  display:inline-block;
  border-radius: 999px;
  padding: 2px 10px;
  font-size: 12px;
  font-weight: 700;
  color: white;
}
.medal-gold{ background: var(--gold); }
.medal-silver{ background: var(--silver); }
.medal-bronze{ background: var(--bronze); }
.medal-participation{ background: var(--navy-800); }

/* Buttons */
div.stButton > button, div.stDownloadButton > button, div.stFormSubmitButton > button{
  border-radius: 10px !important;
  font-weight: 600 !important;
}

details{
  background: var(--bg-secondary);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  padding: 4px 8px;
}

button[data-baseweb="tab"]{
  border-radius: 999px !important;
  font-weight: 600 !important;
}
button[data-baseweb="tab"][aria-selected="true"]{
  background: var(--accent) !important;
  color: white !important;
}

.subtle{ color: var(--text-secondary); font-size: 14px; }

div[data-testid="stPlotlyChart"]{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 8px 10px;
}

/* Page intro + callouts */
.tab-intro{
  background: var(--bg-secondary);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  box-shadow: var(--shadow);
  padding: 12px 14px;
  margin: 0 0 14px 0;
}
.tab-intro-audience{
  font-size: 13px;
  font-weight: 600;
  color: var(--navy-800);
  margin-bottom: 4px;
}
.tab-intro-purpose{
  font-size: 17px;
  font-weight: 700;
  color: var(--navy-900);
  margin-bottom: 4px;
}
.tab-intro-context{
  font-size: 14px;
  color: var(--text-secondary);
  line-height: 1.5;
}
.callout{
  background: #FFFFFF;
  border: 1px solid var(--card-border);
  border-left: 4px solid var(--navy-800);
  border-radius: var(--radius);
  padding: 10px 14px;
  margin: 10px 0;
}
.callout-warn{ border-left-color: var(--accent); }
.callout-title{
  font-size: 14px;
  font-weight: 700;
  color: var(--navy-900);
  margin-bottom: 4px;
}
.callout-body{
  font-size: 14px;
  color: var(--text-secondary);
  line-height: 1.5;
}
</style>
"""

    tokens = {
        "__ACCENT__": str(THEME["accent_primary"]),
        "__ACCENT_SOFT__": str(THEME["accent_secondary"]),
        "__NAVY_900__": str(THEME["navy_900"]),
        "__NAVY_800__": str(THEME["navy_800"]),
        "__BG_PRIMARY__": str(THEME["bg_primary"]),
        "__BG_SECONDARY__": str(THEME["bg_secondary"]),
        "__CARD_BG__": str(THEME["bg_card"]),
        "__CARD_BORDER__": str(THEME["border_color"]),
        "__TEXT_PRIMARY__": str(THEME["text_primary"]),
        "__TEXT_SECONDARY__": str(THEME["text_secondary"]),
        "__SHADOW__": str(THEME["shadow"]),
        "__RADIUS_PX__": str(radius),
        "__GOLD__": str(THEME["gold"]),
        "__SILVER__": str(THEME["silver"]),
        "__BRONZE__": str(THEME["bronze"]),
    }
    for k, v in tokens.items():
        css = css.replace(k, v)

    st.markdown(css, unsafe_allow_html=True)
