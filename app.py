import streamlit as st

# Page configuration - MUST be the first Streamlit command
st.set_page_config(
    page_title="Trans.NRW Map",
    page_icon="📍",
    layout="wide",
    initial_sidebar_state="expanded"
)

import io
import time

import streamlit.components.v1 as components

from city_state import CityDataStore
from config import CONTACT_EMAIL, DEFAULT_CITY, SITE_URL
from logging_setup import setup_logging
from map_view import (
    DEFAULT_LANGUAGE,
    LANGUAGES,
    build_city_map,
    city_display_name,
    locations_table,
    t,
)

setup_logging()

# Initialize activity log in session state
if 'activity_log' not in st.session_state:
    st.session_state.activity_log = []

def add_log(message, level="info"):
    """Add a log message with timestamp"""
    timestamp = time.strftime("%H:%M:%S")
    st.session_state.activity_log.append({"time": timestamp, "level": level, "msg": message})
    # Keep only last 50 logs
    if len(st.session_state.activity_log) > 50:
        st.session_state.activity_log = st.session_state.activity_log[-50:]

# ============================================
# CUSTOM CSS - TRANS.NRW BRANDING
# ============================================
st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;600;700&display=swap');

    /* Trans flag palette */
    :root {
        --blue: #5bcefa;
        --pink: #f5a9b8;
        --white: #ffffff;
        --grey: #383838;
        --grey-light: #656565;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}

    .main .block-container {
        padding-top: 0.5rem;
        padding-bottom: 0.3rem;
        max-width: 100%;
    }

    /* Header bar with logo text and links */
    .header-bar {
        background: linear-gradient(90deg, var(--blue), var(--pink), var(--white), var(--pink), var(--blue));
        padding: 0.6rem 1rem;
        border-radius: 3px;
        margin-bottom: 0.4rem;
        display: flex;
        align-items: center;
        justify-content: space-between;
    }
    .header-bar .logo {
        color: var(--grey);
        font-family: 'Inter', sans-serif;
        font-size: 1.2rem;
        font-weight: 700;
        text-decoration: none;
    }
    .header-bar .links a {
        color: var(--grey);
        font-size: 0.8rem;
        text-decoration: none;
    }
    .header-bar .separator {
        margin: 0 0.4rem;
        color: var(--grey-light);
    }
    .tagline {
        color: var(--grey-light);
        font-size: 0.8rem;
        margin-bottom: 0.4rem;
    }

    .map-container {
        border-radius: 4px;
        overflow: hidden;
        box-shadow: 0 2px 6px rgba(0,0,0,0.08);
        margin-top: 0.2rem;
    }

    .site-footer {
        text-align: center;
        font-size: 0.75rem;
        color: var(--grey-light);
        margin-top: 0.6rem;
    }
    .site-footer a {
        color: var(--grey-light);
    }
</style>
""", unsafe_allow_html=True)

# ============================================
# SESSION STATE
# ============================================
if 'language' not in st.session_state:
    st.session_state.language = DEFAULT_LANGUAGE

if 'city_store' not in st.session_state:
    store = CityDataStore(initial_city=DEFAULT_CITY)
    with st.spinner(t("loading", st.session_state.language)):
        store.initialize()
    st.session_state.city_store = store
    add_log(f"📂 {store.total_loaded_cities}/{store.total_available_cities} Städte geladen", "info")
    for city_name, message in store.loading_errors.items():
        add_log(f"✗ {city_name}: {message[:80]}", "error")

store = st.session_state.city_store

def on_city_change():
    """Switch to the selected city; on failure put the selector back on the shown city"""
    selected_city = st.session_state.city_select
    store.switch_city(selected_city)
    if store.has_error:
        add_log(f"✗ {selected_city}: {store.error[:80]}", "error")
        st.session_state.city_select = store.current_city
    else:
        add_log(f"✓ {selected_city}", "success")

if store.available_cities and st.session_state.get('city_select') not in store.available_cities:
    st.session_state.city_select = (
        store.current_city if store.current_city in store.available_cities else store.available_cities[0]
    )

# ============================================
# SIDEBAR
# ============================================
with st.sidebar:
    language = st.radio(
        t("language", st.session_state.language),
        options=list(LANGUAGES.keys()),
        format_func=lambda code: f"{LANGUAGES[code]['flag']} {LANGUAGES[code]['name']}",
        horizontal=True,
        key="language",
    )

    st.markdown("---")

    if store.available_cities:
        st.selectbox(
            t("city", language),
            options=store.available_cities,
            format_func=lambda name: city_display_name(store.all_city_data[name], language)
            if name in store.all_city_data else name,
            key="city_select",
            on_change=on_city_change,
        )

    c1, c2 = st.columns(2)
    with c1:
        if st.button(t("refresh_city", language), use_container_width=True):
            with st.spinner(t("loading", language)):
                store.refresh_current_city()
            if store.has_error:
                add_log(f"✗ {store.current_city}: {store.error[:80]}", "error")
            else:
                add_log(f"🔄 {store.current_city}", "success")
    with c2:
        if st.button(t("refresh_all", language), use_container_width=True):
            with st.spinner(t("loading", language)):
                store.refresh_all_data()
            add_log(f"🔄 {store.total_loaded_cities}/{store.total_available_cities}", "info")

    st.markdown("---")

    for city_name in store.available_cities:
        if not store.is_city_available(city_name):
            st.warning(f"{t('load_failed', language).format(city=city_name)}: {store.loading_errors[city_name]}")

# ============================================
# HEADER (logo + links)
# ============================================
st.markdown(
    f'<div class="header-bar">'
    f'<a class="logo" href="{SITE_URL}" target="_blank" rel="noopener noreferrer" '
    f'aria-label="Visit Trans.NRW website">🏳️‍⚧️ Trans.NRW</a>'
    f'<div class="links">'
    f'<a href="{SITE_URL}" target="_blank" rel="noopener noreferrer">https://Trans.NRW</a>'
    f'<span class="separator">|</span>'
    f'<a href="mailto:{CONTACT_EMAIL}" aria-label="Contact Admin at Trans.NRW">{CONTACT_EMAIL}</a>'
    f'</div></div>',
    unsafe_allow_html=True
)
st.markdown(f'<div class="tagline">{t("tagline", language)}</div>', unsafe_allow_html=True)

if store.has_error:
    st.error(f"❌ {store.error}")

# ============================================
# MAP
# ============================================
if store.has_data:
    m = build_city_map(store.city_data, language)
    map_html = m._repr_html_()
    st.markdown('<div class="map-container">', unsafe_allow_html=True)
    components.html(map_html, height=600, scrolling=False)
    st.markdown('</div>', unsafe_allow_html=True)

    # Read-only list of locations
    with st.expander(f"📋 {t('locations', language)}", expanded=False):
        df = locations_table(store.city_data, language)
        st.dataframe(df, use_container_width=True, hide_index=True)

        csv_buffer = io.StringIO()
        df.to_csv(csv_buffer, index=False, encoding='utf-8')
        st.download_button(
            label=f"📥 {t('download', language)}",
            data=csv_buffer.getvalue(),
            file_name=f"{store.current_city}_locations.csv",
            mime="text/csv",
            use_container_width=True
        )
else:
    st.info(t("no_data", language))

with st.expander(f"📝 {t('activity', language)}", expanded=False):
    for entry in reversed(st.session_state.activity_log):
        st.caption(f"{entry['time']} · {entry['msg']}")

# ============================================
# FOOTER
# ============================================
st.markdown(
    f'<div class="site-footer">'
    f'<a href="{SITE_URL}" target="_blank" rel="noopener noreferrer">Trans.NRW</a> · '
    f'Kartendaten &copy; <a href="http://osm.org/copyright" target="_blank">OpenStreetMap</a> contributors'
    f'</div>',
    unsafe_allow_html=True
)
