"""
Map and popup rendering for city data.

Everything here turns a validated city document into folium objects, HTML
snippets or a pandas table. Nothing here fetches data.
"""

import html
from urllib.parse import urlsplit

import folium
import pandas as pd

from config import DEFAULT_CENTER, DEFAULT_ZOOM, OSM_ATTRIBUTION, OSM_TILES

DEFAULT_LANGUAGE = "de"

LANGUAGES = {
    "de": {"flag": "🇩🇪", "name": "Deutsch"},
    "en": {"flag": "🇬🇧", "name": "English"},
}

# UI strings - two hardcoded languages, no i18n framework
TEXTS = {
    "de": {
        "tagline": "Finde und vernetze dich mit anderen trans Personen in NRW - dein Wegweiser zu trans Treffpunkten",
        "city": "Stadt",
        "language": "Sprache",
        "refresh_city": "Stadt neu laden",
        "refresh_all": "Alle Daten neu laden",
        "loading": "Lade Daten...",
        "no_data": "Keine Daten für diese Stadt verfügbar.",
        "load_failed": "Daten für {city} konnten nicht geladen werden",
        "locations": "Orte",
        "download": "Orte herunterladen (CSV)",
        "activity": "Protokoll",
        "category": "Kategorie",
        "tags": "Schlagworte",
        "phone": "Telefon",
        "email": "E-Mail",
        "website": "Webseite",
        "wheelchairAccessible": "Rollstuhlgerecht",
        "genderNeutralBathrooms": "Geschlechtsneutrale Toiletten",
        "quietSpace": "Ruheraum",
        "yes": "ja",
        "no": "nein",
        "unknown": "unbekannt",
        "name": "Name",
        "description": "Beschreibung",
        "lat": "Breite",
        "lng": "Länge",
    },
    "en": {
        "tagline": "Find and connect with other transpeople in NRW - this is your guide to trans life hotspots",
        "city": "City",
        "language": "Language",
        "refresh_city": "Reload city",
        "refresh_all": "Reload all data",
        "loading": "Loading data...",
        "no_data": "No data available for this city.",
        "load_failed": "Could not load data for {city}",
        "locations": "Locations",
        "download": "Download locations (CSV)",
        "activity": "Activity log",
        "category": "Category",
        "tags": "Tags",
        "phone": "Phone",
        "email": "Email",
        "website": "Website",
        "wheelchairAccessible": "Wheelchair accessible",
        "genderNeutralBathrooms": "Gender-neutral bathrooms",
        "quietSpace": "Quiet space",
        "yes": "yes",
        "no": "no",
        "unknown": "unknown",
        "name": "Name",
        "description": "Description",
        "lat": "Lat",
        "lng": "Lng",
    },
}

PIN_COLOR = "#9b59b6"


def t(key, language):
    """UI string for key in language (German if the language is unknown)"""
    return TEXTS.get(language, TEXTS[DEFAULT_LANGUAGE]).get(key, key)


def localized_text(mapping, language):
    """Pick a text for language from a {lang: text} mapping, falling back to any other language"""
    if not isinstance(mapping, dict):
        return mapping if isinstance(mapping, str) else ""

    def usable(value):
        return isinstance(value, str) and value.strip()

    if usable(mapping.get(language)):
        return mapping[language]
    for lang in LANGUAGES:
        if usable(mapping.get(lang)):
            return mapping[lang]
    for value in mapping.values():
        if usable(value):
            return value
    return ""


def city_display_name(city_data, language):
    metadata = city_data.get("metadata") or {}
    name = localized_text(metadata.get("cityNameLocalized"), language)
    return name or metadata.get("cityName") or city_data.get("label", "")


def get_map_view(city_data):
    """Return (lat, lng, zoom) for the initial map view"""
    view_root = (city_data or {}).get("viewRoot")
    if not view_root:
        return DEFAULT_CENTER[0], DEFAULT_CENTER[1], DEFAULT_ZOOM
    return view_root["lat"], view_root["lng"], view_root.get("zoom", DEFAULT_ZOOM)


def _flag_text(value, language):
    if value is True:
        return t("yes", language)
    if value is False:
        return t("no", language)
    return t("unknown", language)


def build_popup_html(location, language):
    """Popup body for one location: name, description and whatever metadata it carries"""
    name = html.escape(location.get("name", ""))
    description = html.escape(localized_text(location.get("description"), language))

    popup = f"""
    <div style="font-family: Inter, sans-serif; min-width: 220px;">
        <h3 style="font-size: 14px; margin: 0 0 6px 0;">{name}</h3>
        <div style="font-size: 12px; color: #383838;">{description}</div>
    """

    metadata = location.get("metadata") or {}
    if metadata.get("category"):
        category = html.escape(metadata["category"])
        popup += (
            f'<div style="margin-top:6px;"><span style="background:{PIN_COLOR};color:white;'
            f'padding:2px 6px;border-radius:3px;font-size:10px;">{category}</span></div>'
        )

    tags = metadata.get("tags") or []
    if tags:
        popup += f'<div style="font-size:10px;color:#666;margin-top:4px;">{t("tags", language)}: '
        popup += ", ".join(html.escape(str(tag)) for tag in tags)
        popup += "</div>"

    contact = metadata.get("contact") or {}
    lines = []
    if contact.get("phone"):
        phone = html.escape(contact["phone"])
        lines.append(f'{t("phone", language)}: <a href="tel:{phone}">{phone}</a>')
    if contact.get("email"):
        email = html.escape(contact["email"])
        lines.append(f'{t("email", language)}: <a href="mailto:{email}">{email}</a>')
    if contact.get("website"):
        website = html.escape(contact["website"])
        # Only web links become clickable
        if urlsplit(contact["website"].strip()).scheme.lower() in ("http", "https"):
            lines.append(
                f'{t("website", language)}: <a href="{website}" target="_blank" rel="noopener noreferrer">{website}</a>'
            )
        else:
            lines.append(f'{t("website", language)}: {website}')
    if lines:
        popup += '<div style="font-size:11px;margin-top:6px;">' + "<br>".join(lines) + "</div>"

    accessibility = metadata.get("accessibility") or {}
    flags = [
        f"{t(flag, language)}: {_flag_text(accessibility[flag], language)}"
        for flag in ("wheelchairAccessible", "genderNeutralBathrooms", "quietSpace")
        if flag in accessibility
    ]
    if flags:
        popup += '<div style="font-size:10px;color:#666;margin-top:6px;">' + "<br>".join(flags) + "</div>"

    popup += "</div>"
    return popup


def _pin_icon(color=PIN_COLOR):
    pin_html = f'''
    <div style="position:relative;">
        <svg width="25" height="41" viewBox="0 0 25 41" xmlns="http://www.w3.org/2000/svg">
            <path fill="{color}" stroke="#333" stroke-width="1" d="M12.5 0C5.6 0 0 5.6 0 12.5c0 2.4.7 4.7 1.9 6.6L12.5 41l10.6-21.9c1.2-1.9 1.9-4.2 1.9-6.6C25 5.6 19.4 0 12.5 0z"/>
            <circle fill="white" cx="12.5" cy="12.5" r="5"/>
        </svg>
    </div>
    '''
    return folium.DivIcon(
        html=pin_html,
        icon_size=(25, 41),
        icon_anchor=(12, 41),
        popup_anchor=(0, -35)
    )


def build_city_map(city_data, language=DEFAULT_LANGUAGE):
    """Create the folium map for a city with one marker per location"""
    lat, lng, zoom = get_map_view(city_data)

    m = folium.Map(location=[lat, lng], zoom_start=zoom, tiles=None)

    folium.TileLayer(
        tiles=OSM_TILES,
        attr=OSM_ATTRIBUTION,
        name='OpenStreetMap',
        max_zoom=19
    ).add_to(m)

    if not city_data:
        return m

    markers_layer = folium.FeatureGroup(name=t("locations", language), show=True)
    for location in city_data.get("locations", []):
        coords = location["location"]
        folium.Marker(
            location=[coords["lat"], coords["lng"]],
            popup=folium.Popup(build_popup_html(location, language), max_width=300),
            tooltip=location["name"],
            icon=_pin_icon()
        ).add_to(markers_layer)
    markers_layer.add_to(m)

    return m


def locations_table(city_data, language=DEFAULT_LANGUAGE):
    """Flat table of a city's locations for the list view and CSV export"""
    columns = [t(key, language) for key in ("name", "category", "description", "lat", "lng")]
    rows = []
    for location in (city_data or {}).get("locations", []):
        metadata = location.get("metadata") or {}
        rows.append([
            location.get("name", ""),
            metadata.get("category") or "",
            localized_text(location.get("description"), language),
            location["location"]["lat"],
            location["location"]["lng"],
        ])
    return pd.DataFrame(rows, columns=columns)
