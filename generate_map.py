"""
Generate static map HTML files, one per city and language.
Run this script locally whenever the city data changes.

Usage: python generate_map.py [city ...]
"""

import os
import sys

from config import SITE_OUTPUT_DIR
from data_loader import get_available_cities, load_all_city_data
from logging_setup import setup_logging
from map_view import LANGUAGES, build_city_map


def generate_maps(cities=None, output_dir=None):
    """Write <city>_<lang>.html for every city that loads; return the written paths"""
    output_dir = output_dir or SITE_OUTPUT_DIR
    print("Loading data...")
    result = load_all_city_data(cities)
    print(f"Loaded {result['successful_loads']} of {result['total_cities']} cities")

    for city_name, message in result["errors"].items():
        print(f"Skipping {city_name}: {message}")

    os.makedirs(output_dir, exist_ok=True)

    written = []
    for city_name, city_data in result["city_data"].items():
        print(f"Creating maps for {city_name} ({len(city_data['locations'])} locations)...")
        for language in LANGUAGES:
            m = build_city_map(city_data, language)
            output_path = os.path.join(output_dir, f"{city_name}_{language}.html")
            m.save(output_path)

            file_size = os.path.getsize(output_path) / 1024
            print(f"  {output_path} ({file_size:.1f} KB)")
            written.append(output_path)

    print("Done!")
    return written


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    setup_logging()
    cities = argv or get_available_cities()
    written = generate_maps(cities)
    return 0 if written else 1


if __name__ == "__main__":
    sys.exit(main())
