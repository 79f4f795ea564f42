# Prayer tracker: request tracking, local persistence, and tabbed views
#
# Components:
#   schema.py      - Data model (PrayerRequest, PrayerData, PrayerCategory, PrayerStatus)
#   backends.py    - Key-value persistence (JSON file, in-memory)
#   store.py       - PrayerStorage repository over a backend
#   validation.py  - Import schema validation and add-form checks
#   views.py       - Search/category/member filters and tab grouping
#   export.py      - Plain-text report and export file naming
#   config.py      - YAML configuration
#   cli.py         - prayer-tracker command line

__version__ = "1.0.0"
