"""Configuration settings for the metagame analyzer.

Paths and classifier defaults can be overridden through environment variables;
format constants are fixed.
"""
import os

# Data locations
DATA_DIR = os.getenv('METAGAME_DATA_DIR', 'data')
TOURNAMENTS_DIR = os.getenv('METAGAME_TOURNAMENTS_DIR', os.path.join(DATA_DIR, 'tournaments'))
ARCHETYPES_FILE = os.getenv('METAGAME_ARCHETYPES_FILE', os.path.join(DATA_DIR, 'archetypes.yaml'))

# Classifier defaults
KNN_K = int(os.getenv('METAGAME_KNN_K', '5'))
MIN_CONFIDENCE = float(os.getenv('METAGAME_MIN_CONFIDENCE', '0.3'))

# Seconds before the report service reloads data from disk
CACHE_TTL = int(os.getenv('METAGAME_CACHE_TTL', '300'))

LOG_LEVEL = os.getenv('METAGAME_LOG_LEVEL', 'INFO').upper()

# Constructed format deck sizes
MAINBOARD_SIZE = 60
SIDEBOARD_SIZE = 15

UNKNOWN_ARCHETYPE = 'Unknown'
OTHER_ARCHETYPE = 'Other'
NO_REPORT = 'No Report'
