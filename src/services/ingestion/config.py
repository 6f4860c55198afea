"""
Configuration constants for CSV ingestion
"""

from pathlib import Path

# Project Root Directory
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# File paths
DATA_DIR = PROJECT_ROOT / "data"
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"

# Encodings tried in order when reading CSV files
CSV_ENCODINGS = ["utf-8", "latin-1"]

# Rows sent to the model as examples during field mapping inference
SAMPLE_ROW_COUNT = 5

# Mappings below this confidence are treated as unmapped during normalization
MIN_MAPPING_CONFIDENCE = 0.0

# Marketplace listing requirements checked by ListingValidator (keys are lowercase)
MARKETPLACE_REQUIREMENTS = {
    "amazon": {
        "required_fields": ["title", "description", "price", "images", "bullet_points"],
        "max_title_length": 200,
        "max_description_length": 2000,
        "min_description_length": 100,
        "max_bullet_points": 5,
        "max_bullet_point_length": 200,
        "min_images": 1,
        "max_images": 9,
        "required_attributes": ["brand", "category", "condition"],
    },
    "shopify": {
        "required_fields": ["title", "description", "price", "images"],
        "max_title_length": 255,
        "max_description_length": 5000,
        "min_description_length": 150,
        "max_bullet_points": 10,
        "max_bullet_point_length": 500,
        "min_images": 1,
        "max_images": 250,
        "required_attributes": ["vendor", "product_type"],
    },
    "etsy": {
        "required_fields": ["title", "description", "price"],
        "max_title_length": 140,
        "max_description_length": 5000,
        "min_description_length": 100,
        "max_bullet_points": 8,
        "max_bullet_point_length": 500,
        "min_images": 1,
        "max_images": 10,
        "required_attributes": ["materials", "category"],
    },
    "default": {
        "required_fields": ["title", "description", "price"],
        "max_title_length": 200,
        "max_description_length": 2000,
        "min_description_length": 100,
        "max_bullet_points": 5,
        "max_bullet_point_length": 200,
        "min_images": 1,
        "max_images": 10,
        "required_attributes": [],
    },
}

MIN_TITLE_LENGTH = 10

# Score starts at 100; each finding subtracts its penalty
VALIDATION_PENALTIES = {
    "missing_field": 10,
    "title": 5,
    "description": 5,
    "bullet_points": 3,
    "images": 5,
    "price": 5,
    "attributes": 2,
}
VALID_SCORE_THRESHOLD = 70
