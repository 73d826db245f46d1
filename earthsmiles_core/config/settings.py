"""
Configuration settings for the Earth Smiles design platform
Semicircular bund (earth smile) sizing, layout planning and visualization

This module contains ONLY configuration constants.
Base dimensions and factors are adapted from the WOCAT Benin case study
(semicircular bunds, 1025 mm/year reference rainfall).
"""

from pathlib import Path
import os

# Project Root
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Output directories (created by the exporters on first write)
OUTPUT_DIR = Path(os.getenv('EARTHSMILES_OUTPUT_DIR', PROJECT_ROOT / 'earthsmiles_outputs'))
REPORTS_DIR = OUTPUT_DIR / 'reports'

# Logging
LOG_LEVEL = os.getenv('EARTHSMILES_LOG_LEVEL', 'INFO')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# MODEL VERSION TRACKING
MODEL_VERSION = "1.0.0"

# ======================== DESIGN CONSTANTS ========================

# Base dimensions (WOCAT Benin case study)
BASE_DIAMETER_M = 4.0                       # Semicircle diameter at reference conditions
BASE_DEPTH_M = 0.15                         # Excavation depth at zero rainfall
BASE_SPACING_M = 4.0                        # Spacing between rows

# Rainfall scaling
REFERENCE_RAINFALL_MM = 1025.0              # Benin reference annual rainfall
RAINFALL_FACTOR_CAP = 1.2                   # Wetter sites stop growing past 120%
DEPTH_RAINFALL_DIVISOR_MM = 2000.0          # depth = base * (1 + rainfall / divisor)

# Bund geometry
BUND_HEIGHT_BASE_M = 0.3                    # Bund height on flat ground
BUND_HEIGHT_SLOPE_COEFF = 0.008             # Extra height (m) per percent slope
BUND_HEIGHT_MAX_M = 0.7                     # Upper clamp for bund height
BUND_SIDE_ANGLE_RAD = 0.7                   # Side slope angle of the triangular bund section

# Layout
SPACING_OVERLAP_FRACTION = 0.5              # Share of spacing strip charged to each structure
M2_PER_HECTARE = 10000.0

# Slope factor steps: (threshold %, factor), ascending.
# The highest threshold exceeded wins.
SLOPE_FACTOR_THRESHOLDS = [
    (2.0, 0.95),
    (5.0, 0.90),
    (10.0, 0.85),
    (15.0, 0.75),
    (25.0, 0.60),
]
SLOPE_FACTOR_DEFAULT = 1.0

# Soil and land-use factors (unknown values fall back to the default)
SOIL_TYPES = ('loamy', 'sandy', 'clay')
SOIL_FACTORS = {
    'sandy': 1.1,      # Fast draining, larger catchment needed
    'clay': 0.9,       # Poor infiltration, smaller basins
    'loamy': 1.0,
}
SOIL_FACTOR_DEFAULT = 1.0

LAND_USES = ('orchard', 'pasture', 'cropland')
LAND_USE_FACTORS = {
    'pasture': 1.2,
    'cropland': 0.9,
    'orchard': 1.0,
}
LAND_USE_FACTOR_DEFAULT = 1.0

# Output precision
DIMENSION_DECIMALS = 2                      # Dimensions, areas and volumes
SPACING_DECIMALS = 1
FACTOR_DECIMALS = 3                         # Audit factors

# ======================== GEOMETRY HEURISTICS ========================

DEGREE_SCALE = 111320.0                     # Planar units per degree (approximate)
MIN_AREA_HECTARES = 0.1                     # Floor for polygon-derived areas
MIN_POLYGON_VERTICES = 3

# Slope from map bounds is a coarse placeholder, not a terrain model
SLOPE_BOUNDS_SCALE = 1000.0
SLOPE_COORD_ELEVATION_SCALE = 1000.0        # Pseudo-elevation per degree latitude
SLOPE_COORD_RUN_M = 100.0
SLOPE_ESTIMATE_MIN_PERCENT = 1.0
SLOPE_ESTIMATE_MAX_PERCENT = 30.0

# Slope classes: (lower bound exceeded, label), ascending
SLOPE_CLASSES = [
    (2.0, 'Gentle'),
    (5.0, 'Moderate'),
    (10.0, 'Rolling'),
    (15.0, 'Hilly'),
    (30.0, 'Steep'),
]
SLOPE_CLASS_DEFAULT = 'Flat'

# ======================== VIEW / RENDERING ========================

VIEW_SINGLE = 'single'
VIEW_LAYOUT = 'layout'
VIEW_CROSS_SECTION = 'cross-section'
VIEW_MODES = (VIEW_SINGLE, VIEW_LAYOUT, VIEW_CROSS_SECTION)

# Interaction
ZOOM_INTENSITY = 0.1                        # scale *= exp(+-0.1) per wheel step
ZOOM_MIN_SCALE = None                       # None = unbounded
ZOOM_MAX_SCALE = None

# Fit-to-canvas divisors (multiples of the diameter)
FIT_DIVISORS = {
    VIEW_SINGLE: 1.5,
    VIEW_LAYOUT: 6.0,
    VIEW_CROSS_SECTION: 2.0,
}

DEFAULT_CANVAS_SIZE = (800, 600)            # pixels
DEFAULT_DPI = 100

# Layout grid
LAYOUT_ROWS = 4
LAYOUT_COLS = 4
LAYOUT_COL_SPACING_RATIO = 1.2              # colSpacing = diameter * ratio
LAYOUT_ROW_SPACING_RATIO = 0.8              # rowSpacing = diameter * ratio + spacing

BUND_WIDTH_RATIO = 1.5                      # bund width / base spread per metre of height

# Dimension lines (local units = metres)
ARROWHEAD_HALF_WIDTH = 0.1
ARROWHEAD_LENGTH = 0.2
DIMENSION_OFFSET_M = 0.5

# Line widths and fonts (local units unless noted)
LINE_WIDTH_BUND = 0.1
LINE_WIDTH_GUIDE = 0.05
DASH_SPACING = [0.2, 0.2]
DASH_DIMENSION = [0.1, 0.1]
FONT_LABEL_SINGLE = 0.8
FONT_LABEL_LAYOUT = 0.6
FONT_LABEL_SECTION = 0.6
FONT_LABEL_DIMENSION = 0.5
FONT_LEGEND_PX = 14

# Legend placement (device pixels)
LEGEND_X_PX = 20
LEGEND_Y_PX = 30
LEGEND_SWATCH_PX = 15
LEGEND_ROW_PX = 25
INFO_ROW_PX = 20

# Color schemes for visualization (matplotlib-compatible)
COLOR_SCHEME = {
    'excavation': '#e8f4f8',
    'excavation_alt': '#d4eaf7',
    'bund': '#8b4513',
    'bund_outline': '#654321',
    'bund_section': '#a0522d',
    'water': '#0064ff4d',                   # rgba(0, 100, 255, 0.3)
    'guide': '#666666',
    'text': '#000000',
    'background': '#ffffff',
}

VIEW_TITLES = {
    VIEW_SINGLE: 'Single Structure View',
    VIEW_LAYOUT: 'Field Layout View',
    VIEW_CROSS_SECTION: 'Cross-Section View',
}

VIEW_LEGENDS = {
    VIEW_SINGLE: [
        ('excavation', 'Excavated Area'),
        ('bund', 'Earth Bund'),
        ('water', 'Water Retention'),
    ],
    VIEW_CROSS_SECTION: [
        ('excavation', 'Planting Area'),
        ('bund_section', 'Earth Bund'),
        ('water', 'Water Collection'),
    ],
}

# ======================== REPORTS ========================

REPORT_PROJECT_NAME = 'Earth Smiles Water Harvesting Project'
DEFAULT_LOCATION_NAME = 'Al Mafraq, Jordan'
RUNOFF_EFFICIENCY_RANGE = (0.70, 0.85)      # WOCAT field measurements
LAYOUT_PATTERN = 'Staggered (following contours)'

RECOMMENDATIONS = {
    'implementation': [
        'Construct bunds following natural contour lines',
        'Use local soil and materials for construction',
        'Apply organic mulch after installation',
        'Plant drought-resistant species in the catchment area',
    ],
    'maintenance': [
        'Inspect bunds after heavy rainfall events',
        'Replenish organic matter annually',
        'Clear sediment accumulation as needed',
        'Monitor plant growth and soil moisture',
    ],
    'monitoring': [
        'Track soil moisture levels monthly',
        'Measure plant survival and growth rates',
        'Document rainfall and runoff patterns',
        'Assess soil health improvements annually',
    ],
}

EQUATION_REFERENCES = [
    {
        'parameter': 'Diameter',
        'equation': 'D = D_base x S_f x R_f x Soil_f x LU_f',
        'description': 'Base diameter adjusted for slope, rainfall, soil and land-use factors',
        'source': 'WOCAT Benin Case Study (2023), adapted from pages 1-2',
    },
    {
        'parameter': 'Depth',
        'equation': 'd = d_base x (1 + P / 2000)',
        'description': 'Deeper basins for higher annual rainfall',
        'source': 'WOCAT Benin Case Study (2023)',
    },
    {
        'parameter': 'Bund Height',
        'equation': 'h = min(0.3 + 0.008 x slope, 0.7)',
        'description': 'Higher bunds on steeper ground, capped at 0.7 m',
        'source': 'WOCAT Technical Drawing, page 2',
    },
    {
        'parameter': 'Spacing',
        'equation': 'S = 4.0 m (between rows)',
        'description': 'Standard spacing for optimal water catchment',
        'source': 'WOCAT Technical Drawing, page 2',
    },
    {
        'parameter': 'Structures per Hectare',
        'equation': 'N = floor(10000 / (A_semicircle + S x D x 0.5))',
        'description': 'Based on area efficiency and spacing requirements',
        'source': 'FAO Water Harvesting Manual, Chapter 4',
    },
    {
        'parameter': 'Earthwork Volume',
        'equation': 'V = (pi x D / 2) x 0.5 x h x (h / tan(0.7))',
        'description': 'Triangular bund section swept along the semicircle',
        'source': 'FAO Water Harvesting Manual, Chapter 4',
    },
]
