"""Global pytest configuration."""

import os

# Never hit real provider APIs from tests
os.environ["GOOGLE_MAPS_API_KEY"] = ""
os.environ["GEOAPIFY_API_KEY"] = ""
