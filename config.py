import os
from pathlib import Path

# Paths
BASE_DIR = Path(__file__).parent
CONTENT_DIR = Path(os.getenv("CONTENT_DIR", BASE_DIR / "content"))

# Site metadata
SITE_TITLE = os.getenv("SITE_TITLE", "Blog – Erno Vuori")
SITE_DESCRIPTION = "News content straight from the console"
META_DESCRIPTION = "News content straight from the console."
SITE_URL = os.getenv("SITE_URL", "https://blog.ernovuori.com").rstrip("/")
TWITTER_HANDLE = os.getenv("TWITTER_HANDLE", "@evuori")
# Path under SITE_URL, e.g. "/static/twitter-card.jpg"; no image tags when empty.
SOCIAL_IMAGE = os.getenv("SOCIAL_IMAGE", "")

# Page copy
LISTING_HEADING = "Latest"
LISTING_TAGLINE = "All the latest personal posts, straight from the console."
ABOUT_TAGLINE = "Who I am, What I do, Where I go."
NAV_LINKS = [
    {"label": "Blog", "url": "/", "target": "_self"},
    {"label": "About", "url": "/about", "target": "_self"},
]

# Rendering
EXCERPT_LENGTH = int(os.getenv("EXCERPT_LENGTH", "220"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
