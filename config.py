# config.py
import json
import os

# --- Crawler ---
CRAWLER_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36'
}

# --- HTTP Client Defaults ---
CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS = int(os.getenv('CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS', 60))
CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS = int(os.getenv('CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS', 15))
CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS = int(os.getenv('CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS', 45))
# Upper bound for one platform fetch, retries included. Exceeding it counts as a failed fetch.
CONTEST_FETCH_TIMEOUT_SECONDS = int(os.getenv('CONTEST_FETCH_TIMEOUT_SECONDS', 120))

# --- Contest APIs ---
CODEFORCES_API_URL = os.getenv('CODEFORCES_API_URL', 'https://codeforces.com/api/contest.list')
CODECHEF_API_URL = os.getenv('CODECHEF_API_URL', 'https://www.codechef.com/api/list/contests/all')
LEETCODE_GRAPHQL_URL = os.getenv('LEETCODE_GRAPHQL_URL', 'https://leetcode.com/graphql')
CODECHEF_LOCAL_TIMEZONE = os.getenv('CODECHEF_LOCAL_TIMEZONE', 'Asia/Kolkata')

# --- YouTube solutions ---
YOUTUBE_API_KEY = os.getenv('YOUTUBE_API_KEY')
YOUTUBE_PLAYLIST_ITEMS_URL = os.getenv(
    'YOUTUBE_PLAYLIST_ITEMS_URL', 'https://www.googleapis.com/youtube/v3/playlistItems'
)
# Only the first page is read. Videos past it are never matched.
YOUTUBE_PLAYLIST_PAGE_SIZE = int(os.getenv('YOUTUBE_PLAYLIST_PAGE_SIZE', 50))
SOLUTION_PLAYLIST_IDS = {
    'LeetCode': os.getenv('LEETCODE_PLAYLIST_ID'),
    'Codeforces': os.getenv('CODEFORCES_PLAYLIST_ID'),
    'CodeChef': os.getenv('CODECHEF_PLAYLIST_ID'),
}

# --- Sync cycle ---
SYNC_CYCLE_LOCK_KEY = int(os.getenv('SYNC_CYCLE_LOCK_KEY', 815_204_117))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# --- Web ---
def _parse_origins(raw):
    """Comma-separated list or JSON array; None when unset or blank."""
    text = (raw or '').strip()
    if not text:
        return None
    if text.startswith('['):
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(origin).strip() for origin in parsed if str(origin).strip()] or None
    return [origin.strip() for origin in text.split(',') if origin.strip()] or None


CORS_ALLOW_ORIGINS = _parse_origins(os.getenv('CORS_ALLOW_ORIGINS'))
CORS_SUPPORTS_CREDENTIALS = os.getenv('CORS_SUPPORTS_CREDENTIALS', '0').strip().lower() in {'1', 'true', 'yes', 'on'}
