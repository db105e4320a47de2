import aiohttp

import config


def build_client_timeout():
    return aiohttp.ClientTimeout(
        total=config.CRAWLER_HTTP_TOTAL_TIMEOUT_SECONDS,
        connect=config.CRAWLER_HTTP_CONNECT_TIMEOUT_SECONDS,
        sock_read=config.CRAWLER_HTTP_SOCK_READ_TIMEOUT_SECONDS,
    )


def create_session():
    return aiohttp.ClientSession(timeout=build_client_timeout(), headers=config.CRAWLER_HEADERS)
