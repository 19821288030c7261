"""
Retryable Session to download content
"""
import datetime
import functools
from typing import Optional, Union

import requests
import requests.adapters
import requests_cache
import urllib3

from . import constants


def retryable_session(
    retries: int = 8,
    cache_name: Optional[str] = None,
) -> Union[requests.Session, requests_cache.CachedSession]:
    """
    Session with requests to allow for re-attempts at downloading missing data
    :param retries: How many retries to attempt
    :param cache_name: Cache small responses for a day under this name, if given
    :return: Session that does the downloading
    """
    session: Union[requests.Session, requests_cache.CachedSession]

    if cache_name:
        session = requests_cache.CachedSession(
            cache_name=str(constants.CACHE_PATH.joinpath(cache_name)),
            expire_after=datetime.timedelta(days=1),
            stale_if_error=True,
        )
    else:
        session = requests.Session()

    retry = urllib3.util.retry.Retry(
        total=retries,
        read=retries,
        connect=retries,
        backoff_factor=0.3,
        status_forcelist=(500, 502, 504),
    )

    adapter = requests.adapters.HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.request = functools.partial(session.request, timeout=30)  # type: ignore

    session.headers.update(
        {
            "User-Agent": "hlf-proximity",
            "Accept": "application/json;q=0.9,*/*;q=0.8",
        }
    )
    return session
