"""
Shared fixtures: a scripted stand-in for the Jikan client and for the
AllAnime provider, so no test touches the network.
"""
import threading
import time
from types import SimpleNamespace

import pytest

from app.cache import CacheStore
from app.proxy import JikanProxy
from app.ratelimit import RateGovernor

TEST_INTERVAL = 0.05


class FakeUpstream:
    """Synchronous fake with the ``UpstreamClient.get`` signature.

    ``script`` maps a key to a list of outcomes consumed in order; an outcome
    that is an exception instance is raised, anything else is returned.
    Unscripted keys answer ``{"data": [key]}``.
    """

    def __init__(self, script=None, delay=0.0):
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.delay = delay
        self.calls = []
        self.completed = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def get(self, key):
        with self._lock:
            self.calls.append(key)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            outcomes = self.script.get(key)
            outcome = outcomes.pop(0) if outcomes else {"data": [key]}
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            with self._lock:
                self.in_flight -= 1
                self.completed.append((key, time.monotonic()))


class FakeProvider:
    """Stand-in for ``AllAnimeProvider`` with canned search results"""

    def __init__(self, results=None, episodes=None, streams=None, video_error=None):
        self.video_error = video_error
        self.results = results if results is not None else [
            SimpleNamespace(identifier="abc123", name="Shingeki no Kyojin", languages=["sub", "dub"])
        ]
        self.episodes = episodes if episodes is not None else [1, 2, 3.5]
        self.streams = streams if streams is not None else [
            SimpleNamespace(
                url="https://cdn.example.com/ep1.m3u8",
                resolution=1080,
                language="sub",
                subtitle=None,
                referrer="https://allanime.example.com",
            )
        ]
        self.searches = []
        self.video_calls = []

    def get_search(self, query):
        self.searches.append(query)
        return self.results

    def get_episodes(self, identifier, lang):
        return self.episodes

    def get_video(self, identifier, episode, lang):
        self.video_calls.append((identifier, episode, lang))
        if self.video_error is not None:
            raise self.video_error
        return self.streams


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def make_proxy():
    def _make(client, interval=TEST_INTERVAL, ttl=300, clock=time.monotonic):
        return JikanProxy(
            client,
            cache=CacheStore(ttl_seconds=ttl, clock=clock),
            governor=RateGovernor(min_interval=interval),
        )
    return _make


@pytest.fixture
def proxy(upstream, make_proxy):
    return make_proxy(upstream)
