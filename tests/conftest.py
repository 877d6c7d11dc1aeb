from __future__ import annotations
import asyncio

import pytest

from playersig.cache import FragmentCache

PLAYER_URL = "https://example.com/s/player/abc123/base.js"

HELPER_TABLE = (
    'var Hx={rv:function(a){a.reverse()},'
    'sw:function(a,b){var c=a[0];a[0]=a[b%a.length];a[b%a.length]=c},'
    'sp:function(a,b){a.splice(0,b)}};'
)
DECIPHER_DEF = 'var Kq=function(a){a=a.split("");Hx.rv(a,1);Hx.sp(a,1);return a.join("")};'
N_DEF = 'var Nz=function(a){var b=a.split(""),c="}{";b.push("_t");return b.join("")};'
DECIPHER_CALL = (
    'g.Rk=function(a,b,c){a.set("alr","yes");'
    'c&&(c=Kq(decodeURIComponent(c)),a.set(b,encodeURIComponent(c)))};'
)
N_CALL = 'g.Mn=function(a){var b;a.D&&(b=a.get("n"))&&(b=Wb[0](b),a.set("n",b))};'

PLAYER_JS = (
    'var _yt_player={};(function(g){var window=this;'
    + HELPER_TABLE
    + DECIPHER_DEF
    + N_DEF
    + 'var Wb=[Nz];'
    + DECIPHER_CALL
    + N_CALL
    + '})(_yt_player);'
)

EXPECTED_DECIPHER = (
    'var Hx={rv:function(a){a.reverse()},'
    'sw:function(a,b){var c=a[0];a[0]=a[b%a.length];a[b%a.length]=c},'
    'sp:function(a,b){a.splice(0,b)}};'
    'var Kq=function(a){a=a.split("");Hx.rv(a,1);Hx.sp(a,1);return a.join("")};'
    'Kq(sig);'
)
EXPECTED_N = 'var Nz=function(a){var b=a.split(""),c="}{";b.push("_t");return b.join("")};Nz(ncode);'


class StubFetcher:
    """Serves a fixed body and counts fetches."""

    def __init__(self, body: str = PLAYER_JS, delay: float = 0.01):
        self.body = body
        self.delay = delay
        self.calls = 0
        self.closed = False

    async def get(self, url: str, **kwargs) -> str:
        self.calls += 1
        await asyncio.sleep(self.delay)
        if isinstance(self.body, Exception):
            raise self.body
        return self.body

    async def close(self):
        self.closed = True


class StubExecutor:
    """Applies plain Python callables per argument name, recording every call."""

    def __init__(self, **transforms):
        self.transforms = transforms or {
            "sig": lambda s: s[::-1],
            "ncode": lambda n: n + "_t",
        }
        self.calls: list[tuple[str, str]] = []

    async def execute(self, fragment: str, token: str, *, argument: str) -> str:
        self.calls.append((argument, token))
        await asyncio.sleep(0)
        result = self.transforms[argument](token)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fetcher():
    return StubFetcher()


@pytest.fixture
def executor():
    return StubExecutor()


@pytest.fixture
def fragment_cache():
    return FragmentCache()
