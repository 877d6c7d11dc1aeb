"""
Apply decipher and n-transform to a single format descriptor.

Order is fixed: signature first (only for ciphered formats), then `n`
(for every format). Each step is a no-op when its value or its fragment is
missing, so formats needing only one transform, or none, pass straight through.
"""
from __future__ import annotations
import logging
from typing import Optional
from urllib.parse import parse_qs

from yarl import URL

from .base import FormatDescriptor
from .errors import MalformedFormat
from .executor import Executor
from .extractor import N_ARGUMENT, SIG_ARGUMENT

log = logging.getLogger("playersig.applier")

DEFAULT_SIG_PARAM = "signature"


def _parse(url: str) -> URL:
    try:
        return URL(url)
    except ValueError as e:
        raise MalformedFormat(f"invalid url {url[:120]!r}: {e}") from e


def _with_query(url: URL, key: str, value: str) -> str:
    try:
        return str(url.update_query({key: value}))
    except ValueError as e:
        raise MalformedFormat(f"cannot set {key} on {url}: {e}") from e


def _first(args: dict[str, list[str]], key: str) -> Optional[str]:
    values = args.get(key)
    return values[0] if values else None


async def _decipher(cipher: str, script: Optional[str], executor: Executor) -> str:
    args = parse_qs(cipher, keep_blank_values=True)
    url = _first(args, "url")
    if not url:
        raise MalformedFormat("signatureCipher has no url parameter")
    s = _first(args, "s")
    if not s or not script:
        return url

    sig = await executor.execute(script, s, argument=SIG_ARGUMENT)
    sp = _first(args, "sp") or DEFAULT_SIG_PARAM
    return _with_query(_parse(url), sp, sig)


async def _ncode(url: str, script: Optional[str], executor: Executor) -> str:
    components = _parse(url)
    n = components.query.get("n")
    if not n or not script:
        return url

    transformed = await executor.execute(script, n, argument=N_ARGUMENT)
    return _with_query(components, "n", transformed)


async def set_download_url(
    format: FormatDescriptor,
    decipher_script: Optional[str],
    n_transform_script: Optional[str],
    executor: Executor,
):
    """Resolve `format["url"]` in place and drop the cipher fields.

    The descriptor is only written once both steps succeeded.
    """
    cipher = not format.get("url")
    source = format.get("url") or format.get("signatureCipher") or format.get("cipher")
    if not source:
        raise MalformedFormat(f"format {format.get('itag', '?')} has no url or cipher")

    url = await _decipher(source, decipher_script, executor) if cipher else source
    url = await _ncode(url, n_transform_script, executor)

    format["url"] = url
    format.pop("signatureCipher", None)
    format.pop("cipher", None)
