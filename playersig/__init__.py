from .base import DecipheredFormats, FormatFailure, FragmentPair
from .cache import FragmentCache, cache as default_cache
from .errors import (
    ExecutionFailed,
    ExtractionFailed,
    FetchFailed,
    FormatError,
    MalformedFormat,
    PlayerSigError,
    UnbalancedInputError,
)
from .config import Settings
from .executor import DukpyExecutor, Executor, NodeExecutor, make_executor
from .extractor import extract_fragments, extract_functions
from .applier import set_download_url
from .runner import Decipherer, decipher_formats, get_functions

__all__ = [
    "DecipheredFormats", "FormatFailure", "FragmentPair",
    "FragmentCache", "default_cache",
    "ExecutionFailed", "ExtractionFailed", "FetchFailed", "FormatError",
    "MalformedFormat", "PlayerSigError", "UnbalancedInputError",
    "Settings", "DukpyExecutor", "Executor", "NodeExecutor", "make_executor",
    "extract_fragments", "extract_functions", "set_download_url",
    "Decipherer", "decipher_formats", "get_functions",
]
