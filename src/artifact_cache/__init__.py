"""artifact-cache: file-backed object cache with self-expiring artifacts.

Cache:
    ArtifactCache, CacheConfig, ArtifactInfo

Encoding:
    Complexity, analyze, UNLIMITED

Keys & TTL:
    validate_key, hash_key, artifact_path, normalize_ttl,
    EXPIRE_NEVER, EXPIRE_IMMEDIATELY

Storage:
    ArtifactReader, ArtifactWriter, MISSING

Producers:
    FileProducer, IniProducer, JsonProducer, OutputProducer

Protocols (extension points):
    CacheBackend, LogSink, Producer

Exceptions:
    ArtifactCacheError, InvalidArgumentError, InvalidKeyError,
    CacheArgumentError, CacheProducerError, CacheStorageError,
    DirectoryCreationError, CacheWriteError, CacheReadError,
    ProducerError, ProducerLoadError, ProducerParseError
"""

import logging
from importlib.metadata import PackageNotFoundError, version

from artifact_cache.cache import ArtifactCache
from artifact_cache.complexity import UNLIMITED, Complexity, analyze
from artifact_cache.exceptions import (
    ArtifactCacheError,
    CacheArgumentError,
    CacheProducerError,
    CacheReadError,
    CacheStorageError,
    CacheWriteError,
    DirectoryCreationError,
    InvalidArgumentError,
    InvalidKeyError,
    ProducerError,
    ProducerLoadError,
    ProducerParseError,
)
from artifact_cache.keys import artifact_path, hash_key, validate_key
from artifact_cache.models import ArtifactInfo, CacheConfig
from artifact_cache.producers import FileProducer, IniProducer, JsonProducer, OutputProducer
from artifact_cache.protocols import CacheBackend, LogSink, Producer
from artifact_cache.storage import MISSING, ArtifactReader, ArtifactWriter
from artifact_cache.ttl import EXPIRE_IMMEDIATELY, EXPIRE_NEVER, normalize_ttl

try:
    __version__ = version("artifact-cache")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "EXPIRE_IMMEDIATELY",
    "EXPIRE_NEVER",
    "MISSING",
    "UNLIMITED",
    "ArtifactCache",
    "ArtifactCacheError",
    "ArtifactInfo",
    "ArtifactReader",
    "ArtifactWriter",
    "CacheArgumentError",
    "CacheBackend",
    "CacheConfig",
    "CacheProducerError",
    "CacheReadError",
    "CacheStorageError",
    "CacheWriteError",
    "Complexity",
    "DirectoryCreationError",
    "FileProducer",
    "IniProducer",
    "InvalidArgumentError",
    "InvalidKeyError",
    "JsonProducer",
    "LogSink",
    "OutputProducer",
    "Producer",
    "ProducerError",
    "ProducerLoadError",
    "ProducerParseError",
    "__version__",
    "analyze",
    "artifact_path",
    "hash_key",
    "normalize_ttl",
    "validate_key",
]
