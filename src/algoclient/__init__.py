"""algoclient.

Client library for hosted algorithms and the hosted data store.

Public API for calling algorithms, managing data directories and files, and
writing algorithm handlers.
"""

__version__ = "0.1.0"

from algoclient.algo.algorithm import Algorithm, AlgoOptions
from algoclient.algo.entrypoint import DecodedEntryPoint, EntryPoint
from algoclient.algo.registry import register_handler
from algoclient.client import Algorithmia
from algoclient.core.contracts import Binary, PayloadValue, ResponseEnvelope, Structured, Text
from algoclient.core.exceptions import AlgoClientException
from algoclient.data.acl import DataAcl, ReadAcl
from algoclient.data.dir import DataDir, DataDirItem, DataFileItem
from algoclient.data.file import DataFile

__all__ = [
    "AlgoClientException",
    "AlgoOptions",
    "Algorithm",
    "Algorithmia",
    "Binary",
    "DataAcl",
    "DataDir",
    "DataDirItem",
    "DataFile",
    "DataFileItem",
    "DecodedEntryPoint",
    "EntryPoint",
    "PayloadValue",
    "ReadAcl",
    "ResponseEnvelope",
    "Structured",
    "Text",
    "register_handler",
]
