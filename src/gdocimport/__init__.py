"""gdocimport - Import Google Docs documents into eZ Platform RichText.

Fetches a document from the Google Docs API, converts its headings,
paragraphs, links, images and tables to the DocBook-based RichText format,
and creates or updates one content object per document, keyed by a
deterministic remote id.
"""

__version__ = "0.1.0"

from gdocimport.assets import AssetResolver
from gdocimport.dispatcher import BuildOutcome, Dispatcher
from gdocimport.errors import (
    APIError,
    AssetFetchError,
    AuthError,
    ConfigurationError,
    DocumentNotFoundError,
    FetchError,
    GdocImportError,
    RepositoryError,
    UnsupportedElementError,
)
from gdocimport.importer import Importer, ImportResult
from gdocimport.reconciler import ReconcileAction, Reconciler, ReconcileResult
from gdocimport.repository import (
    Draft,
    Found,
    ImageValue,
    InMemoryRepository,
    NotFound,
    Repository,
    RichTextValue,
    TargetContentObject,
)
from gdocimport.richtext import RichTextDocument
from gdocimport.source import SourceDocument, decode_document
from gdocimport.transport import (
    DocumentData,
    FetchedContent,
    GoogleDocsTransport,
    LocalFileTransport,
    Transport,
)

__all__ = [
    "APIError",
    "AssetFetchError",
    "AssetResolver",
    "AuthError",
    "BuildOutcome",
    "ConfigurationError",
    "Dispatcher",
    "DocumentData",
    "DocumentNotFoundError",
    "Draft",
    "FetchError",
    "FetchedContent",
    "Found",
    "GdocImportError",
    "GoogleDocsTransport",
    "ImageValue",
    "ImportResult",
    "Importer",
    "InMemoryRepository",
    "LocalFileTransport",
    "NotFound",
    "ReconcileAction",
    "ReconcileResult",
    "Reconciler",
    "Repository",
    "RepositoryError",
    "RichTextDocument",
    "RichTextValue",
    "SourceDocument",
    "TargetContentObject",
    "Transport",
    "UnsupportedElementError",
    "__version__",
    "decode_document",
]
